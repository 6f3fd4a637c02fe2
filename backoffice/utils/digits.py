PERSIAN_DIGITS = "۰۱۲۳۴۵۶۷۸۹"
ARABIC_DIGITS = "٠١٢٣٤٥٦٧٨٩"

_TO_PERSIAN = str.maketrans("0123456789", PERSIAN_DIGITS)
_TO_ENGLISH = str.maketrans(PERSIAN_DIGITS + ARABIC_DIGITS, "0123456789" * 2)


def to_persian_digits(value) -> str:
    return str(value).translate(_TO_PERSIAN)


def to_english_digits(value: str) -> str:
    """Normalize Persian and Arabic-Indic digits typed by users."""
    return value.translate(_TO_ENGLISH)


def format_jalali_date(date: str, persian: bool = True) -> str:
    """YYYYMMDD -> YYYY/MM/DD. Anything else is passed through."""
    if len(date) == 8 and date.isdigit():
        date = f"{date[:4]}/{date[4:6]}/{date[6:]}"
    return to_persian_digits(date) if persian else date
