from backoffice.models.factor import Tag
from backoffice.utils.digits import format_jalali_date, to_english_digits, to_persian_digits
from backoffice.workflow.naming import generate_factor_name

TAGS = [Tag(id="t1", name="فوری"), Tag(id="t2", name="عمده")]

def test_name_with_tags():
    name = generate_factor_name("علی", "رضایی", "14030512", ["t1", "t2"], TAGS)
    assert name == "علی رضایی  ۱۴۰۳/۰۵/۱۲  فوری-عمده"

def test_name_without_last_name_or_tags():
    assert generate_factor_name("علی", None, "14030512", [], TAGS) == "علی  ۱۴۰۳/۰۵/۱۲"

def test_unknown_tags_skipped():
    assert generate_factor_name("Ali", "", "14030512", ["missing", "t2"], TAGS) == "Ali  ۱۴۰۳/۰۵/۱۲  عمده"

def test_digit_conversion():
    assert to_persian_digits(1403) == "۱۴۰۳"
    assert to_english_digits("۱۲٣4") == "1234"
    assert format_jalali_date("14030512", persian=False) == "1403/05/12"
    assert format_jalali_date("1403/5/1", persian=False) == "1403/5/1"
