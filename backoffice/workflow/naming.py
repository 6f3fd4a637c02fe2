from typing import Iterable, List, Optional
from backoffice.models.factor import Tag
from backoffice.utils.digits import format_jalali_date

NAME_SEPARATOR = "  "


def generate_factor_name(
    first_name: str,
    last_name: Optional[str],
    date: str,
    tag_ids: Iterable[str],
    available_tags: List[Tag]
) -> str:
    """
    Build a factor name from the customer's name, the factor date and its tags:

        "<first> <last>  <YYYY/MM/DD>  <tag1-tag2>"

    Tag ids missing from `available_tags` are skipped; the tag part is
    omitted when no tag resolves.
    """
    customer_name = f"{first_name} {last_name or ''}".strip()
    names_by_id = {tag.id: tag.name for tag in available_tags}
    tag_names = "-".join(names_by_id[t] for t in tag_ids if names_by_id.get(t))

    parts = [customer_name, format_jalali_date(date)]
    if tag_names:
        parts.append(tag_names)
    return NAME_SEPARATOR.join(parts)
