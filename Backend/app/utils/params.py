from typing import Any

from app.config import FEED_DEFAULT_LIMIT, FEED_MAX_LIMIT

# signed 64-bit, the widest integer column/bind the database drivers accept
MAX_DB_INT = 2**63 - 1
MAX_PAGE = MAX_DB_INT // max(FEED_MAX_LIMIT, 1)


def _to_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def parse_int(value: Any) -> int | None:
    """Integer id from a request parameter; None when unparseable or too wide for the database."""
    number = _to_int(value)
    if number is None or not -MAX_DB_INT - 1 <= number <= MAX_DB_INT:
        return None
    return number


def normalize_page(value: Any) -> int:
    page = _to_int(value)
    if page is None or page < 1:
        return 1
    # keeps (page - 1) * limit inside a 64-bit offset
    return min(page, MAX_PAGE)


def normalize_limit(value: Any, *, default: int = FEED_DEFAULT_LIMIT, maximum: int = FEED_MAX_LIMIT) -> int:
    limit = _to_int(value)
    if limit is None or limit <= 0:
        limit = default
    return min(limit, maximum)
