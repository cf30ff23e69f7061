import math
from typing import Optional

from placefinder.places.schemas import Pagination


def normalize_page(page: Optional[int]) -> int:
    return page if page is not None and page >= 1 else 1


def normalize_page_size(page_size: Optional[int], default: int) -> int:
    return page_size if page_size is not None and page_size >= 1 else default


def page_offset(page: int, page_size: int) -> int:
    return (page - 1) * page_size


def build_pagination(total_records: int, page: int, page_size: int) -> Pagination:
    """Page metadata; a page past the end is legal and simply has no next page."""
    total_pages = math.ceil(total_records / page_size)
    return Pagination(
        page=page,
        page_size=page_size,
        total_records=total_records,
        total_pages=total_pages,
        has_next_page=page < total_pages,
        has_previous_page=page > 1,
    )
