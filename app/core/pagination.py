"""
Page arithmetic shared by the catalog search endpoints.

Page numbers are 1-based. A result set of ``total_items`` rows split into
pages of ``page_size`` rows has ``ceil(total_items / page_size)`` pages, so an
empty result set has zero pages.
"""


def count_pages(total_items: int, page_size: int) -> int:
    """Number of pages needed for ``total_items`` rows."""
    if page_size < 1:
        raise ValueError(f"page_size must be positive, got {page_size}")
    if total_items < 0:
        raise ValueError(f"total_items cannot be negative, got {total_items}")
    return (total_items + page_size - 1) // page_size


def page_offset(page_number: int, page_size: int) -> int:
    """Index of the first row on ``page_number``."""
    return (page_number - 1) * page_size


def is_page_available(page_number: int, total_pages: int) -> bool:
    return 1 <= page_number <= total_pages
