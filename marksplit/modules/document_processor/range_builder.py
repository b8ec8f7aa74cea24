"""Turn marker pages into the page ranges that become output documents."""

from typing import List, Sequence

from .models import PageRange


def build_page_ranges(marker_pages: Sequence[int], total_pages: int) -> List[PageRange]:
    """Partition ``1..total_pages`` around the marker pages.

    Marker pages are consumed: they never appear in any range. Every other
    page lands in exactly one range, and ranges come back in ascending order.

    Args:
        marker_pages: Ascending 1-based marker page numbers
        total_pages: Page count of the source document

    Returns:
        Maximal runs of non-marker pages, e.g. markers ``[3, 7]`` over 10 pages
        give ``[(1, 2), (4, 6), (8, 10)]``
    """
    ranges: List[PageRange] = []
    start = 1

    for page in marker_pages:
        if page > total_pages:
            # Marker past the reported page count; tools disagreed
            break
        if page > start:
            ranges.append(PageRange(start, page - 1))
        start = max(start, page + 1)

    if start <= total_pages:
        ranges.append(PageRange(start, total_pages))

    return ranges
