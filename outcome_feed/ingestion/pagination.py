"""Split a result count into page requests the API will accept."""

from dataclasses import dataclass

from .indices import Granularity

# Hard per-request cap on compositeIndex.
MAX_PAGE_SIZE = 500


@dataclass(frozen=True)
class PageDescriptor:
    """One bounded slice of the result set: `count` rows starting at `offset`."""
    count: int
    offset: int

    def as_params(self) -> dict:
        return {"count": self.count, "start": self.offset}


def paginate(total_results: int, max_page_size: int = MAX_PAGE_SIZE) -> list[PageDescriptor]:
    """Partition `total_results` into contiguous pages ordered by offset.

    Full pages come first; a trailing partial page is added only when there
    is a remainder, so no descriptor ever has a zero count.

    >>> paginate(1200, 500)
    [PageDescriptor(count=500, offset=0), PageDescriptor(count=500, offset=500), PageDescriptor(count=200, offset=1000)]
    """
    if total_results < 0:
        raise ValueError(f"total_results must be >= 0, got {total_results}")
    if max_page_size < 1:
        raise ValueError(f"max_page_size must be >= 1, got {max_page_size}")
    if max_page_size > MAX_PAGE_SIZE:
        raise ValueError(f"max_page_size must be <= {MAX_PAGE_SIZE}, got {max_page_size}")

    full_pages, remainder = divmod(total_results, max_page_size)
    pages = [
        PageDescriptor(count=max_page_size, offset=i * max_page_size)
        for i in range(full_pages)
    ]
    if remainder > 0:
        pages.append(PageDescriptor(count=remainder, offset=full_pages * max_page_size))
    return pages


def total_results_for(lookback_hours: int, granularity: Granularity) -> int:
    """Number of samples in a lookback window at the given granularity."""
    return lookback_hours * granularity.samples_per_hour
