"""Bounded paginated search over directory feeds.

Directory feeds only offer offset/length pagination, so searching means
sweeping pages and filtering locally. The sweep stops when enough candidates
were found, when the dataset runs out, or when the page bound is reached.
Matches past the last scanned page are never seen.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from .models import DirectoryPage

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 1000
CANDIDATE_MULTIPLIER = 3

RecordT = TypeVar("RecordT")

PageFetcher = Callable[[int, int], Awaitable[DirectoryPage[RecordT]]]


@dataclass
class ScanResult(Generic[RecordT]):
    """Unordered matches from one directory sweep."""

    matches: list[RecordT] = field(default_factory=list)
    pages_scanned: int = 0
    exhausted: bool = False


class DirectoryScanner(Generic[RecordT]):
    """Sweeps a directory feed page by page, keeping records that match."""

    def __init__(
        self,
        fetch_page: PageFetcher[RecordT],
        max_pages: int,
        page_size: int = DEFAULT_PAGE_SIZE,
        name: str = "directory",
    ):
        """Initialize the scanner.

        Args:
            fetch_page: Coroutine taking 1-based inclusive ``(start, end)`` rows
            max_pages: Hard bound on page fetches per scan
            page_size: Rows requested per page
            name: Directory name for logs
        """
        if max_pages < 1:
            raise ValueError("max_pages must be at least 1")
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self.fetch_page = fetch_page
        self.max_pages = max_pages
        self.page_size = page_size
        self.name = name

    async def scan(
        self, predicate: Callable[[RecordT], bool], limit: int
    ) -> ScanResult[RecordT]:
        """Collect matching records.

        Args:
            predicate: Match test applied to every record
            limit: Requested result count; the sweep stops early once
                ``CANDIDATE_MULTIPLIER * limit`` matches are held

        Returns:
            Matches in directory order

        Raises:
            UpstreamError: If any page fetch fails
        """
        target = max(limit, 1) * CANDIDATE_MULTIPLIER
        result: ScanResult[RecordT] = ScanResult()

        for page in range(1, self.max_pages + 1):
            start = (page - 1) * self.page_size + 1
            end = page * self.page_size
            directory_page = await self.fetch_page(start, end)
            result.pages_scanned = page
            result.matches.extend(r for r in directory_page.records if predicate(r))

            if len(result.matches) >= target:
                break
            if directory_page.row_count < self.page_size:
                result.exhausted = True
                break

        logger.debug(
            f"Scanned {result.pages_scanned} {self.name} pages, "
            f"{len(result.matches)} matches (exhausted={result.exhausted})"
        )
        return result
