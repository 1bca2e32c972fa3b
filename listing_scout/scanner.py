# === FILE: listing_scout/scanner.py ===
"""
Boundary scanner: finds the last listing page that still holds records.

Sequence numbers grow by one per new record and deleted records leave gaps,
so ``ceil(max_sequence / page_size)`` can only overshoot the real page
count. Scanning downward from that estimate, the first page with records is
the last page: every page below it is denser.
"""
from __future__ import annotations

from listing_scout.config import ListingConfig
from listing_scout.crawler.fetcher import Fetcher
from listing_scout.errors import LandingPageError
from listing_scout.logger import logger
from listing_scout.parser.listing_parser import has_records, max_sequence_number
from listing_scout.utils import build_page_url, page_count_estimate

__all__ = ["BoundaryScanner"]


class BoundaryScanner:
    """Probes the listing from the estimated last page downward."""

    def __init__(self, fetcher: Fetcher, config: ListingConfig) -> None:
        self.fetcher = fetcher
        self.config = config
        self.probed: list[int] = []

    def page_url(self, page: int | None = None) -> str:
        return build_page_url(str(self.config.base_url), self.config.page_param, page)

    async def estimate_last_page(self) -> int:
        """Read the landing page and return the upper page estimate.

        Raises FetchError when the landing page cannot be fetched and
        LandingPageError when it shows no sequence number.
        """
        landing = self.page_url()
        doc = await self.fetcher.fetch_document(landing)
        max_seq = max_sequence_number(doc, self.config.selectors)
        if max_seq is None:
            raise LandingPageError(landing, self.config.selectors.summary_number)
        estimate = page_count_estimate(max_seq, self.config.page_size)
        logger.info("Newest sequence number %d, at most %d page(s)", max_seq, estimate)
        return estimate

    async def find_last_page(self) -> int:
        """Return the highest page index with at least one record, 0 if none."""
        estimate = await self.estimate_last_page()
        for page in range(estimate, 0, -1):
            self.probed.append(page)
            doc = await self.fetcher.fetch_document(self.page_url(page))
            if has_records(doc, self.config.selectors):
                logger.info("Last page with records: %d", page)
                return page
            logger.debug("Page %d is empty", page)
        logger.info("Listing is empty")
        return 0
