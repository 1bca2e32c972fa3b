# File: listing_scout/aggregator.py
"""listing_scout.aggregator: Concurrent page harvesting and reassembly of the dataset."""

from __future__ import annotations

import asyncio
import contextlib
from dataclasses import asdict, dataclass, field
from typing import Any, AsyncIterator, Dict, Iterable, List, Optional, Tuple

from listing_scout.config import ListingConfig
from listing_scout.crawler.fetcher import Fetcher
from listing_scout.crawler.models import PageBatch, Record
from listing_scout.errors import FetchError
from listing_scout.logger import logger
from listing_scout.parser.listing_parser import extract_records
from listing_scout.utils import build_page_url

__all__ = ["CSV_HEADER", "Dataset", "fetch_all", "reassemble"]

CSV_HEADER: Tuple[str, ...] = ("No.", "Title", "User", "View", "Link")


@dataclass(slots=True)
class Dataset:
    """Records of the whole listing, ascending by sequence number."""

    records: List[Record] = field(default_factory=list)
    last_page: int = 0
    failed_pages: List[int] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.records)

    def rows(self) -> Iterable[List[str]]:
        """Yield the records as text rows in CSV_HEADER order."""
        for rec in self.records:
            yield [str(rec.sequence_number), rec.title, rec.author, str(rec.view_count), rec.link]

    def as_dict(self) -> Dict[str, Any]:
        return {
            "last_page": self.last_page,
            "failed_pages": list(self.failed_pages),
            "records": [asdict(rec) for rec in self.records],
        }


@contextlib.asynccontextmanager
async def _slot(semaphore: Optional[asyncio.Semaphore]) -> AsyncIterator[None]:
    if semaphore is None:
        yield
    else:
        async with semaphore:
            yield


async def _harvest_page(
    fetcher: Fetcher,
    config: ListingConfig,
    page: int,
    channel: asyncio.Queue[Tuple[int, Optional[PageBatch]]],
    semaphore: Optional[asyncio.Semaphore],
) -> None:
    """Fetch and extract one page, then hand the batch over to the channel.

    Exactly one item is put for every call, ``None`` marking a failed page.
    """
    batch: Optional[PageBatch] = None
    url = build_page_url(str(config.base_url), config.page_param, page)
    try:
        async with _slot(semaphore):
            logger.debug("Requesting %s", url)
            doc = await fetcher.fetch_document(url)
        batch = extract_records(doc, config.selectors)
    except FetchError as exc:
        logger.warning("Page %d skipped: %s", page, exc)
    finally:
        channel.put_nowait((page, batch))


async def fetch_all(
    fetcher: Fetcher, config: ListingConfig, last_page: int
) -> Tuple[List[Record], List[int]]:
    """Harvest pages 1..last_page concurrently.

    Returns the concatenated records in arrival order and the sorted list of
    pages that could not be fetched.
    """
    channel: asyncio.Queue[Tuple[int, Optional[PageBatch]]] = asyncio.Queue()
    semaphore = asyncio.Semaphore(config.concurrency) if config.concurrency else None
    tasks = [
        asyncio.create_task(_harvest_page(fetcher, config, page, channel, semaphore))
        for page in range(1, last_page + 1)
    ]

    merged: List[Record] = []
    failed: List[int] = []
    for _ in range(last_page):
        page, batch = await channel.get()
        if batch is None:
            failed.append(page)
        else:
            logger.debug("Page %d: %d record(s)", page, len(batch))
            merged.extend(batch)

    # re-raises anything other than FetchError from the page tasks
    await asyncio.gather(*tasks)
    failed.sort()
    logger.info(
        "Fetched %d record(s) from %d page(s), %d failed",
        len(merged), last_page - len(failed), len(failed),
    )
    return merged, failed


def reassemble(
    records: Iterable[Record], last_page: int = 0, failed_pages: Iterable[int] = ()
) -> Dataset:
    """Sort the merged records by sequence number into a Dataset."""
    ordered = sorted(records, key=lambda rec: rec.sequence_number)
    return Dataset(records=ordered, last_page=last_page, failed_pages=sorted(failed_pages))
