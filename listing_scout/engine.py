# File: listing_scout/engine.py
"""listing_scout.engine: Orchestration of one harvesting run."""

from __future__ import annotations

from aiohttp import ClientSession, ClientTimeout

from listing_scout.aggregator import Dataset, fetch_all, reassemble
from listing_scout.config import ListingConfig
from listing_scout.crawler.fetcher import Fetcher
from listing_scout.logger import logger
from listing_scout.scanner import BoundaryScanner

__all__ = ["start_harvest"]


async def start_harvest(cfg: ListingConfig) -> Dataset:
    """
    Find the last page, harvest every page concurrently and reassemble.

    The boundary scan finishes before any page of the harvest is requested;
    both phases share one ClientSession.

    Parameters
    ----------
    cfg : ListingConfig
        Run configuration.

    Returns
    -------
    Dataset
        Records sorted by sequence number, with the pages that failed.

    Raises
    ------
    FetchError, LandingPageError
        When the boundary cannot be determined.
    """
    logger.info("Starting harvest of %s", cfg.base_url)
    timeout = ClientTimeout(total=cfg.timeout)
    async with ClientSession(timeout=timeout, headers={"User-Agent": cfg.user_agent}) as session:
        fetcher = Fetcher(session, cfg)
        last_page = await BoundaryScanner(fetcher, cfg).find_last_page()
        records, failed = await fetch_all(fetcher, cfg, last_page)
    dataset = reassemble(records, last_page, failed)
    logger.info("Harvested %d record(s) from %d page(s)", len(dataset), last_page)
    return dataset
