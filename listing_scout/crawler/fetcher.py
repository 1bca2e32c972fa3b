# listing_scout/crawler/fetcher.py
"""
Fetcher module: issues HTTP requests and parses the responses into documents,
with a bounded retry budget.
"""
from __future__ import annotations

import asyncio
from typing import Optional

from aiohttp import ClientError, ClientSession
from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup

from listing_scout.config import ListingConfig
from listing_scout.errors import FetchError
from listing_scout.logger import logger

# transport failures and parse failures share one retry budget
_RETRYABLE = (ClientError, asyncio.TimeoutError, ParserRejectedMarkup, ValueError)


class Fetcher:
    """Fetches listing documents through a shared ClientSession."""

    def __init__(self, session: ClientSession, config: ListingConfig) -> None:
        self.session = session
        self.config = config

    async def fetch_document(self, url: str, retries: Optional[int] = None) -> BeautifulSoup:
        """
        Fetch *url* and parse it into a BeautifulSoup document.

        A transport error, a non-200 status or a parse failure consumes one
        attempt; *retries* extra attempts are made before FetchError is raised.
        The response is released on every path.
        """
        budget = self.config.retry_times if retries is None else retries
        attempts = 0
        while True:
            attempts += 1
            try:
                async with self.session.get(url) as resp:
                    if resp.status != 200:
                        raise ClientError(f"HTTP status {resp.status}")
                    body = await resp.read()
                return self._parse(body)
            except _RETRYABLE as exc:
                if attempts > budget:
                    raise FetchError(url, attempts, exc) from exc
                logger.debug("Retry %d/%d for %s: %s", attempts, budget, url, exc)
                if self.config.retry_delay:
                    await asyncio.sleep(self.config.retry_delay)

    @staticmethod
    def _parse(body: bytes) -> BeautifulSoup:
        return BeautifulSoup(body, "html.parser")
