# File: listing_scout/utils.py
"""listing_scout.utils: URL helpers for the paginated listing."""

from __future__ import annotations

from typing import Optional, Sequence
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

from listing_scout.logger import logger

__all__: Sequence[str] = ("build_page_url", "page_count_estimate")


def build_page_url(base_url: str, page_param: str, page: Optional[int] = None) -> str:
    """Return the URL of listing page *page*; ``None`` gives the landing page.

    Existing query parameters of *base_url* are preserved, an existing page
    parameter is replaced.
    """
    parsed = urlparse(str(base_url))
    qs = [(k, v) for k, v in parse_qsl(parsed.query, keep_blank_values=True) if k != page_param]
    if page is not None:
        qs.append((page_param, str(page)))
    url = urlunparse(parsed._replace(query=urlencode(qs)))
    logger.debug("Page URL: %s -> %s", page, url)
    return url


def page_count_estimate(max_sequence: int, page_size: int) -> int:
    """Upper bound on the page count: ``ceil(max_sequence / page_size)``."""
    if page_size < 1:
        raise ValueError("page_size must be >= 1")
    if max_sequence <= 0:
        return 0
    return -(-max_sequence // page_size)
