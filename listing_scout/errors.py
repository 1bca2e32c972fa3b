# File: listing_scout/errors.py
"""listing_scout.errors: Exception hierarchy for listing harvesting failures."""

from __future__ import annotations

from typing import Optional

__all__ = ["ListingScoutError", "FetchError", "LandingPageError"]


class ListingScoutError(Exception):
    """Base class for all errors raised by ListingScout."""


class FetchError(ListingScoutError):
    """A document could not be fetched or parsed within the retry budget."""

    def __init__(self, url: str, attempts: int, cause: Optional[BaseException] = None) -> None:
        self.url = url
        self.attempts = attempts
        self.cause = cause
        message = f"Failed to fetch {url} after {attempts} attempt(s)"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class LandingPageError(ListingScoutError):
    """The landing page carries no usable sequence number."""

    def __init__(self, url: str, selector: str) -> None:
        self.url = url
        self.selector = selector
        super().__init__(f"No sequence numbers found on {url} (selector: {selector!r})")
