# listing_scout/crawler/models.py
"""
Data models for the ListingScout crawler.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True, slots=True)
class Record:
    """One entry of the listing, immutable once extracted."""

    sequence_number: int
    title: str
    author: str
    view_count: int
    link: str


#: Records produced by a single page fetch.
PageBatch = List[Record]
