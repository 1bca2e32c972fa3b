# === FILE: listing_scout/parser/listing_parser.py ===
"""Record extraction for the board listing.

Extraction is lenient: a cell that is missing or does not parse yields a zero value
(``0`` or ``""``) and the row is still emitted. Only whole-document
problems are reported by the fetcher.

* :func:`extract_records` — one :class:`Record` per listing row.
* :func:`has_records` — whether a page lists anything at all.
* :func:`max_sequence_number` — newest sequence number on the landing page.
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import List, Optional

from bs4 import BeautifulSoup, NavigableString
from bs4.element import Tag

from listing_scout.config import ListingSelectors
from listing_scout.crawler.models import PageBatch, Record
from listing_scout.logger import logger

__all__: Sequence[str] = ("extract_records", "has_records", "max_sequence_number", "parse_int")

_DEFAULT_SELECTORS = ListingSelectors()


def parse_int(text: str) -> Optional[int]:
    """Parse a thousands-separated integer, ``None`` when it is not one.

    Only an optional sign followed by ASCII digits is accepted; underscores
    and non-ASCII digits that int() would take are rejected.
    """
    cleaned = text.replace(",", "").strip()
    digits = cleaned[1:] if cleaned[:1] in ("+", "-") else cleaned
    if not (digits.isascii() and digits.isdigit()):
        return None
    return int(cleaned)


def _own_text(tag: Tag) -> str:
    """Text of *tag* without the text of its child elements."""
    # comments and other NavigableString subclasses are not visible text
    return "".join(str(child) for child in tag.children if type(child) is NavigableString)


def _cell_text(row: Tag, selector: str) -> str:
    cell = row.select_one(selector)
    return cell.get_text() if cell is not None else ""


def _extract_row(row: Tag, selectors: ListingSelectors) -> Record:
    anchor = row.select_one(selectors.title)
    if anchor is not None:
        title = _own_text(anchor).strip()
        href = anchor.get("href")
        link = href if isinstance(href, str) else ""
    else:
        title, link = "", ""
    if not link:
        logger.debug("Row without link: %r", title)

    number_text = _cell_text(row, selectors.number)
    sequence_number = parse_int(number_text)
    if sequence_number is None:
        logger.debug("Non-numeric sequence number %r", number_text)
        sequence_number = 0

    view_text = _cell_text(row, selectors.view)
    view_count = parse_int(view_text)
    if view_count is None or view_count < 0:
        logger.debug("Non-numeric view count %r", view_text)
        view_count = 0

    return Record(
        sequence_number=sequence_number,
        title=title,
        author=_cell_text(row, selectors.user),
        view_count=view_count,
        link=link,
    )


def extract_records(doc: BeautifulSoup, selectors: ListingSelectors = _DEFAULT_SELECTORS) -> PageBatch:
    """Return the records of one listing page in document order."""
    if not has_records(doc, selectors):
        return []
    return [_extract_row(row, selectors) for row in doc.select(selectors.row)]


def has_records(doc: BeautifulSoup, selectors: ListingSelectors = _DEFAULT_SELECTORS) -> bool:
    """True when the listing body has rows and no "no results" marker."""
    if doc.select_one(selectors.no_result) is not None:
        return False
    return bool(doc.select(selectors.row))


def max_sequence_number(
    doc: BeautifulSoup, selectors: ListingSelectors = _DEFAULT_SELECTORS
) -> Optional[int]:
    """Largest sequence number among the summary rows, ``None`` if none parse."""
    numbers: List[int] = []
    for cell in doc.select(selectors.summary_number):
        value = parse_int(cell.get_text())
        if value is not None:
            numbers.append(value)
    return max(numbers) if numbers else None
