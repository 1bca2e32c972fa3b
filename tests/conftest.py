# File: tests/conftest.py
from __future__ import annotations

import asyncio
from collections import Counter
from typing import Iterable, List, Optional, Sequence

import pytest
import pytest_asyncio
from aiohttp import web
from bs4 import BeautifulSoup

from listing_scout.config import ListingConfig
from listing_scout.logger import logger

PAGE_SIZE = 30
NO_RESULT_ROW = '<tr><td colspan="5"><div class="no-result">No posts found.</div></td></tr>'


def render_row(
    seq: object,
    title: str = "Patch notes",
    author: str = "moogle",
    views: str = "1,234",
    href: Optional[str] = "default",
) -> str:
    """One board row; the title anchor carries a nested comment counter."""
    if href == "default":
        href = f"/board/ff14/4337/{seq}"
    href_attr = f' href="{href}"' if href is not None else ""
    return (
        '<tr class="lgtm">'
        f'<td class="num"><span>{seq}</span></td>'
        f'<td class="tit"><div><div><a{href_attr}> {title} <span class="con-comment">[3]</span></a></div></div></td>'
        f'<td class="user"><span>{author}</span></td>'
        f'<td class="view">{views}</td>'
        "</tr>"
    )


def render_page(rows: Iterable[str]) -> str:
    body = "".join(rows) or NO_RESULT_ROW
    return (
        "<html><body><div class=\"board-list\"><table>"
        "<thead><tr><th>No.</th></tr></thead>"
        f"<tbody>{body}</tbody></table></div></body></html>"
    )


def soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


class FakeBoard:
    """In-memory board: newest sequence numbers first, *page_size* per page."""

    def __init__(
        self,
        sequence_numbers: Iterable[int],
        page_size: int = PAGE_SIZE,
        failing_pages: Sequence[int] = (),
        delay: float = 0.0,
        landing: Optional[List[int]] = None,
    ) -> None:
        self.seqs = sorted(sequence_numbers, reverse=True)
        self.page_size = page_size
        self.failing_pages = set(failing_pages)
        self.landing = landing
        self.delay = delay
        self.in_flight = 0
        #: highest number of requests served at the same time
        self.peak = 0
        #: number of requests per page, ``None`` for the landing page
        self.requests: Counter[Optional[int]] = Counter()

    def page(self, n: int) -> List[int]:
        start = (n - 1) * self.page_size
        return self.seqs[start:start + self.page_size]

    def html(self, n: Optional[int]) -> str:
        if n is None:
            seqs = self.landing if self.landing is not None else self.page(1)
        else:
            seqs = self.page(n)
        return render_page(render_row(s, title=f"Post {s}") for s in seqs)

    async def handle(self, request: web.Request) -> web.Response:
        raw = request.query.get("p")
        page = int(raw) if raw else None
        self.requests[page] += 1
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if page in self.failing_pages:
                return web.Response(status=500)
            return web.Response(text=self.html(page), content_type="text/html")
        finally:
            self.in_flight -= 1

    def app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/board", self.handle)
        return app


def deleted_gap_board(**kwargs) -> FakeBoard:
    """301 posts ever written, 100..129 deleted: 271 left over 10 pages."""
    return FakeBoard((s for s in range(1, 302) if not 100 <= s < 130), **kwargs)


@pytest_asyncio.fixture
async def board_server(unused_tcp_port_factory):
    """Factory starting a FakeBoard on a free port; returns the listing URL."""
    runners: List[web.AppRunner] = []

    async def start(board: FakeBoard) -> str:
        port = unused_tcp_port_factory()
        runner = web.AppRunner(board.app())
        await runner.setup()
        site = web.TCPSite(runner, "127.0.0.1", port)
        await site.start()
        runners.append(runner)
        return f"http://127.0.0.1:{port}/board"

    yield start
    for runner in runners:
        await runner.cleanup()


@pytest.fixture()
def make_config():
    """Build a ListingConfig with a small retry budget for tests."""

    def _make(base_url: str = "http://example.com/board", **overrides) -> ListingConfig:
        params = {"base_url": base_url, "retry_times": 2, "timeout": 5.0}
        params.update(overrides)
        return ListingConfig(**params)

    return _make


@pytest.fixture()
def scout_log(caplog):
    """caplog attached to the non-propagating project logger."""
    logger.addHandler(caplog.handler)
    yield caplog
    logger.removeHandler(caplog.handler)
