# File: tests/test_fetcher.py
from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from aiohttp import ClientSession, ClientTimeout, TCPConnector, web

from conftest import render_page, render_row
from listing_scout.crawler.fetcher import Fetcher
from listing_scout.errors import FetchError
from listing_scout.parser.listing_parser import extract_records


async def _serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", port)
    await site.start()
    try:
        yield f"http://127.0.0.1:{port}"
    finally:
        await runner.cleanup()


@pytest_asyncio.fixture
async def session() -> AsyncIterator[ClientSession]:
    async with ClientSession(timeout=ClientTimeout(total=0.3)) as s:
        yield s


def flaky_app(failures: int, status: int = 500) -> tuple[web.Application, dict[str, int]]:
    calls = {"n": 0}

    async def handle(_):
        calls["n"] += 1
        if calls["n"] <= failures:
            return web.Response(status=status)
        return web.Response(text=render_page([render_row(8)]), content_type="text/html")

    app = web.Application()
    app.router.add_get("/board", handle)
    return app, calls


@pytest.mark.asyncio()
async def test_fetch_parses_document(session, make_config, unused_tcp_port):
    app, calls = flaky_app(failures=0)
    async for base in _serve_app(app, unused_tcp_port):
        doc = await Fetcher(session, make_config()).fetch_document(f"{base}/board")
    assert [r.sequence_number for r in extract_records(doc)] == [8]
    assert calls["n"] == 1


@pytest.mark.asyncio()
async def test_retry_until_success(session, make_config, unused_tcp_port):
    app, calls = flaky_app(failures=2)
    async for base in _serve_app(app, unused_tcp_port):
        fetcher = Fetcher(session, make_config(retry_times=3))
        doc = await fetcher.fetch_document(f"{base}/board")
    assert extract_records(doc)
    assert calls["n"] == 3


@pytest.mark.asyncio()
@pytest.mark.parametrize("retries", [0, 1, 4])
async def test_retry_budget_exhausted(session, make_config, unused_tcp_port, retries):
    app, calls = flaky_app(failures=100, status=404)
    async for base in _serve_app(app, unused_tcp_port):
        fetcher = Fetcher(session, make_config(retry_times=20))
        with pytest.raises(FetchError) as info:
            await fetcher.fetch_document(f"{base}/board", retries=retries)
    assert calls["n"] == retries + 1
    assert info.value.attempts == retries + 1
    assert "404" in str(info.value)


@pytest.mark.asyncio()
async def test_connection_refused_is_retried(session, make_config, unused_tcp_port):
    # nothing listens on the port
    fetcher = Fetcher(session, make_config(retry_times=1))
    with pytest.raises(FetchError) as info:
        await fetcher.fetch_document(f"http://127.0.0.1:{unused_tcp_port}/board")
    assert info.value.attempts == 2


@pytest.mark.asyncio()
async def test_timeout_counts_as_transport_failure(session, make_config, unused_tcp_port):
    calls = {"n": 0}

    async def slow(_):
        calls["n"] += 1
        await asyncio.sleep(0.6)
        return web.Response(text=render_page([]), content_type="text/html")

    app = web.Application()
    app.router.add_get("/board", slow)
    async for base in _serve_app(app, unused_tcp_port):
        fetcher = Fetcher(session, make_config(retry_times=1))
        with pytest.raises(FetchError):
            await fetcher.fetch_document(f"{base}/board")
    assert calls["n"] == 2


@pytest.mark.asyncio()
async def test_parse_failure_is_retried(session, make_config, unused_tcp_port):
    class FlakyParser(Fetcher):
        parsed = 0

        @staticmethod
        def _parse(body):
            FlakyParser.parsed += 1
            if FlakyParser.parsed == 1:
                raise ValueError("garbled markup")
            return Fetcher._parse(body)

    app, calls = flaky_app(failures=0)
    async for base in _serve_app(app, unused_tcp_port):
        doc = await FlakyParser(session, make_config(retry_times=1)).fetch_document(f"{base}/board")
    assert extract_records(doc)
    assert calls["n"] == 2


@pytest.mark.asyncio()
async def test_responses_released_on_every_path(make_config, unused_tcp_port):
    class BrokenParser(Fetcher):
        @staticmethod
        def _parse(body):
            raise ValueError("garbled markup")

    async def ok(_):
        return web.Response(text=render_page([render_row(5)]), content_type="text/html")

    async def error(_):
        return web.Response(status=500, text="upstream down")

    app = web.Application()
    app.router.add_get("/board", ok)
    app.router.add_get("/error", error)
    cfg = make_config(retry_times=2)
    async for base in _serve_app(app, unused_tcp_port):
        # a single pooled connection: any unreleased response blocks the next request
        async with ClientSession(connector=TCPConnector(limit=1)) as session:
            fetcher = Fetcher(session, cfg)
            await asyncio.wait_for(fetcher.fetch_document(f"{base}/board"), timeout=2)
            with pytest.raises(FetchError):
                await asyncio.wait_for(fetcher.fetch_document(f"{base}/error"), timeout=2)
            with pytest.raises(FetchError):
                await asyncio.wait_for(
                    BrokenParser(session, cfg).fetch_document(f"{base}/board"), timeout=2
                )
            doc = await asyncio.wait_for(fetcher.fetch_document(f"{base}/board"), timeout=2)
    assert [r.sequence_number for r in extract_records(doc)] == [5]
