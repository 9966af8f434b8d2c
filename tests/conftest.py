# File: tests/conftest.py
import asyncio
from collections.abc import AsyncIterator
from typing import Dict, List, Optional, Union

import pytest
from aiohttp import ClientConnectionError, web

from webtree.config import CrawlerConfig
from webtree.crawler.fetcher import FetchResponse

SEED = "https://same.host/"


def html_response(
    url: str,
    body: Union[str, bytes],
    status: int = 200,
    content_type: Optional[str] = "text/html; charset=utf-8",
) -> FetchResponse:
    """Build a FetchResponse the way Fetcher.get would return it."""
    if isinstance(body, str):
        body = body.encode("utf-8")
    return FetchResponse(url=url, status=status, content_type=content_type, body=body)


class StubFetcher:
    """
    In-memory HttpClient: serves canned responses, raises for unknown URLs.
    Optional per-URL delays let tests control completion order.
    """

    def __init__(
        self,
        pages: Dict[str, Union[FetchResponse, Exception]],
        delays: Optional[Dict[str, float]] = None,
    ) -> None:
        self.pages = pages
        self.delays = delays or {}
        self.calls: List[str] = []
        self.completed: List[str] = []

    async def get(self, url: str) -> FetchResponse:
        self.calls.append(url)
        delay = self.delays.get(url)
        if delay:
            await asyncio.sleep(delay)
        self.completed.append(url)
        result = self.pages.get(url)
        if result is None:
            raise ClientConnectionError(f"cannot connect to {url}")
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture()
def basic_config() -> CrawlerConfig:
    """
    Return a basic valid CrawlerConfig for crawler tests.
    """
    return CrawlerConfig(
        base_url=SEED,
        max_depth=3,
        timeout=2.0,
        user_agent="TestAgent/1.0",
    )


async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()
