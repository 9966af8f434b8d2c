"""webtree.engine: запуск обхода для CLI и тестов."""

from __future__ import annotations

from typing import Optional

from webtree.config import CrawlerConfig
from webtree.crawler.crawler import AsyncCrawler, WebTree
from webtree.crawler.fetcher import HttpClient
from webtree.logger import logger

__all__ = ["start_crawl"]


async def start_crawl(cfg: CrawlerConfig, fetcher: Optional[HttpClient] = None) -> WebTree:
    """
    Запускает AsyncCrawler в контексте и возвращает построенное дерево.

    Parameters
    ----------
    cfg : CrawlerConfig
        Конфигурация обхода.
    fetcher : HttpClient, optional
        Готовый HTTP-клиент; по умолчанию краулер открывает свою сессию aiohttp.
    """
    logger.debug("Starting crawl of %s", cfg.base_url)
    async with AsyncCrawler(cfg, fetcher=fetcher) as crawler:
        return await crawler.crawl()
