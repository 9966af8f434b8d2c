# === FILE: webtree/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Set

from aiohttp import ClientSession

from webtree.config import CrawlerConfig
from webtree.crawler.fetcher import Fetcher, HttpClient, create_session
from webtree.crawler.link_extractor import ExtractMode
from webtree.crawler.models import PageNode, ResourceNode, WebNode
from webtree.logger import get_logger

__all__ = ("WebTree", "AsyncCrawler")


@dataclass(slots=True)
class WebTree:
    """Состояние обхода: корень, текущий слой и всё, что уже найдено."""

    root: PageNode
    frontier: List[WebNode] = field(default_factory=list)
    contained: List[WebNode] = field(default_factory=list)
    addresses: Set[str] = field(default_factory=set)
    depth: int = 0
    layers: List[int] = field(default_factory=list)

    @classmethod
    def from_seed(cls, address: str, extractor: ExtractMode = "regex") -> WebTree:
        root = PageNode(address, extractor)
        return cls(
            root=root,
            frontier=[root],
            contained=[root],
            addresses={root.address},
            layers=[1],
        )

    def advance(self, layer: List[WebNode]) -> None:
        """Make *layer* the new frontier and add it to the contained set."""
        self.frontier = layer
        self.contained.extend(layer)
        self.addresses.update(node.address for node in layer)
        if layer:
            self.depth += 1
            self.layers.append(len(layer))

    @property
    def pages(self) -> List[PageNode]:
        return [n for n in self.contained if isinstance(n, PageNode)]

    @property
    def resources(self) -> List[ResourceNode]:
        return [n for n in self.contained if isinstance(n, ResourceNode)]

    def walk(self) -> Iterator[WebNode]:
        """Depth-first walk from the root along ``children``."""
        stack: List[WebNode] = [self.root]
        while stack:
            node = stack.pop()
            yield node
            if isinstance(node, PageNode):
                stack.extend(reversed(node.children))


class AsyncCrawler:
    """Асинхронный послойный краулер в пределах одного хоста."""

    def __init__(self, config: CrawlerConfig, fetcher: Optional[HttpClient] = None) -> None:
        self.config = config
        self.fetcher: Optional[HttpClient] = fetcher
        self.session: Optional[ClientSession] = None
        self.logger = get_logger("crawler")

    async def __aenter__(self) -> AsyncCrawler:
        if self.fetcher is None:
            self.session = create_session(self.config.user_agent, self.config.timeout)
            self.fetcher = Fetcher(self.session)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()
            self.fetcher = None
        self.session = None

    async def crawl(self) -> WebTree:
        """Обходит слои, пока есть новые узлы и не достигнута max_depth."""
        if self.fetcher is None:
            raise RuntimeError("Crawler not started: use 'async with AsyncCrawler(...)'")

        tree = WebTree.from_seed(str(self.config.base_url), self.config.extractor)
        self.logger.info("Старт обхода: %s (max_depth=%d)", tree.root.address, self.config.max_depth)
        start = time.monotonic()

        while tree.depth < self.config.max_depth and tree.frontier:
            layer = await self.expand_layer(tree)
            if not layer:
                break

        duration = time.monotonic() - start
        self.logger.info(
            "Завершено: %d страниц, %d ресурсов, %d слоёв за %.2f с",
            len(tree.pages), len(tree.resources), tree.depth, duration,
        )
        return tree

    async def expand_layer(self, tree: WebTree) -> List[WebNode]:
        """
        Expand every frontier node concurrently and advance *tree*.

        Returns the new frontier, ordered by parent position then by match
        order regardless of which request finished first.
        """
        if self.fetcher is None:
            raise RuntimeError("Crawler not started: use 'async with AsyncCrawler(...)'")

        snapshot = frozenset(tree.addresses)
        results = await asyncio.gather(
            *(
                node.expand(tree.root, self.fetcher, snapshot, self.config.child_limit)
                for node in tree.frontier
            )
        )
        layer: List[WebNode] = [child for children in results for child in children]
        if self.config.dedupe_frontier:
            layer = self._dedupe(layer)

        self.logger.info(
            "Слой %d: %d узлов -> %d новых", tree.depth + 1, len(tree.frontier), len(layer)
        )
        tree.advance(layer)
        return layer

    @staticmethod
    def _dedupe(layer: List[WebNode]) -> List[WebNode]:
        seen: Set[str] = set()
        unique: List[WebNode] = []
        for node in layer:
            if isinstance(node, PageNode):
                if node.address in seen:
                    continue
                seen.add(node.address)
            unique.append(node)
        return unique
