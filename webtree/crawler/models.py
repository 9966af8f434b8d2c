# webtree/crawler/models.py
"""
Data models for the WebTree crawler: the nodes of the discovery graph.

A :class:`PageNode` is fetched and expanded into children; a
:class:`ResourceNode` (image, script, stylesheet, ...) is a leaf.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from http import HTTPStatus
from typing import AbstractSet, ClassVar, Iterable, List, Optional

from webtree.crawler.fetcher import HttpClient
from webtree.crawler.link_extractor import (
    ExtractMode,
    LinkMatch,
    extract_links,
    host_of,
    is_absolute_uri,
)
from webtree.logger import get_logger

__all__ = ("WebNode", "PageNode", "ResourceNode")

log = get_logger("nodes")


class WebNode(ABC):
    """A discovered address. The address never changes once set."""

    __slots__ = ("_address",)
    kind: ClassVar[str] = "node"

    def __init__(self, address: str) -> None:
        self._address = str(address)

    @property
    def address(self) -> str:
        return self._address

    @property
    def host(self) -> str:
        return host_of(self._address)

    @abstractmethod
    async def expand(
        self,
        root: WebNode,
        client: HttpClient,
        contained: AbstractSet[str],
        limit: Optional[int] = None,
    ) -> List[WebNode]:
        """Discover the children of this node; never raises."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._address!r})"


class ResourceNode(WebNode):
    """Non-HTML asset referenced by a ``src`` attribute. Never crawled."""

    __slots__ = ()
    kind = "resource"

    async def expand(self, root, client, contained, limit=None) -> List[WebNode]:
        return []


class PageNode(WebNode):
    """Fetchable page; its children are filled by its own expansion."""

    __slots__ = ("children", "extractor")
    kind = "page"

    def __init__(self, address: str, extractor: ExtractMode = "regex") -> None:
        super().__init__(address)
        self.children: List[WebNode] = []
        self.extractor: ExtractMode = extractor

    async def expand(
        self,
        root: WebNode,
        client: HttpClient,
        contained: AbstractSet[str],
        limit: Optional[int] = None,
    ) -> List[WebNode]:
        """
        Fetch the page and register the links it contains as children.

        Parameters
        ----------
        root
            Seed node of the tree the page belongs to.
        client
            Shared HTTP client, see :class:`webtree.crawler.fetcher.Fetcher`.
        contained
            Addresses already known to the crawl. Only read, never mutated.
        limit
            Maximum number of matches to consume; ``None``, ``0`` or ``-1``
            means no limit.

        Non-text responses and 404 pages give no children. Any failure ends
        the expansion with whatever was registered so far.
        """
        try:
            response = await client.get(self.address)
            content_type = response.content_type
            if not content_type or "text" not in content_type.lower():
                log.debug("Skip %s: content type %r", self.address, content_type)
                return []

            text = response.text()

            if response.status == HTTPStatus.NOT_FOUND:
                log.debug("Skip %s: HTTP 404", self.address)
                return []

            self._register(extract_links(text, self.extractor), contained, limit)
        except Exception as exc:
            log.debug("Expansion of %s failed: %s: %s", self.address, type(exc).__name__, exc)

        return list(self.children)

    def _register(
        self,
        matches: Iterable[LinkMatch],
        contained: AbstractSet[str],
        limit: Optional[int],
    ) -> None:
        host = self.host
        consumed = 0
        for match in matches:
            if limit is not None and limit > 0 and consumed >= limit:
                break

            href = match.href
            if is_absolute_uri(href) and href not in contained and host_of(href) == host:
                self.children.append(PageNode(href, self.extractor))

            if is_absolute_uri(match.src):
                self.children.append(ResourceNode(match.src))

            consumed += 1
