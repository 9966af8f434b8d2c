"""webtree.crawler: node model, link extraction, HTTP fetching and the layered driver."""

from webtree.crawler.crawler import AsyncCrawler, WebTree
from webtree.crawler.models import PageNode, ResourceNode, WebNode

__all__ = ["AsyncCrawler", "WebTree", "WebNode", "PageNode", "ResourceNode"]
