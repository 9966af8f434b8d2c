# File: webtree/aggregator.py
"""webtree.aggregator: сборка отчёта по результатам обхода."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, TypedDict

from webtree.crawler.crawler import WebTree
from webtree.crawler.models import PageNode, WebNode


class NodeInfo(TypedDict):
    """Узел дерева в сериализуемом виде."""

    url: str
    kind: str
    children: List["NodeInfo"]


@dataclass(slots=True)
class CrawlReport:
    """Результаты обхода: страницы, ресурсы, размеры слоёв и само дерево."""

    seed: str
    depth: int = 0
    layers: List[int] = field(default_factory=list)
    pages: List[str] = field(default_factory=list)
    resources: List[str] = field(default_factory=list)
    tree: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def json(self, *, pretty: bool = False) -> str:
        """Возвращает JSON-представление отчёта."""
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2 if pretty else None)


def node_to_dict(node: WebNode) -> NodeInfo:
    """Рекурсивно преобразует узел и его потомков в словарь."""
    children = node.children if isinstance(node, PageNode) else []
    return {
        "url": node.address,
        "kind": node.kind,
        "children": [node_to_dict(child) for child in children],
    }


def aggregate_results(tree: WebTree) -> CrawlReport:
    """Собирает CrawlReport из готового дерева обхода."""
    return CrawlReport(
        seed=tree.root.address,
        depth=tree.depth,
        layers=list(tree.layers),
        pages=[node.address for node in tree.pages],
        resources=[node.address for node in tree.resources],
        tree=dict(node_to_dict(tree.root)),
    )


__all__ = ["CrawlReport", "NodeInfo", "aggregate_results", "node_to_dict"]
