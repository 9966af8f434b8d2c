import asyncio
import json

import pytest
from conftest import SEED, StubFetcher, html_response

from webtree.aggregator import aggregate_results
from webtree.config import CrawlerConfig
from webtree.engine import start_crawl
from webtree.report import render_html, render_json


@pytest.fixture()
def tree():
    body = (
        '<a href="https://same.host/about">About</a>'
        '<img src="https://cdn.host/logo.png">'
    )
    fetcher = StubFetcher({
        SEED: html_response(SEED, body),
        "https://same.host/about": html_response("https://same.host/about", "<p>about</p>"),
    })
    cfg = CrawlerConfig(base_url=SEED, max_depth=3)
    return asyncio.run(start_crawl(cfg, fetcher=fetcher))


def test_aggregate_results(tree):
    report = aggregate_results(tree)

    assert report.seed == SEED
    assert report.depth == 1
    assert report.layers == [1, 2]
    assert report.pages == [SEED, "https://same.host/about"]
    assert report.resources == ["https://cdn.host/logo.png"]
    assert report.tree == {
        "url": SEED,
        "kind": "page",
        "children": [
            {"url": "https://same.host/about", "kind": "page", "children": []},
            {"url": "https://cdn.host/logo.png", "kind": "resource", "children": []},
        ],
    }


def test_report_json_round_trip(tree):
    report = aggregate_results(tree)
    assert json.loads(report.json()) == report.to_dict()
    assert report.json(pretty=True).startswith("{\n  ")


def test_render_json(tree, tmp_path):
    out = render_json(aggregate_results(tree), tmp_path / "nested" / "tree.json")
    assert out.exists()
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["pages"] == [SEED, "https://same.host/about"]


def test_render_html_with_bundled_template(tree, tmp_path):
    out = render_html(aggregate_results(tree), None, tmp_path / "report.html")
    html = out.read_text(encoding="utf-8")
    assert '<a href="https://same.host/about">' in html
    assert "https://cdn.host/logo.png" in html


def test_render_html_with_custom_template(tree, tmp_path):
    (tmp_path / "report.html.j2").write_text("{{ seed }}|{{ pages | length }}", encoding="utf-8")
    out = render_html(aggregate_results(tree), tmp_path, tmp_path / "out.html")
    assert out.read_text(encoding="utf-8") == f"{SEED}|2"
