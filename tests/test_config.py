import json
from pathlib import Path

import pytest
from pydantic import ValidationError
from webtree.config import CrawlerConfig, load_config


def write_file(tmp_path: Path, content: str, suffix: str) -> Path:
    path = tmp_path / f"config{suffix}"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.mark.parametrize(
    "content,suffix,expect_exc",
    [
        ("base_url: http://example.com\nmax_depth: 2", ".yaml", None),
        (json.dumps({"base_url": "http://example.com", "max_depth": 2}), ".json", None),
        ("{}", ".json", ValidationError),
        ("base_url: [unclosed", ".yaml", ValueError),
        ("- just\n- a list", ".yml", TypeError),
        ("[1, 2]", ".json", TypeError),
        ("{not json", ".json", ValueError),
        ("base_url = 'http://example.com'", ".toml", ValueError),
    ],
)
def test_load_config_variants(tmp_path, content, suffix, expect_exc):
    cfg_path = write_file(tmp_path, content, suffix)
    if expect_exc:
        with pytest.raises(expect_exc):
            load_config(cfg_path)
    else:
        cfg = load_config(cfg_path)
        assert isinstance(cfg, CrawlerConfig)
        assert str(cfg.base_url).rstrip("/") == "http://example.com"
        assert cfg.max_depth == 2


def test_defaults():
    cfg = CrawlerConfig(base_url="https://www.pravda.ru/")
    assert cfg.max_depth == 3
    assert cfg.child_limit == 100
    assert cfg.user_agent == "Chrome/79"
    assert cfg.extractor == "regex"
    assert cfg.dedupe_frontier is False


@pytest.mark.parametrize(
    "field,value",
    [
        ("max_depth", -1),
        ("child_limit", 0),
        ("timeout", 0),
        ("user_agent", ""),
        ("extractor", "xpath"),
        ("unknown_option", 1),
    ],
)
def test_invalid_values_rejected(field, value):
    with pytest.raises(ValidationError):
        CrawlerConfig(base_url="https://example.com", **{field: value})


def test_non_http_seed_rejected():
    with pytest.raises(ValidationError):
        CrawlerConfig(base_url="ftp://example.com/")


def test_config_is_frozen():
    cfg = CrawlerConfig(base_url="https://example.com")
    with pytest.raises(ValidationError):
        cfg.max_depth = 5


def test_overrides_win_over_file(tmp_path):
    cfg_path = write_file(tmp_path, "base_url: http://example.com\nmax_depth: 2", ".yaml")
    cfg = load_config(cfg_path, max_depth=7, child_limit=None)
    assert cfg.max_depth == 7
    assert cfg.child_limit == 100


def test_load_config_default_missing(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(FileNotFoundError):
        load_config(None)


def test_load_config_default_present(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "default.yaml").write_text(
        "base_url: https://example.com\nuser_agent: Agent/2.0", encoding="utf-8"
    )
    cfg = load_config(None)
    assert cfg.user_agent == "Agent/2.0"


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.yaml")
