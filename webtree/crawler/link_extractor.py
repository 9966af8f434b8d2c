# webtree/crawler/link_extractor.py
"""
Link extraction and URI checks for WebTree.

Two extraction modes are available:

* ``regex`` – a deliberately loose pattern: an ``href`` must sit inside an
  ``<a ...>`` opening, a ``src`` attribute is taken from anywhere.
* ``html`` – BeautifulSoup walk over the document; ``href`` only from ``<a>``
  tags, ``src`` from any element carrying it.

Both produce :class:`LinkMatch` items in document order.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, Literal, Optional
from urllib.parse import urlsplit

from bs4 import BeautifulSoup
from bs4.element import Tag

__all__ = (
    "LINK_RE",
    "LinkMatch",
    "LinkMatches",
    "extract_links",
    "is_absolute_uri",
    "host_of",
)

ExtractMode = Literal["regex", "html"]

LINK_RE = re.compile(r'<a(.*?)href="(?P<href>.*?)"|src="(?P<src>.*?)"')

# characters that may not appear unescaped in a well-formed URI
_FORBIDDEN_CHARS = frozenset(' \t\r\n"<>\\^`{|}')
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")
_HOST_REQUIRED = frozenset(("http", "https", "ftp", "ws", "wss"))


@dataclass(frozen=True, slots=True)
class LinkMatch:
    """One raw match: an ``href`` candidate, a ``src`` candidate, or both."""

    href: Optional[str] = None
    src: Optional[str] = None


class LinkMatches:
    """Lazy, restartable sequence of matches over a single page text.

    Every ``iter()`` starts the extraction again from the beginning, so the
    same instance can be consumed more than once with identical results.
    """

    __slots__ = ("text", "mode")

    def __init__(self, text: str, mode: ExtractMode = "regex") -> None:
        if mode not in ("regex", "html"):
            raise ValueError(f"unknown extraction mode: {mode!r}")
        self.text = text
        self.mode = mode

    def __iter__(self) -> Iterator[LinkMatch]:
        if self.mode == "html":
            return _iter_soup(self.text)
        return _iter_regex(self.text)

    def __repr__(self) -> str:
        return f"LinkMatches(mode={self.mode!r}, chars={len(self.text)})"


def extract_links(text: str, mode: ExtractMode = "regex") -> LinkMatches:
    """Return the candidate link/resource references found in *text*."""
    return LinkMatches(text, mode)


def _iter_regex(text: str) -> Iterator[LinkMatch]:
    for match in LINK_RE.finditer(text):
        yield LinkMatch(href=match.group("href"), src=match.group("src"))


def _iter_soup(text: str) -> Iterator[LinkMatch]:
    soup = BeautifulSoup(text, "html.parser")
    for tag in soup.find_all(True):
        if not isinstance(tag, Tag):
            continue
        href = tag.get("href") if tag.name == "a" else None
        src = tag.get("src")
        href = href if isinstance(href, str) else None
        src = src if isinstance(src, str) else None
        if href is None and src is None:
            continue
        yield LinkMatch(href=href, src=src)


def is_absolute_uri(value: Optional[str]) -> bool:
    """
    True if *value* is a well-formed absolute URI.

    Requires a scheme, no characters that must be percent-encoded, a host for
    network schemes and, when present, a numeric port.
    """
    if not value or any(ch in _FORBIDDEN_CHARS for ch in value):
        return False
    try:
        parts = urlsplit(value)
        parts.port  # raises ValueError for a malformed port
    except ValueError:
        return False
    if not parts.scheme or not _SCHEME_RE.match(parts.scheme):
        return False
    if parts.scheme.lower() in _HOST_REQUIRED and not parts.hostname:
        return False
    # a bare "scheme:" carries no address
    return bool(parts.netloc or parts.path or parts.query)


def host_of(address: str) -> str:
    """Lower-cased host of *address*, ``""`` if it has none."""
    try:
        return urlsplit(address).hostname or ""
    except ValueError:
        return ""
