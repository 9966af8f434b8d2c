# webtree/crawler/fetcher.py
"""
Fetcher module: the HTTP capability used by page expansion.

A :class:`Fetcher` wraps one shared :class:`aiohttp.ClientSession`. The session
(default headers, timeout) is configured once by whoever creates it; the
fetcher never touches it while requests are in flight.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from aiohttp import ClientSession, ClientTimeout, hdrs

__all__ = (
    "FetchResponse",
    "HttpClient",
    "Fetcher",
    "create_session",
    "parse_charset",
    "decode_body",
)


@dataclass(frozen=True, slots=True)
class FetchResponse:
    """Status, raw Content-Type header and body bytes of one GET."""

    url: str
    status: int
    content_type: Optional[str]
    body: bytes

    @property
    def charset(self) -> Optional[str]:
        return parse_charset(self.content_type)

    def text(self) -> str:
        """Body decoded with the declared charset, UTF-8 otherwise."""
        return decode_body(self.body, self.charset)


class HttpClient(Protocol):
    async def get(self, url: str) -> FetchResponse: ...


def parse_charset(content_type: Optional[str]) -> Optional[str]:
    """
    Extract the ``charset`` parameter of a Content-Type header value.

    >>> parse_charset('text/html; charset="windows-1251"')
    'windows-1251'
    """
    if not content_type:
        return None
    for param in content_type.split(";")[1:]:
        key, _, value = param.partition("=")
        if key.strip().lower() == "charset":
            value = value.strip().strip("\"'")
            return value or None
    return None


def decode_body(body: bytes, charset: Optional[str]) -> str:
    """
    Decode *body* with the named *charset* (UTF-8 when None).

    Invalid byte sequences are replaced; an unknown charset name raises
    :class:`LookupError`.
    """
    return body.decode(charset or "utf-8", errors="replace")


def create_session(user_agent: str, timeout: float) -> ClientSession:
    """Build the crawl-wide session: fixed User-Agent, per-request timeout."""
    return ClientSession(
        timeout=ClientTimeout(total=timeout),
        headers={hdrs.USER_AGENT: user_agent},
        raise_for_status=False,
    )


class Fetcher:
    """Performs GET requests on a shared session and buffers the body."""

    def __init__(self, session: ClientSession) -> None:
        self.session = session

    async def get(self, url: str) -> FetchResponse:
        """
        GET *url* and return the whole response.

        Transport errors (:class:`aiohttp.ClientError`,
        :class:`asyncio.TimeoutError`) propagate to the caller.
        """
        async with self.session.get(url) as resp:
            body = await resp.read()
            return FetchResponse(
                url=str(resp.url),
                status=resp.status,
                content_type=resp.headers.get(hdrs.CONTENT_TYPE),
                body=body,
            )
