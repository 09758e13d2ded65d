"""
HTTP transport for the crawler.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

import requests

DEFAULT_USER_AGENT = "scrape-characters/0.1.0"
HTML_CONTENT_TYPES: frozenset[str] = frozenset(("text/html", "application/xhtml+xml"))


class FetchError(Exception):
    """A page could not be used: network error, bad status or not HTML."""

    def __init__(
        self,
        url: str,
        reason: str,
        message: str,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.reason = reason
        self.status_code = status_code


@dataclass(frozen=True, slots=True)
class FetchResult:
    url: str
    final_url: str
    status_code: int
    headers: Dict[str, str]
    body: str


def is_html(content_type: Optional[str]) -> bool:
    """Check the media type part of a Content-Type header."""
    if not content_type:
        return False
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type in HTML_CONTENT_TYPES


class PageFetcher:
    """Fetches pages through a shared requests session."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout_s: float = 15.0,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self._session = session or requests.Session()
        self._session.headers["User-Agent"] = user_agent
        self._timeout_s = timeout_s

    def fetch(self, url: str) -> FetchResult:
        try:
            resp = self._session.get(url, timeout=self._timeout_s, allow_redirects=True)
        except requests.RequestException as e:
            raise FetchError(url, "connection_error", str(e)) from e

        if not 200 <= resp.status_code < 300:
            raise FetchError(
                url,
                "http_status",
                f"HTTP {resp.status_code} {resp.reason or ''}".strip(),
                status_code=resp.status_code,
            )

        content_type = resp.headers.get("content-type")
        if not is_html(content_type):
            raise FetchError(
                url,
                "content_type",
                f"expected HTML, got {content_type or 'no content type'}",
                status_code=resp.status_code,
            )

        return FetchResult(
            url=url,
            final_url=resp.url or url,
            status_code=resp.status_code,
            headers=dict(resp.headers),
            body=resp.text,
        )

    def close(self) -> None:
        self._session.close()
