"""In-memory stand-ins for the network and the cancellation event."""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Union

import requests

from scrape_characters.fetcher import FetchError, FetchResult

Page = Union[str, int, Exception]


def html_page(*hrefs: str, text: str = "") -> str:
    anchors = "".join(f'<a href="{href}">{text}</a>' for href in hrefs)
    return f"<html><body><p>{text}</p>{anchors}</body></html>"


class FakeFetcher:
    """Serves pages from a dict: HTML strings, HTTP status codes or exceptions.

    URLs that are not in the dict answer 404.
    """

    def __init__(
        self,
        pages: Dict[str, Page],
        on_fetch: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.pages = pages
        self.on_fetch = on_fetch
        self.calls: List[str] = []

    def fetch(self, url: str) -> FetchResult:
        self.calls.append(url)
        if self.on_fetch is not None:
            self.on_fetch(url)

        page = self.pages.get(url, 404)
        if isinstance(page, Exception):
            raise page
        if isinstance(page, int):
            raise FetchError(url, "http_status", f"HTTP {page}", status_code=page)
        return FetchResult(
            url=url,
            final_url=url,
            status_code=200,
            headers={"content-type": "text/html; charset=utf-8"},
            body=page,
        )


class FakeEvent:
    """Records rate-limit waits instead of sleeping."""

    def __init__(self) -> None:
        self._flag = False
        self.waits: List[float] = []

    def is_set(self) -> bool:
        return self._flag

    def set(self) -> None:
        self._flag = True

    def wait(self, timeout: Optional[float] = None) -> bool:
        self.waits.append(timeout)
        return self._flag


def connection_refused(url: str) -> FetchError:
    """What PageFetcher raises when the transport fails."""
    cause = requests.ConnectionError("connection refused")
    error = FetchError(url, "connection_error", str(cause))
    error.__cause__ = cause
    return error
