from unittest.mock import MagicMock

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from scrape_characters.fetcher import FetchError, PageFetcher, is_html

URL = "https://example.com/"


def _session(status=200, content_type="text/html; charset=utf-8", text="<p>hi</p>", url=URL):
    resp = MagicMock()
    resp.status_code = status
    resp.reason = "OK" if status == 200 else "Error"
    resp.headers = CaseInsensitiveDict({"Content-Type": content_type} if content_type else {})
    resp.text = text
    resp.url = url

    session = MagicMock()
    session.headers = {}
    session.get.return_value = resp
    return session


def test_fetch_returns_html_body():
    session = _session(url="https://example.com/home")
    fetcher = PageFetcher(session, timeout_s=3, user_agent="test-agent")

    result = fetcher.fetch(URL)

    assert result.body == "<p>hi</p>"
    assert result.status_code == 200
    assert result.final_url == "https://example.com/home"
    assert session.headers["User-Agent"] == "test-agent"
    session.get.assert_called_once_with(URL, timeout=3, allow_redirects=True)


def test_non_2xx_status_is_a_fetch_error():
    fetcher = PageFetcher(_session(status=500))

    with pytest.raises(FetchError) as excinfo:
        fetcher.fetch(URL)

    assert excinfo.value.status_code == 500
    assert excinfo.value.reason == "http_status"


@pytest.mark.parametrize("content_type", ["application/json", "image/png", None])
def test_non_html_content_is_a_fetch_error(content_type):
    fetcher = PageFetcher(_session(content_type=content_type))

    with pytest.raises(FetchError) as excinfo:
        fetcher.fetch(URL)

    assert excinfo.value.reason == "content_type"


def test_network_error_is_wrapped():
    session = _session()
    session.get.side_effect = requests.ConnectionError("boom")
    fetcher = PageFetcher(session)

    with pytest.raises(FetchError) as excinfo:
        fetcher.fetch(URL)

    assert excinfo.value.reason == "connection_error"
    assert excinfo.value.status_code is None
    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)


@pytest.mark.parametrize(
    ("content_type", "expected"),
    [
        ("text/html", True),
        ("TEXT/HTML; charset=UTF-8", True),
        ("application/xhtml+xml", True),
        ("text/plain", False),
        ("", False),
        (None, False),
    ],
)
def test_is_html(content_type, expected):
    assert is_html(content_type) is expected
