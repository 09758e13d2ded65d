"""
HTML extraction: anchor hrefs and visible text.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from bs4 import BeautifulSoup

# Elements whose contents never render as page text
INVISIBLE_TAGS = ("script", "style", "noscript", "template")


@dataclass(slots=True)
class PageContent:
    links: List[str] = field(default_factory=list)
    text: str = ""


def extract_page(html: str) -> PageContent:
    """Extract href values from <a> tags and the visible body text."""
    soup = BeautifulSoup(html or "", "lxml")

    links = [a["href"] for a in soup.find_all("a", href=True)]

    for tag in soup(list(INVISIBLE_TAGS)):
        tag.decompose()

    root = soup.body if soup.body is not None else soup
    return PageContent(links=links, text=root.get_text())
