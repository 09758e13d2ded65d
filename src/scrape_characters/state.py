"""
Mutable record of a single crawl run.
"""
from __future__ import annotations

from collections import defaultdict, deque
from dataclasses import dataclass, field
from typing import Deque, Dict, List, Optional, Set

from scrape_characters.validator import Rejection


@dataclass(slots=True)
class PageError:
    """A page that could not be fetched or was not HTML."""
    url: str
    reason: str
    status_code: Optional[int] = None
    message: str = ""

    @property
    def category(self) -> str:
        if self.status_code is not None and not 200 <= self.status_code < 300:
            return str(self.status_code)
        return self.reason


@dataclass(slots=True)
class CrawlState:
    """
    Everything a crawl has accumulated so far.

    Sets only grow and ``iterations`` only increases. The frontier is kept in
    discovery order: ``next_url`` returns the earliest accepted legit URL that
    has not been visited yet.
    """
    seed: str
    visited: Set[str] = field(default_factory=set)
    legit_links: Set[str] = field(default_factory=set)
    invalid_links: Set[str] = field(default_factory=set)
    characters: Set[str] = field(default_factory=set)
    iterations: int = 0
    errors: List[PageError] = field(default_factory=list)
    rejections: Dict[str, Rejection] = field(default_factory=dict)
    cancelled: bool = False
    _queue: Deque[str] = field(default_factory=deque, repr=False)

    def __post_init__(self) -> None:
        self.add_legit(self.seed)

    def add_legit(self, url: str) -> bool:
        """Add an accepted URL; returns True if it was new."""
        if url in self.legit_links:
            return False
        self.legit_links.add(url)
        self._queue.append(url)
        return True

    def add_invalid(self, raw: str, reason: Rejection) -> bool:
        if raw in self.invalid_links:
            return False
        self.invalid_links.add(raw)
        self.rejections[raw] = reason
        return True

    def mark_visited(self, url: str) -> None:
        if url not in self.legit_links:
            raise KeyError(f"{url} was never accepted as a legit link")
        self.visited.add(url)

    def add_text(self, text: str) -> int:
        """Fold a page's text into the character set; returns how many were new."""
        before = len(self.characters)
        self.characters.update(text)
        return len(self.characters) - before

    def record_error(self, error: PageError) -> None:
        self.errors.append(error)

    def next_url(self) -> Optional[str]:
        """Return the next unvisited legit URL without consuming it."""
        while self._queue and self._queue[0] in self.visited:
            self._queue.popleft()
        return self._queue[0] if self._queue else None

    @property
    def frontier_size(self) -> int:
        return len(self.legit_links) - len(self.visited)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def error_counts(self) -> Dict[str, int]:
        counts: Dict[str, int] = defaultdict(int)
        for error in self.errors:
            counts[error.category] += 1
        return dict(counts)
