"""
Run configuration for a crawl.
"""
from __future__ import annotations

from dataclasses import dataclass

from scrape_characters.fetcher import DEFAULT_USER_AGENT

DEFAULT_DELAY_MS = 5000
DEFAULT_MAX_ITERATIONS = 150


@dataclass(frozen=True, slots=True)
class CrawlConfig:
    """Settings threaded explicitly into crawl()."""
    delay_ms: int = DEFAULT_DELAY_MS
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    ignore_hashes: bool = True
    timeout_s: float = 15.0
    user_agent: str = DEFAULT_USER_AGENT
    verbose: bool = False

    def __post_init__(self) -> None:
        if self.delay_ms < 0:
            raise ValueError(f"delay_ms must be >= 0, got {self.delay_ms}")
        if self.max_iterations < 0:
            raise ValueError(f"max_iterations must be >= 0, got {self.max_iterations}")
        if self.timeout_s <= 0:
            raise ValueError(f"timeout_s must be > 0, got {self.timeout_s}")

    @property
    def delay_s(self) -> float:
        return self.delay_ms / 1000.0
