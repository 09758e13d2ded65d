"""
Core crawl loop: frontier selection, rate limiting and termination.
"""
from __future__ import annotations

import sys
import threading
import time
from typing import Callable, Optional

from scrape_characters.config import CrawlConfig
from scrape_characters.extractor import PageContent, extract_page
from scrape_characters.fetcher import FetchError, PageFetcher
from scrape_characters.state import CrawlState, PageError
from scrape_characters.validator import Accepted, validate, validate_seed

Extractor = Callable[[str], PageContent]


def print_progress(state: CrawlState, max_iterations: int) -> None:
    """Print real-time progress to stderr."""
    progress = (
        f"\r\033[K[{state.iterations}/{max_iterations}] Visited: {len(state.visited)}"
        f" | Discovered: {len(state.legit_links)} | Queue: {state.frontier_size}"
    )
    sys.stderr.write(progress)
    sys.stderr.flush()


def print_scan_line(url: str, status: Optional[int], new_links: int, new_chars: int) -> None:
    """Print single scan result line."""
    status_str = str(status) if status else "ERR"
    sys.stderr.write(f"\n  → {status_str} {url} (+{new_links} links, +{new_chars} chars)")
    sys.stderr.flush()


def is_exhausted(state: CrawlState, config: CrawlConfig) -> bool:
    """True when the iteration budget is spent or nothing is left to visit."""
    return state.iterations >= config.max_iterations or state.next_url() is None


def fold_page(state: CrawlState, content: PageContent, page_url: str, ignore_hashes: bool) -> int:
    """Merge one page's links and text into the state; returns new legit links."""
    new_links = 0
    for href in content.links:
        result = validate(href, state.seed, ignore_hashes, base=page_url)
        if isinstance(result, Accepted):
            if state.add_legit(result.url):
                new_links += 1
        else:
            state.add_invalid(result.raw, result.reason)
    return new_links


def crawl(
    seed: str,
    config: Optional[CrawlConfig] = None,
    cancel: Optional[threading.Event] = None,
    *,
    fetcher: Optional[PageFetcher] = None,
    extractor: Extractor = extract_page,
) -> CrawlState:
    """
    Crawl same-origin pages from a seed URL, one page at a time.

    Args:
        seed: The URL to start crawling from.
        config: Delay, iteration budget and fragment handling.
        cancel: Event that, once set, stops the crawl at the next check point
                (top of an iteration or end of the rate-limit wait).
        fetcher: Anything with a ``fetch(url)`` method returning a FetchResult
                 and raising FetchError for unusable pages.
        extractor: Callable turning an HTML body into a PageContent.

    Returns:
        The accumulated crawl state, complete or partial.

    Raises:
        InvalidSeedError: If the seed is not an absolute http(s) URL.
    """
    config = config or CrawlConfig()
    cancel = cancel or threading.Event()
    start_url = validate_seed(seed)
    state = CrawlState(seed=start_url)

    owns_fetcher = fetcher is None
    if fetcher is None:
        fetcher = PageFetcher(timeout_s=config.timeout_s, user_agent=config.user_agent)

    if config.verbose:
        sys.stderr.write(f"Starting crawl from: {start_url}\n")
        sys.stderr.write(f"Max iterations: {config.max_iterations}\n")
        sys.stderr.write(f"Delay: {config.delay_ms} ms\n\n")

    try:
        while not is_exhausted(state, config):
            if cancel.is_set():
                state.cancelled = True
                break

            started = time.monotonic()
            url = state.next_url()
            state.mark_visited(url)

            if config.verbose:
                print_progress(state, config.max_iterations)

            try:
                page = fetcher.fetch(url)
            except FetchError as e:
                state.record_error(PageError(url, e.reason, e.status_code, str(e)))
                if config.verbose:
                    sys.stderr.write(f"\n  ✗ ERROR {url}: {e}")
            else:
                content = extractor(page.body)
                new_links = fold_page(state, content, page.final_url, config.ignore_hashes)
                new_chars = state.add_text(content.text)
                if config.verbose:
                    print_scan_line(url, page.status_code, new_links, new_chars)

            state.iterations += 1

            # No wait after the final page
            if is_exhausted(state, config):
                break

            remaining = config.delay_s - (time.monotonic() - started)
            if remaining > 0:
                cancel.wait(remaining)
    finally:
        if owns_fetcher:
            fetcher.close()

    if config.verbose:
        if state.cancelled:
            sys.stderr.write("\n  ⊘ Cancelled, reporting partial results")
        sys.stderr.write("\n\n")

    return state
