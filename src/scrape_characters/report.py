"""
Rendering of a finished (or partial) crawl state.
"""
from __future__ import annotations

import sys
from typing import Any, Dict, Iterable, List

from scrape_characters.state import CrawlState

GREEN = "\033[32m"
RED = "\033[31m"
YELLOW = "\033[33m"
DARK_GRAY = "\033[90m"
RESET = "\033[0m"


class Palette:
    """ANSI colour codes, or empty strings when colour is off."""

    def __init__(self, enabled: bool = True) -> None:
        self.green = GREEN if enabled else ""
        self.red = RED if enabled else ""
        self.yellow = YELLOW if enabled else ""
        self.dark_gray = DARK_GRAY if enabled else ""
        self.reset = RESET if enabled else ""


def sorted_characters(state: CrawlState) -> List[str]:
    """Characters in code point order."""
    return sorted(state.characters)


def code_point(char: str) -> str:
    return f"U+{ord(char):04X}"


def wrap_in_quotes(items: Iterable[str]) -> str:
    return ", ".join(f"'{item}'" for item in items)


def format_characters(state: CrawlState, hex_codes: bool = False) -> str:
    """Either the literal characters or their space-separated code points."""
    chars = sorted_characters(state)
    if hex_codes:
        return " ".join(code_point(c) for c in chars)
    return wrap_in_quotes(chars)


def render_text(state: CrawlState, hex_codes: bool = False, color: bool = True) -> str:
    """Single success line listing root URL, good URLs, bad URLs and characters."""
    p = Palette(color)
    good = wrap_in_quotes(sorted(state.legit_links))
    bad = wrap_in_quotes(sorted(state.invalid_links))
    bad_output = (
        f"{p.yellow}your bad URLs ({len(state.invalid_links)}) are => {bad}{p.reset}, "
        if state.invalid_links
        else ""
    )
    return (
        f"{p.green}success{p.reset} (scrape-characters): Your {p.green}root url is "
        f"'{state.seed}'{p.reset}, the {p.green}good URLs ({len(state.legit_links)}) are =>{p.reset} "
        f"{good}, {bad_output}and the {p.green}unique characters ({len(state.characters)}) "
        f"are =>{p.reset} {format_characters(state, hex_codes)}."
    )


def report_payload(state: CrawlState, hex_codes: bool = False) -> Dict[str, Any]:
    """JSON-serializable view of the crawl."""
    chars = sorted_characters(state)
    return {
        "seed": state.seed,
        "iterations": state.iterations,
        "visited": sorted(state.visited),
        "cancelled": state.cancelled,
        "legit_links": sorted(state.legit_links),
        "invalid_links": [
            {"link": raw, "reason": state.rejections[raw].value}
            for raw in sorted(state.invalid_links)
        ],
        "characters": [code_point(c) for c in chars] if hex_codes else chars,
        "errors": [
            {
                "url": e.url,
                "reason": e.reason,
                "status_code": e.status_code,
                "message": e.message,
            }
            for e in state.errors
        ],
    }


def print_summary(state: CrawlState) -> None:
    """Print crawl summary to stderr."""
    sys.stderr.write("=" * 50 + "\n")
    sys.stderr.write("CRAWL SUMMARY\n")
    sys.stderr.write("=" * 50 + "\n\n")

    sys.stderr.write(f"Iterations:             {state.iterations}\n")
    sys.stderr.write(f"Pages visited:          {len(state.visited)}\n")
    sys.stderr.write(f"Legit links:            {len(state.legit_links)}\n")
    sys.stderr.write(f"Invalid links:          {len(state.invalid_links)}\n")
    sys.stderr.write(f"Unique characters:      {len(state.characters)}\n\n")

    counts = state.error_counts()
    if counts:
        sys.stderr.write("Errors by type:\n")
        for error_type, count in sorted(counts.items()):
            if error_type == "connection_error":
                label = "Connection errors"
            elif error_type == "content_type":
                label = "Non-HTML responses"
            else:
                label = f"HTTP {error_type}"
            sys.stderr.write(f"  {label}: {count}\n")
    else:
        sys.stderr.write("No errors encountered.\n")

    if state.cancelled:
        sys.stderr.write("Crawl was cancelled before completion.\n")

    sys.stderr.write("\n")
