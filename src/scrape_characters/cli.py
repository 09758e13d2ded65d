"""
Command-line interface for scrape-characters.
"""
from __future__ import annotations

import argparse
import json
import signal
import sys
import threading
from pathlib import Path
from typing import List, Optional

from scrape_characters import __version__
from scrape_characters.config import DEFAULT_DELAY_MS, DEFAULT_MAX_ITERATIONS, CrawlConfig
from scrape_characters.core import crawl
from scrape_characters.fetcher import DEFAULT_USER_AGENT
from scrape_characters.report import Palette, print_summary, render_text, report_payload
from scrape_characters.validator import InvalidSeedError

PROG = "scrape-characters"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description=(
            "Get unique page characters from the URL and its linked pages "
            "that are under the same origin."
        ),
    )
    parser.add_argument("urls", nargs="*", metavar="URL", help="Start URL (e.g. https://example.com)")
    parser.add_argument(
        "--delay", type=int, default=DEFAULT_DELAY_MS,
        help=f"Minimum milliseconds between requests (default: {DEFAULT_DELAY_MS})",
    )
    parser.add_argument(
        "--max-iterations", type=int, default=DEFAULT_MAX_ITERATIONS,
        help=f"Maximum pages to visit (default: {DEFAULT_MAX_ITERATIONS})",
    )
    parser.add_argument(
        "--keep-hashes", action="store_true",
        help="Treat links with a #fragment as legit instead of rejecting them",
    )
    parser.add_argument("--timeout", type=float, default=15.0, help="Request timeout in seconds (default: 15)")
    parser.add_argument("--user-agent", default=DEFAULT_USER_AGENT, help="User-Agent header")
    parser.add_argument("--hex", action="store_true", help="Print characters as hexadecimal code points")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    parser.add_argument("--out", help="Also write a JSON report to this path, or '-' for stdout")
    parser.add_argument("--pretty", action="store_true", help="Pretty-print JSON")
    parser.add_argument("-V", "--verbose", action="store_true", help="Show progress and summary")
    parser.add_argument("-v", "--version", action="version", version=__version__)
    return parser


def install_interrupt_handler(cancel: threading.Event) -> None:
    """First Ctrl+C stops the crawl gracefully; a second one aborts."""
    interrupted: List[int] = []

    def _handler(signum, frame):
        if interrupted:
            raise KeyboardInterrupt
        interrupted.append(signum)
        # Event.wait in this thread may hold the lock that Event.set needs
        threading.Thread(target=cancel.set, daemon=True).start()

    signal.signal(signal.SIGINT, _handler)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the scrape-characters CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    color = not args.no_color and sys.stderr.isatty()
    p = Palette(color)

    if not args.urls:
        parser.print_help()
        sys.stderr.write(f"{p.red}error{p.reset} ({PROG}): Please provide a URL.\n")
        return 1

    if len(args.urls) > 1:
        sys.stderr.write(
            f"{p.yellow}warning{p.reset} ({PROG}): You provided {len(args.urls)} URLs, "
            f"but the program accepts only 1 at the moment.\n"
        )

    try:
        config = CrawlConfig(
            delay_ms=args.delay,
            max_iterations=args.max_iterations,
            ignore_hashes=not args.keep_hashes,
            timeout_s=args.timeout,
            user_agent=args.user_agent,
            verbose=args.verbose,
        )
    except ValueError as e:
        sys.stderr.write(f"{p.red}error{p.reset} ({PROG}): {e}\n")
        return 1

    cancel = threading.Event()
    if threading.current_thread() is threading.main_thread():
        install_interrupt_handler(cancel)

    try:
        state = crawl(args.urls[0], config, cancel)
    except InvalidSeedError as e:
        sys.stderr.write(f"{p.red}error{p.reset} ({PROG}): {e}\n")
        return 1

    if args.verbose:
        print_summary(state)

    print(render_text(state, hex_codes=args.hex, color=color and sys.stdout.isatty()))

    if args.out:
        payload = report_payload(state, hex_codes=args.hex)
        json_text = json.dumps(payload, ensure_ascii=False, indent=2 if args.pretty else None)
        if args.out == "-":
            print(json_text)
        else:
            output_path = Path(args.out)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(json_text, encoding="utf-8")
            if args.verbose:
                sys.stderr.write(f"Results written to: {output_path}\n")

    if state.has_errors:
        for error in state.errors:
            sys.stderr.write(f"{p.red}error{p.reset} ({PROG}): {error.url}: {error.message}\n")
        sys.stderr.write(f"{p.yellow}warning{p.reset} ({PROG}): Program exited with errors.\n")
        return 1

    if args.verbose:
        sys.stderr.write(f"{p.dark_gray}info ({PROG}): Program exited successfully.{p.reset}\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
