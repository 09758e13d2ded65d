"""
Same-origin crawler that collects the unique characters of a website's pages
and classifies every link it finds as legit or invalid.
"""
__version__ = "0.1.0"

from scrape_characters.config import CrawlConfig
from scrape_characters.core import crawl
from scrape_characters.state import CrawlState, PageError
from scrape_characters.validator import InvalidSeedError, Rejection, validate

__all__ = [
    "crawl",
    "CrawlConfig",
    "CrawlState",
    "InvalidSeedError",
    "PageError",
    "Rejection",
    "validate",
]
