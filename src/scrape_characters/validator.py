"""
Origin validation and URL canonicalization for crawl candidates.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple, Union
from urllib.parse import urljoin, urlparse, urlunparse, urldefrag

ALLOWED_SCHEMES: frozenset[str] = frozenset(("http", "https"))
DEFAULT_PORTS = {"http": 80, "https": 443}

Origin = Tuple[str, str, int]


class Rejection(str, Enum):
    """Why a link was kept out of the crawl."""
    MALFORMED = "malformed"
    UNSUPPORTED_SCHEME = "unsupported_scheme"
    CROSS_ORIGIN = "cross_origin"
    HAS_FRAGMENT = "has_fragment"


class InvalidSeedError(ValueError):
    """Raised when the seed URL cannot start a crawl."""

    def __init__(self, seed: str, reason: Rejection) -> None:
        super().__init__(f"'{seed}' is not a valid URL ({reason.value})")
        self.seed = seed
        self.reason = reason


@dataclass(frozen=True, slots=True)
class Accepted:
    url: str

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Rejected:
    raw: str
    reason: Rejection

    @property
    def ok(self) -> bool:
        return False


ValidationResult = Union[Accepted, Rejected]


def _split(url: str) -> Optional[Tuple[str, str, int, str]]:
    """Return (scheme, host, effective port, netloc) or None if unparseable."""
    try:
        parsed = urlparse(url)
        port = parsed.port
    except ValueError:
        return None

    scheme = parsed.scheme.lower()
    hostname = (parsed.hostname or "").lower()
    if port is None:
        port = DEFAULT_PORTS.get(scheme, 0)

    host = f"[{hostname}]" if ":" in hostname else hostname
    if port and port != DEFAULT_PORTS.get(scheme):
        netloc = f"{host}:{port}"
    else:
        netloc = host

    # Userinfo is part of the request, not of the origin
    userinfo, at, _ = parsed.netloc.rpartition("@")
    if at:
        netloc = f"{userinfo}@{netloc}"
    return scheme, hostname, port, netloc


def origin_of(url: str) -> Optional[Origin]:
    """Return the (scheme, host, port) triple of an absolute URL."""
    parts = _split(url)
    if parts is None:
        return None
    scheme, hostname, port, _ = parts
    return scheme, hostname, port


def remove_dot_segments(path: str) -> str:
    """Collapse "." and ".." segments of an absolute path (RFC 3986, 5.2.4)."""
    if not path:
        return "/"
    segments = path.split("/")
    resolved: List[str] = []
    for seg in segments:
        if seg == "..":
            # resolved[0] is the empty segment before the leading slash
            if len(resolved) > 1:
                resolved.pop()
        elif seg != ".":
            resolved.append(seg)
    if segments[-1] in (".", ".."):
        resolved.append("")
    return "/".join(resolved) or "/"


def canonicalize(url: str, keep_fragment: bool = True) -> Optional[str]:
    """
    Canonical absolute form used for de-duplication.

    - Lowercases scheme and host
    - Drops default ports (:80, :443)
    - Removes "." and ".." path segments; empty path becomes "/"
    - Keeps userinfo
    - Keeps params and querystring
    """
    parts = _split(url)
    if parts is None:
        return None
    scheme, _, _, netloc = parts
    parsed = urlparse(url)
    return urlunparse((
        scheme,
        netloc,
        remove_dot_segments(parsed.path),
        parsed.params,
        parsed.query,
        parsed.fragment if keep_fragment else "",
    ))


def validate(
    raw_link: str,
    origin_base: str,
    ignore_hashes: bool,
    base: Optional[str] = None,
) -> ValidationResult:
    """
    Decide whether a raw href belongs to the crawl rooted at origin_base.

    Relative references are resolved against ``base`` (the page the link was
    found on), defaulting to ``origin_base``. The accepted value is the
    canonical absolute URL, so links that differ only in relative notation
    collapse to the same string.
    """
    try:
        resolved = urljoin(base or origin_base, raw_link.strip())
        parsed = urlparse(resolved)
    except ValueError:
        return Rejected(raw_link, Rejection.MALFORMED)

    scheme = parsed.scheme.lower()
    if scheme not in ALLOWED_SCHEMES:
        return Rejected(raw_link, Rejection.UNSUPPORTED_SCHEME)

    origin = origin_of(resolved)
    if origin is None or not origin[1]:
        return Rejected(raw_link, Rejection.MALFORMED)

    if origin != origin_of(origin_base):
        return Rejected(raw_link, Rejection.CROSS_ORIGIN)

    if ignore_hashes and parsed.fragment:
        return Rejected(raw_link, Rejection.HAS_FRAGMENT)

    canonical = canonicalize(resolved, keep_fragment=not ignore_hashes)
    if canonical is None:
        return Rejected(raw_link, Rejection.MALFORMED)
    return Accepted(canonical)


def validate_seed(seed: str) -> str:
    """Normalize the start URL, dropping any fragment."""
    stripped = seed.strip()
    try:
        parsed = urlparse(stripped)
    except ValueError:
        raise InvalidSeedError(seed, Rejection.MALFORMED) from None

    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        raise InvalidSeedError(seed, Rejection.UNSUPPORTED_SCHEME)

    defragged, _ = urldefrag(stripped)
    origin = origin_of(defragged)
    if origin is None or not origin[1]:
        raise InvalidSeedError(seed, Rejection.MALFORMED)

    canonical = canonicalize(defragged, keep_fragment=False)
    if canonical is None:
        raise InvalidSeedError(seed, Rejection.MALFORMED)
    return canonical
