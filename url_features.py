# url_features.py
# Lexical URL feature extraction for phishing risk scoring

from __future__ import annotations

import logging
import math
import re
from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Optional, Tuple
from urllib.parse import SplitResult, parse_qsl, urlsplit

logger = logging.getLogger(__name__)

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
_FORBIDDEN_HOST_RE = re.compile(r"[\s\x00-\x1f\x7f<>^|%\"\\{}`]")
_BASE64_RE = re.compile(r"^[A-Za-z0-9+/]+={0,2}$")
_TOKEN_SPLIT_RE = re.compile(r"[-_]+")

BASE64_MIN_LENGTH = 16
BRAND_TOKEN_MIN_LENGTH = 4


@dataclass(frozen=True)
class UrlFeatures:
    raw: Any
    normalized_url: str = ""
    is_valid: bool = False
    scheme: str = ""
    hostname: str = ""
    host_labels: Tuple[str, ...] = ()
    path: str = ""
    query: str = ""
    length_total: int = 0
    is_https: bool = False
    hostname_entropy: float = 0.0
    is_ip_host: bool = False
    has_unicode: bool = False
    is_punycode: bool = False
    query_param_count: int = 0
    brand_candidates: Tuple[str, ...] = ()

    def to_dict(self) -> Dict:
        # asdict deep-copies fields, which arbitrary non-string input may not support
        raw = self.raw if isinstance(self.raw, str) else None
        data = asdict(replace(self, raw=raw))
        data["host_labels"] = list(self.host_labels)
        data["brand_candidates"] = list(self.brand_candidates)
        data["hostname_entropy"] = round(self.hostname_entropy, 4)
        return data


def shannon_entropy(s: str) -> float:
    """Calculate Shannon entropy of a string, in bits per symbol."""
    if not s:
        return 0.0
    freq: Dict[str, int] = {}
    for ch in s:
        freq[ch] = freq.get(ch, 0) + 1
    ent = 0.0
    n = len(s)
    for v in freq.values():
        p = v / n
        ent -= p * math.log2(p)
    return ent


def levenshtein(a: str, b: str) -> int:
    """Edit distance with unit-cost insert, delete and substitute."""
    rows, cols = len(a) + 1, len(b) + 1
    dp = [[0] * cols for _ in range(rows)]
    for i in range(rows):
        dp[i][0] = i
    for j in range(cols):
        dp[0][j] = j
    for i in range(1, rows):
        for j in range(1, cols):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            dp[i][j] = min(
                dp[i - 1][j] + 1,
                dp[i][j - 1] + 1,
                dp[i - 1][j - 1] + cost,
            )
    return dp[-1][-1]


def is_ipv4(host: str) -> bool:
    """Return True if host is a dotted IPv4 literal with every octet in 0..255."""
    octets = host.split(".")
    if len(octets) != 4:
        return False
    for octet in octets:
        # isdigit() accepts superscripts and other unicode digits
        if not octet or not octet.isascii() or not octet.isdigit():
            return False
        if int(octet) > 255:
            return False
    return True


def looks_base64(s: str) -> bool:
    return len(s) >= BASE64_MIN_LENGTH and len(s) % 4 == 0 and bool(_BASE64_RE.match(s))


def normalize_url(url: str) -> str:
    """Trim, complete a missing scheme with https:// and lowercase."""
    url = url.strip()
    if not _SCHEME_RE.match(url):
        url = "https://" + url
    return url.lower()


def _parse(url: str) -> Optional[SplitResult]:
    """Parse a normalized URL, returning None when no usable hostname comes out."""
    try:
        parsed = urlsplit(url)
        # port is validated lazily by urllib
        parsed.port
    except ValueError:
        return None
    host = parsed.hostname or ""
    if not host or _FORBIDDEN_HOST_RE.search(host):
        return None
    return parsed


def _brand_candidates(labels: Tuple[str, ...]) -> Tuple[str, ...]:
    if len(labels) > 2 and labels[0] == "www":
        labels = labels[1:]
    first = labels[0]
    # the label itself always counts; only its hyphen tokens need a length floor
    tokens = [t for t in _TOKEN_SPLIT_RE.split(first) if len(t) >= BRAND_TOKEN_MIN_LENGTH]
    return tuple(dict.fromkeys([first] + tokens))


def extract(raw: Any) -> UrlFeatures:
    """Derive lexical features from a raw URL string. Never raises."""
    if not isinstance(raw, str) or not raw.strip():
        logger.debug("rejecting empty or non-string input %r", raw)
        return UrlFeatures(raw=raw)

    normalized = normalize_url(raw)
    parsed = _parse(normalized)
    if parsed is None:
        logger.debug("could not parse %r", normalized)
        return UrlFeatures(raw=raw, normalized_url=normalized, length_total=len(normalized))

    host = parsed.hostname
    labels = tuple(label for label in host.split(".") if label)
    if not labels:
        return UrlFeatures(raw=raw, normalized_url=normalized, length_total=len(normalized))

    ip_host = is_ipv4(host)
    return UrlFeatures(
        raw=raw,
        normalized_url=normalized,
        is_valid=True,
        scheme=parsed.scheme,
        hostname=host,
        host_labels=labels,
        path=parsed.path or "",
        query=parsed.query or "",
        length_total=len(normalized),
        is_https=parsed.scheme == "https",
        hostname_entropy=shannon_entropy(host.replace(".", "")),
        is_ip_host=ip_host,
        has_unicode=any(ord(ch) >= 128 for ch in host),
        is_punycode=host.startswith("xn--"),
        query_param_count=len(parse_qsl(parsed.query, keep_blank_values=True)),
        brand_candidates=() if ip_host else _brand_candidates(labels),
    )
