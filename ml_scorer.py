"""Fixed-weight lexical scorer standing in for a learned model."""

from __future__ import annotations

import re
from typing import Callable, Dict, Tuple

from url_features import UrlFeatures

_ALTERNATING_RE = re.compile(r"(?:[a-z]\d){2,}|(?:\d[a-z]){2,}")

# (term name, weight, predicate); the subtotal is never normalised or capped
TERMS: Tuple[Tuple[str, float, Callable[[UrlFeatures], bool]], ...] = (
    ("long_hostname", 0.3, lambda f: len(f.hostname) > 20),
    ("high_entropy", 0.7, lambda f: f.hostname_entropy > 3.6),
    ("login_path", 0.4, lambda f: "login" in f.path),
    ("verify_in_url", 0.6, lambda f: "verify" in f.normalized_url),
    ("alternating_digits", 0.7, lambda f: bool(_ALTERNATING_RE.search(f.hostname))),
)

REASON_THRESHOLD = 1.0


def term_hits(features: UrlFeatures) -> Dict[str, float]:
    """Return the weight of every term that fires for these features."""
    return {name: weight for name, weight, predicate in TERMS if predicate(features)}


def score_lexical(features: UrlFeatures) -> Dict:
    hits = term_hits(features)
    subtotal = round(sum(hits.values()), 4)
    return {
        "score": subtotal,
        "terms": sorted(hits),
        "flagged": subtotal > REASON_THRESHOLD,
    }
