# heuristic_scorer.py
# Declarative rule set turning URL features into weighted, explained contributions

from __future__ import annotations

import functools
import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from config import ReferenceLists
from ml_scorer import score_lexical
from url_features import UrlFeatures, levenshtein, looks_base64

logger = logging.getLogger(__name__)

CATEGORIES = ("protocol", "structure", "hostname", "brand", "content", "heuristic_age", "composite")

_PERCENT_ENCODED_RE = re.compile(r"%[0-9a-f]{2}", re.IGNORECASE)
_DISGUISED_EXT_RE = re.compile(
    r"\.(?:pdf|docx?|xlsx?|pptx?|jpe?g|png|txt|zip)\.(?:exe|html?|scr|js|bat|cmd|vbs|msi)$"
)
_REPEATED_CHAR_RE = re.compile(r"(.)\1\1")


@dataclass(frozen=True)
class Contribution:
    weight: float
    reason: Optional[str]
    rule: str


@dataclass(frozen=True)
class Rule:
    name: str
    category: str
    evaluate: Callable[[UrlFeatures], Optional[Contribution]]


def _flag(name: str, category: str, weight: float, reason: str,
          predicate: Callable[[UrlFeatures], bool]) -> Rule:
    """Build a rule that emits a fixed (weight, reason) whenever predicate holds."""

    def evaluate(features: UrlFeatures) -> Optional[Contribution]:
        if predicate(features):
            return Contribution(weight, reason, name)
        return None

    return Rule(name, category, evaluate)


def _strip_www(host: str) -> str:
    return host[4:] if host.startswith("www.") else host


def _registrable_guess(features: UrlFeatures) -> str:
    return ".".join(features.host_labels[-2:])


def _brand_distance_hit(brand: str) -> Callable[[UrlFeatures], bool]:
    return lambda f: any(1 <= levenshtein(c, brand) <= 2 for c in f.brand_candidates)


def _redirect_param_hit(param: str) -> Callable[[UrlFeatures], bool]:
    pattern = re.compile(r"(?:^|[&;])" + re.escape(param) + "=")
    return lambda f: bool(pattern.search(f.query))


def _composite_rule() -> Rule:
    def evaluate(features: UrlFeatures) -> Optional[Contribution]:
        result = score_lexical(features)
        if result["score"] <= 0:
            return None
        reason = None
        if result["flagged"]:
            reason = f"Lexical scorer flags the URL ({', '.join(result['terms'])})"
        return Contribution(result["score"], reason, "composite_score")

    return Rule("composite_score", "composite", evaluate)


@functools.lru_cache(maxsize=32)
def build_rules(reference: ReferenceLists) -> Tuple[Rule, ...]:
    """Return the ordered rule set for a set of reference lists."""
    known_bad = frozenset(reference.known_bad)
    rules: List[Rule] = [
        _flag("no_https", "protocol", 2,
              "Connection is not secure (HTTPS missing)",
              lambda f: not f.is_https),
        _flag("long_url", "structure", 1,
              "URL is unusually long",
              lambda f: f.length_total > 100),
        _flag("at_symbol", "structure", 2,
              "Contains '@' symbol, may mask the real domain",
              lambda f: "@" in f.normalized_url),
        _flag("ip_host", "hostname", 3,
              "Uses an IP address instead of a domain",
              lambda f: f.is_ip_host),
        _flag("many_subdomains", "hostname", 2,
              "Many subdomains, suspicious structure",
              lambda f: len(f.host_labels) > 4),
        _flag("unicode_host", "hostname", 3,
              "Domain contains non-ASCII characters",
              lambda f: f.has_unicode),
        _flag("punycode_host", "hostname", 2,
              "Domain is punycode encoded (xn--)",
              lambda f: f.is_punycode),
        _flag("high_entropy_host", "hostname", 3,
              "High entropy in domain (looks random/auto-generated)",
              lambda f: f.hostname_entropy > 3.5 and len(f.hostname.replace(".", "")) >= 6),
    ]
    for tld in reference.risky_tlds:
        rules.append(_flag(
            f"risky_tld:{tld}", "hostname", 2,
            f"Risky top-level domain detected ({tld})",
            lambda f, tld=tld: f.hostname.endswith(tld),
        ))
    rules.append(_flag(
        "repeated_chars", "hostname", 0.5,
        "Domain contains repeated characters (spam-like)",
        lambda f: bool(_REPEATED_CHAR_RE.search(_strip_www(f.hostname))),
    ))
    if known_bad:
        rules.append(_flag(
            "known_bad", "hostname", 10,
            "Domain is on the known-bad list",
            lambda f: f.hostname in known_bad or _registrable_guess(f) in known_bad,
        ))
    for brand in reference.brands:
        rules.append(_flag(
            f"brand:{brand}", "brand", 4,
            f"Domain closely resembles '{brand}' (possible impersonation)",
            _brand_distance_hit(brand),
        ))
    for keyword in reference.keywords:
        rules.append(_flag(
            f"keyword:{keyword}", "content", 1.5,
            f'Suspicious keyword found: "{keyword}"',
            lambda f, kw=keyword.lower(): kw in f.normalized_url,
        ))
    rules.append(_flag(
        "disguised_extension", "content", 4,
        "Path hides an executable behind a document extension",
        lambda f: bool(_DISGUISED_EXT_RE.search(f.path)),
    ))
    for param in reference.redirect_params:
        rules.append(_flag(
            f"redirect_param:{param}", "content", 2,
            f"Query contains a redirect parameter ({param}=)",
            _redirect_param_hit(param),
        ))
    rules.extend([
        _flag("percent_encoded", "content", 1,
              "URL contains encoded characters",
              lambda f: bool(_PERCENT_ENCODED_RE.search(f.normalized_url))),
        _flag("many_percent_signs", "content", 2,
              "URL contains heavy percent-encoding",
              lambda f: f.normalized_url.count("%") > 8),
        _flag("base64_path", "content", 2,
              "Path looks like base64-encoded data",
              lambda f: looks_base64(f.path.replace("/", ""))),
        _flag("many_query_params", "content", 1,
              "Many query parameters, could be tracking or obfuscation",
              lambda f: f.query_param_count > 8),
    ])
    young = tuple(reference.young_tlds)
    if young:
        rules.append(_flag(
            "young_tld", "heuristic_age", 1.5,
            "Domain uses a young/cheap top-level domain",
            lambda f: f.hostname.endswith(young),
        ))
    rules.append(_composite_rule())
    return tuple(rules)


def score_features(features: UrlFeatures, rules: Tuple[Rule, ...]) -> List[Contribution]:
    """Run every rule against valid features, in order."""
    contributions: List[Contribution] = []
    for rule in rules:
        contribution = rule.evaluate(features)
        if contribution is None:
            continue
        logger.debug("rule %s fired (+%s) for %s", rule.name, contribution.weight, features.hostname)
        contributions.append(contribution)
    return contributions
