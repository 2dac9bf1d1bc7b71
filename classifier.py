"""Aggregate rule contributions into a graded phishing verdict."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from config import Settings, get_settings
from heuristic_scorer import build_rules, score_features
from url_features import UrlFeatures, extract

logger = logging.getLogger(__name__)

INVALID_SCORE = 10.0
INVALID_REASON = "invalid URL format"


class Severity(Enum):
    SAFE = "safe"
    SUSPICIOUS = "suspicious"
    LIKELY_PHISHING = "likely-phishing"
    DANGEROUS = "danger"


# upper bound (inclusive) of each band; anything above the last is DANGEROUS
THRESHOLDS = (
    (2.0, Severity.SAFE),
    (5.0, Severity.SUSPICIOUS),
    (9.0, Severity.LIKELY_PHISHING),
)


@dataclass(frozen=True)
class Verdict:
    score: float
    severity: Severity
    reasons: Tuple[str, ...]

    @property
    def label(self) -> str:
        return self.severity.value

    @property
    def needs_warning(self) -> bool:
        return self.severity is not Severity.SAFE

    def to_dict(self) -> Dict:
        return {
            "score": self.score,
            "severity": self.label,
            "reasons": list(self.reasons),
        }


def severity_for(score: float) -> Severity:
    for upper, severity in THRESHOLDS:
        if score <= upper:
            return severity
    return Severity.DANGEROUS


def classify(features: UrlFeatures, settings: Optional[Settings] = None) -> Verdict:
    """Score valid features with every rule; invalid input gets the maximal verdict."""
    if not features.is_valid:
        return Verdict(INVALID_SCORE, Severity.DANGEROUS, (INVALID_REASON,))

    settings = settings or get_settings()
    contributions = score_features(features, build_rules(settings.reference))
    score = round(float(sum(c.weight for c in contributions)), 1)
    reasons = tuple(c.reason for c in contributions if c.reason)
    verdict = Verdict(score, severity_for(score), reasons)
    logger.debug("%s scored %s (%s)", features.normalized_url, score, verdict.label)
    return verdict


def analyze(url: Any, settings: Optional[Settings] = None) -> Verdict:
    return classify(extract(url), settings)
