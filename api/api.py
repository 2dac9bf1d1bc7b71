"""Programmatic API entrypoint for the phishing risk engine."""

from __future__ import annotations

from typing import Any, Dict, Optional

from classifier import classify
from config import Settings
from url_features import extract


def analyze_url(url: Any, settings: Optional[Settings] = None) -> Dict:
    """Run the lexical analysis pipeline and return a structured response."""
    features = extract(url)
    verdict = classify(features, settings)

    response = verdict.to_dict()
    response.update({
        "url": features.normalized_url or None,
        "warn": verdict.needs_warning,
        "features": features.to_dict(),
    })
    return response
