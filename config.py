"""Configuration for the phishing risk engine."""

from dataclasses import dataclass, field, fields
from typing import Optional, Tuple
import os


RISKY_TLDS = (
    ".xyz", ".click", ".top", ".gift", ".loan", ".work", ".club", ".pw",
    ".zip", ".country", ".tk", ".ml", ".gq", ".cf",
)
YOUNG_TLDS = (".xyz", ".top", ".click", ".tk", ".ml", ".gq", ".cf")
KEYWORDS = (
    "login", "verify", "secure", "account", "update", "confirm", "bank",
    "password", "signin", "wallet", "billing", "payment", "free", "bonus",
    "prize", "urgent",
)
BRANDS = (
    "google", "paypal", "apple", "amazon", "microsoft", "facebook",
    "instagram", "netflix", "github", "linkedin", "twitter",
)
REDIRECT_PARAMS = ("redirect", "redir", "url", "target", "dest")
KNOWN_BAD = ("malicious-example.test", "phishingsite.example")


@dataclass(frozen=True)
class ReferenceLists:
    """Static lists the rules match against. Empty lists disable their rules."""

    risky_tlds: Tuple[str, ...] = RISKY_TLDS
    young_tlds: Tuple[str, ...] = YOUNG_TLDS
    keywords: Tuple[str, ...] = KEYWORDS
    brands: Tuple[str, ...] = BRANDS
    redirect_params: Tuple[str, ...] = REDIRECT_PARAMS
    known_bad: Tuple[str, ...] = KNOWN_BAD

    def __post_init__(self):
        # callers may hand in lists or sets; rule sets are cached per instance
        for f in fields(self):
            object.__setattr__(self, f.name, tuple(getattr(self, f.name) or ()))


@dataclass(frozen=True)
class Settings:
    reference: ReferenceLists = field(default_factory=ReferenceLists)
    history_limit: int = 25
    history_file: str = "phish_history_v1.json"
    collect_jobs: int = 1
    log_level: str = "WARNING"


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_list(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    # an empty value is an explicit empty list, not "unset"
    value = os.getenv(name)
    if value is None:
        return default
    return tuple(item.strip().lower() for item in value.split(",") if item.strip())


def _tld_list(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    return tuple(t if t.startswith(".") else "." + t for t in _env_list(name, default))


def get_reference_lists() -> ReferenceLists:
    return ReferenceLists(
        risky_tlds=_tld_list("PHISH_RISKY_TLDS", RISKY_TLDS),
        young_tlds=_tld_list("PHISH_YOUNG_TLDS", YOUNG_TLDS),
        keywords=_env_list("PHISH_KEYWORDS", KEYWORDS),
        brands=_env_list("PHISH_BRANDS", BRANDS),
        redirect_params=_env_list("PHISH_REDIRECT_PARAMS", REDIRECT_PARAMS),
        known_bad=_env_list("PHISH_KNOWN_BAD", KNOWN_BAD),
    )


def get_settings(reference: Optional[ReferenceLists] = None) -> Settings:
    """Load settings from environment variables with safe defaults."""
    return Settings(
        reference=reference if reference is not None else get_reference_lists(),
        history_limit=max(_env_int("PHISH_HISTORY_LIMIT", Settings.history_limit), 1),
        history_file=os.getenv("PHISH_HISTORY_FILE", Settings.history_file),
        collect_jobs=_env_int("PHISH_COLLECT_JOBS", Settings.collect_jobs),
        log_level=os.getenv("PHISH_LOG_LEVEL", Settings.log_level).upper(),
    )
