"""Capped, newest-first history of scanned URLs, owned by the calling consumer."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 25
VERDICT_KEYS = ("score", "severity", "reasons")


@dataclass(frozen=True)
class HistoryEntry:
    url: str
    timestamp: str
    verdict: Dict

    def to_dict(self) -> Dict:
        return {"url": self.url, "timestamp": self.timestamp, "verdict": self.verdict}

    @classmethod
    def from_dict(cls, data: Dict) -> "HistoryEntry":
        return cls(
            url=str(data["url"]),
            timestamp=str(data["timestamp"]),
            verdict=dict(data["verdict"]),
        )


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def format_summary(entry: HistoryEntry) -> str:
    """One-line, copyable description of a history entry."""
    verdict = entry.verdict
    if verdict.get("severity") == "safe":
        return f"{entry.url} - Looks safe"
    reasons = "; ".join(verdict.get("reasons", []))
    return f"{entry.url} - Potential phishing: {reasons}"


class ScanHistory:
    def __init__(self, limit: int = DEFAULT_LIMIT, path: Optional[str] = None):
        if limit < 1:
            raise ValueError("history limit must be at least 1")
        self.limit = limit
        self.path = Path(path) if path else None
        self._entries: List[HistoryEntry] = []

    @property
    def entries(self) -> List[HistoryEntry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def record(self, url: str, verdict: Dict, timestamp: Optional[str] = None) -> HistoryEntry:
        """Prepend a scan; verdict is a Verdict.to_dict() or analyze_url() payload."""
        kept = {key: verdict[key] for key in VERDICT_KEYS if key in verdict}
        entry = HistoryEntry(url=url, timestamp=timestamp or _now_iso(), verdict=kept)
        self._entries.insert(0, entry)
        del self._entries[self.limit:]
        return entry

    def latest(self) -> Optional[HistoryEntry]:
        return self._entries[0] if self._entries else None

    def clear(self) -> None:
        self._entries = []

    def save(self) -> None:
        if self.path is None:
            return
        with self.path.open("w", encoding="utf-8") as handle:
            json.dump([e.to_dict() for e in self._entries], handle, ensure_ascii=False, indent=2)

    @classmethod
    def load(cls, path: str, limit: int = DEFAULT_LIMIT) -> "ScanHistory":
        """Load history from disk; a missing or unreadable file gives an empty history."""
        history = cls(limit=limit, path=path)
        if not history.path.exists():
            return history
        try:
            with history.path.open("r", encoding="utf-8") as handle:
                raw = json.load(handle)
            entries = [HistoryEntry.from_dict(item) for item in raw]
        except (OSError, ValueError, KeyError, TypeError) as exc:
            logger.warning("Ignoring unreadable history file %s: %s", path, exc)
            return history
        history._entries = entries[:limit]
        return history
