import json
import logging

import pytest

from api.api import analyze_url
from classifier import analyze
from history import HistoryEntry, ScanHistory, format_summary


def test_record_prepends_and_caps():
    history = ScanHistory(limit=3)
    for i in range(5):
        history.record(f"https://example{i}.com", analyze(f"https://example{i}.com").to_dict())
    assert len(history) == 3
    assert [e.url for e in history.entries] == [
        "https://example4.com", "https://example3.com", "https://example2.com",
    ]
    assert history.latest().url == "https://example4.com"


def test_record_keeps_only_verdict_fields():
    entry = ScanHistory().record("paypa1.com", analyze_url("paypa1.com"), timestamp="2024-01-01T00:00:00+00:00")
    assert set(entry.verdict) == {"score", "severity", "reasons"}
    assert entry.timestamp == "2024-01-01T00:00:00+00:00"


def test_record_stamps_timestamp():
    entry = ScanHistory().record("https://example.com", analyze("https://example.com").to_dict())
    assert entry.timestamp.endswith("+00:00")


def test_clear():
    history = ScanHistory()
    history.record("https://example.com", analyze("https://example.com").to_dict())
    history.clear()
    assert len(history) == 0
    assert history.latest() is None


def test_limit_must_be_positive():
    with pytest.raises(ValueError):
        ScanHistory(limit=0)


def test_save_and_load(tmp_path):
    path = tmp_path / "history.json"
    history = ScanHistory(limit=5, path=str(path))
    history.record("http://192.168.1.1/login", analyze("http://192.168.1.1/login").to_dict())
    history.record("https://example.com", analyze("https://example.com").to_dict())
    history.save()

    loaded = ScanHistory.load(str(path), limit=1)
    assert [e.url for e in loaded.entries] == ["https://example.com"]
    assert loaded.entries[0] == history.entries[0]


def test_load_missing_file_gives_empty_history(tmp_path):
    assert len(ScanHistory.load(str(tmp_path / "missing.json"))) == 0


@pytest.mark.parametrize("content", ["{not json", json.dumps({"url": "x"}), json.dumps([{"url": "x"}])])
def test_load_unreadable_file_is_logged_and_ignored(tmp_path, caplog, content):
    path = tmp_path / "history.json"
    path.write_text(content, encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="history"):
        history = ScanHistory.load(str(path))
    assert len(history) == 0
    assert "Ignoring unreadable history file" in caplog.text


def test_format_summary():
    safe = HistoryEntry("https://example.com", "t", {"score": 0.0, "severity": "safe", "reasons": []})
    assert format_summary(safe) == "https://example.com - Looks safe"

    risky = HistoryEntry("http://x.xyz", "t", {"score": 6.0, "severity": "likely-phishing",
                                                "reasons": ["a", "b"]})
    assert format_summary(risky) == "http://x.xyz - Potential phishing: a; b"
