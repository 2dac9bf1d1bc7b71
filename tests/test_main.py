import json

import main
from history import ScanHistory


def feed(monkeypatch, lines):
    answers = iter(lines)
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))


def test_main_loop_prints_analysis_and_records_history(monkeypatch, capsys, tmp_path):
    feed(monkeypatch, ["paypa1.com", ":history", ""])
    history = ScanHistory(path=str(tmp_path / "h.json"))

    main.main_loop(history, None)

    out = capsys.readouterr().out
    assert '"severity": "suspicious"' in out
    assert "paypa1.com - Potential phishing" in out
    assert len(history) == 1
    saved = json.loads((tmp_path / "h.json").read_text(encoding="utf-8"))
    assert saved[0]["url"] == "paypa1.com"


def test_main_loop_clear_and_unknown_command(monkeypatch, capsys):
    feed(monkeypatch, ["example.com", ":clear", ":nope", ":history", ""])
    history = ScanHistory()

    main.main_loop(history, None)

    out = capsys.readouterr().out
    assert "History cleared." in out
    assert "Unknown command: :nope" in out
    assert "No history yet" in out
    assert len(history) == 0


def test_main_loop_stops_on_eof(monkeypatch):
    def raise_eof(prompt=""):
        raise EOFError

    monkeypatch.setattr("builtins.input", raise_eof)
    main.main_loop(ScanHistory(), None)
