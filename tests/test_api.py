import threading

from api.api import analyze_url


def test_analyze_url_safe_domain():
    result = analyze_url("example.com")
    assert result["url"] == "https://example.com"
    assert result["severity"] == "safe"
    assert result["warn"] is False
    assert result["reasons"] == []
    assert result["features"]["hostname"] == "example.com"
    assert result["features"]["is_valid"] is True


def test_analyze_url_missing_input():
    result = analyze_url(None)
    assert result["url"] is None
    assert result["score"] == 10.0
    assert result["severity"] == "danger"
    assert result["warn"] is True
    assert result["reasons"] == ["invalid URL format"]
    assert result["features"]["is_valid"] is False


def test_analyze_url_reports_reasons_in_order():
    result = analyze_url("http://paypa1.com/login")
    assert result["warn"] is True
    assert result["reasons"][0] == "Connection is not secure (HTTPS missing)"
    assert "Domain closely resembles 'paypal' (possible impersonation)" in result["reasons"]


def test_analyze_url_uncopyable_input():
    result = analyze_url(threading.Lock())
    assert result["severity"] == "danger"
    assert result["features"]["raw"] is None
