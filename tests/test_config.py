from config import BRANDS, RISKY_TLDS, ReferenceLists, Settings, get_reference_lists, get_settings
from heuristic_scorer import build_rules


def test_defaults_without_env():
    settings = get_settings()
    assert settings.reference == ReferenceLists()
    assert settings.reference.brands == BRANDS
    assert settings.history_limit == 25
    assert settings.history_file == "phish_history_v1.json"
    assert settings.collect_jobs == 1
    assert settings.log_level == "WARNING"


def test_list_overrides_are_trimmed_and_lowercased(monkeypatch):
    monkeypatch.setenv("PHISH_BRANDS", " Contoso, fabrikam ,,")
    assert get_reference_lists().brands == ("contoso", "fabrikam")


def test_tld_overrides_get_a_leading_dot(monkeypatch):
    monkeypatch.setenv("PHISH_RISKY_TLDS", "xyz,.top")
    monkeypatch.setenv("PHISH_YOUNG_TLDS", "tk")
    reference = get_reference_lists()
    assert reference.risky_tlds == (".xyz", ".top")
    assert reference.young_tlds == (".tk",)


def test_empty_env_value_means_empty_list(monkeypatch):
    monkeypatch.setenv("PHISH_KEYWORDS", "")
    reference = get_reference_lists()
    assert reference.keywords == ()
    assert reference.risky_tlds == RISKY_TLDS


def test_numeric_overrides_fall_back_on_bad_values(monkeypatch):
    monkeypatch.setenv("PHISH_HISTORY_LIMIT", "abc")
    monkeypatch.setenv("PHISH_COLLECT_JOBS", "4")
    monkeypatch.setenv("PHISH_LOG_LEVEL", "debug")
    settings = get_settings()
    assert settings.history_limit == 25
    assert settings.collect_jobs == 4
    assert settings.log_level == "DEBUG"


def test_history_limit_is_at_least_one(monkeypatch):
    monkeypatch.setenv("PHISH_HISTORY_LIMIT", "0")
    assert get_settings().history_limit == 1


def test_explicit_reference_wins_over_env(monkeypatch):
    monkeypatch.setenv("PHISH_BRANDS", "contoso")
    custom = ReferenceLists(brands=("fabrikam",))
    assert get_settings(custom).reference.brands == ("fabrikam",)


def test_reference_lists_are_hashable_for_rule_caching():
    assert build_rules(ReferenceLists()) is build_rules(ReferenceLists())
    assert isinstance(Settings().reference, ReferenceLists)


def test_reference_lists_coerce_fields_to_tuples():
    reference = ReferenceLists(brands=["contoso"], keywords=None, known_bad={"bad.test"})
    assert reference.brands == ("contoso",)
    assert reference.keywords == ()
    assert reference.known_bad == ("bad.test",)
    assert reference == ReferenceLists(brands=("contoso",), keywords=(), known_bad=("bad.test",))
    hash(reference)
