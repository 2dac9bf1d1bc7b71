import os

import pytest

from config import ReferenceLists


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep developer PHISH_* overrides out of the test run."""
    for name in list(os.environ):
        if name.startswith("PHISH_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def reference():
    return ReferenceLists()
