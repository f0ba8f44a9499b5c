import os

import pytest


@pytest.fixture(autouse=True)
def _clean_infixcalc_env(monkeypatch):
    """Keep INFIXCALC_* variables from the outer shell out of the tests."""
    for key in list(os.environ):
        if key.startswith("INFIXCALC_"):
            monkeypatch.delenv(key, raising=False)
    yield
