"""Pytest configuration and shared fixtures."""

import pytest


@pytest.fixture(autouse=True)
def clean_wrac_env(monkeypatch):
    """Keep WRAC_* variables from the developer's shell out of the tests."""
    for name in ("WRAC_URL", "WRAC_OPEN_TIMEOUT", "WRAC_REPLY_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
