# tests/conftest.py
from __future__ import annotations

import os

import pytest

from helixcompare.core.reference import ReferenceRegistry
from tests.utils import make_home_page, make_offer, make_page

_ENV_KEYS = (
    "HELIX_OUT",
    "HELIX_MAX_PAGES",
    "HELIX_OPERATORS",
    "HELIX_PUSH",
    "HELIX_DEBUG",
    "AIRTABLE_TOKEN",
    "AIRTABLE_BASE",
    "AIRTABLE_TABLE",
)


# -------- Hermetic environment --------
@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for k in _ENV_KEYS:
        monkeypatch.delenv(k, raising=False)
    os.environ.setdefault("PYTHONHASHSEED", "0")
    yield


# -------- Domain fixtures --------
@pytest.fixture
def mobile_page():
    return make_page()


@pytest.fixture
def home_page():
    return make_home_page()


@pytest.fixture
def registry():
    return ReferenceRegistry()


@pytest.fixture
def offer_factory():
    """Factory for canonical rows with optional overrides."""

    def _factory(**overrides):
        return make_offer(**overrides)

    return _factory
