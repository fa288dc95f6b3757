"""Shared fixtures for the OU audit tests."""

from __future__ import annotations

import logging

import pytest

from ou_audit.env_settings import EnvSettings, get_env


@pytest.fixture
def env() -> EnvSettings:
    return EnvSettings(OU_AUDIT_DC_HOST="dc01.corp.local", OU_AUDIT_DOMAIN="corp.local")


@pytest.fixture
def log() -> logging.Logger:
    return logging.getLogger("ou_audit.tests")


@pytest.fixture(autouse=True)
def _clear_env_cache(monkeypatch: pytest.MonkeyPatch):
    for name in ("OU_AUDIT_DC_HOST", "OU_AUDIT_DOMAIN", "USERDNSDOMAIN", "OU_AUDIT_LOG_FILE", "OU_AUDIT_EXPORT_DIR"):
        monkeypatch.delenv(name, raising=False)
    get_env.cache_clear()
    yield
    get_env.cache_clear()
