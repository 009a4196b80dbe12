"""Unit tests for core/config.py -- SECRET_KEY policy and defaults."""

import pytest
from pydantic import ValidationError

from core.config import Settings


def test_debug_generates_secret(monkeypatch):
    monkeypatch.delenv("SECRET_KEY", raising=False)
    settings = Settings(debug=True, _env_file=None)
    assert len(settings.secret_key) >= 32


def test_production_requires_secret(monkeypatch):
    monkeypatch.delenv("SECRET_KEY", raising=False)
    with pytest.raises(ValidationError, match="SECRET_KEY is required"):
        Settings(debug=False, _env_file=None)


def test_short_secret_rejected():
    with pytest.raises(ValidationError, match="at least 32"):
        Settings(debug=True, secret_key="short", _env_file=None)


def test_defaults():
    settings = Settings(debug=True, _env_file=None)
    assert settings.token_expire_seconds == 7 * 24 * 3600
    assert settings.database_url.startswith("sqlite:///")
    assert settings.auth_rate_limit
    assert settings.rate_limit_storage_uri == "memory://"
