"""Unit tests for core/config.py -- Settings validation.

Settings() is constructed directly so the cached get_settings() instance used
by the rest of the suite is left alone.
"""

import pytest
from pydantic import ValidationError

from core.config import Settings

_LONG_KEY = "k" * 40


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("SECRET_KEY", "JWT_SECRET", "DEBUG", "BCRYPT_ROUNDS", "DATABASE_URL", "PORT"):
        monkeypatch.delenv(name, raising=False)
    # Keep a developer's .env out of these tests
    monkeypatch.setitem(Settings.model_config, "env_file", None)


class TestSecretKey:
    def test_production_requires_key(self):
        with pytest.raises(ValidationError, match="SECRET_KEY is required"):
            Settings()

    def test_short_key_rejected(self, monkeypatch):
        monkeypatch.setenv("SECRET_KEY", "too-short")
        with pytest.raises(ValidationError, match="at least 32 characters"):
            Settings()

    def test_debug_generates_key(self, monkeypatch):
        monkeypatch.setenv("DEBUG", "true")
        first = Settings().secret_key
        assert len(first) >= 32
        assert Settings().secret_key != first

    def test_jwt_secret_alias(self, monkeypatch):
        monkeypatch.setenv("JWT_SECRET", _LONG_KEY)
        assert Settings().secret_key == _LONG_KEY


class TestDefaults:
    def test_defaults(self, monkeypatch):
        monkeypatch.setenv("SECRET_KEY", _LONG_KEY)
        s = Settings()
        assert s.port == 3000
        assert s.token_expire_seconds == 3600
        assert s.bcrypt_rounds == 10
        assert s.database_url.startswith("sqlite:///")
        assert s.database_url.endswith("petstore.db")

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("SECRET_KEY", _LONG_KEY)
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("DATABASE_URL", "sqlite:///other.db")
        s = Settings()
        assert s.port == 8080
        assert s.database_url == "sqlite:///other.db"

    @pytest.mark.parametrize("rounds", ["3", "32"])
    def test_bcrypt_rounds_bounds(self, monkeypatch, rounds):
        monkeypatch.setenv("SECRET_KEY", _LONG_KEY)
        monkeypatch.setenv("BCRYPT_ROUNDS", rounds)
        with pytest.raises(ValidationError):
            Settings()
