"""
Happy Thoughts API — Settings Tests
=====================================

What:  Environment overrides, defaults and validation of Settings.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from happy_thoughts.config import Settings
from happy_thoughts.database import Database


class TestSettings:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        settings = Settings(_env_file=None)

        assert settings.database_url.startswith("postgresql+asyncpg://")
        assert settings.port == 8080
        assert settings.log_level == "INFO"
        assert settings.cors_origins_list == ["*"]
        assert settings.auto_create_schema is False

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./other.db")
        monkeypatch.setenv("PORT", "9000")
        monkeypatch.setenv("CORS_ORIGINS", "http://localhost:3000, https://thoughts.example.com")

        settings = Settings(_env_file=None)

        assert settings.database_url == "sqlite+aiosqlite:///./other.db"
        assert settings.port == 9000
        assert settings.cors_origins_list == [
            "http://localhost:3000",
            "https://thoughts.example.com",
        ]

    def test_log_level_normalized(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert Settings(_env_file=None).log_level == "DEBUG"

    def test_invalid_log_level_rejected(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "chatty")
        with pytest.raises(PydanticValidationError):
            Settings(_env_file=None)

    def test_invalid_port_rejected(self, monkeypatch):
        monkeypatch.setenv("PORT", "70000")
        with pytest.raises(PydanticValidationError):
            Settings(_env_file=None)


class TestDatabaseFromSettings:

    @pytest.mark.asyncio
    async def test_sqlite_handle(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'cfg.db'}")
        database = Database.from_settings(Settings(_env_file=None))

        assert database.is_sqlite
        assert await database.ping() is True
        await database.dispose()
