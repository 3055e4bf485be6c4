"""
Tests for hris/core/config.py - Configuration and settings validation.
"""
import pytest


class TestSettingsValidation:
    """Production settings refuse insecure defaults."""

    def _settings(self, **overrides):
        from hris.core.config import Settings

        return Settings(_env_file=None, **overrides)

    def test_development_mode_allows_default_secrets(self):
        settings = self._settings(ENVIRONMENT="development", SECRET_KEY="changeme")

        assert settings.ENVIRONMENT == "development"
        assert settings.COOKIE_SECURE is False

    def test_production_mode_rejects_default_secret_key(self):
        with pytest.raises(ValueError) as exc_info:
            self._settings(
                ENVIRONMENT="production",
                DEBUG=False,
                SECRET_KEY="changeme",
                DATABASE_URL="postgresql+asyncpg://hris:Str0ng-Pass@db/hris",
                ALLOWED_ORIGINS=["https://hr.example.com"],
            )

        assert "SECRET_KEY is insecure" in str(exc_info.value)

    def test_production_mode_rejects_insecure_db_password(self):
        with pytest.raises(ValueError) as exc_info:
            self._settings(
                ENVIRONMENT="production",
                DEBUG=False,
                SECRET_KEY="a-very-secure-secret-key-that-is-long-enough-32chars",
                DATABASE_URL="postgresql+asyncpg://hris:password@db/hris",
                ALLOWED_ORIGINS=["https://hr.example.com"],
            )

        assert "Database password is insecure" in str(exc_info.value)

    def test_production_mode_rejects_debug_and_localhost_origins(self):
        with pytest.raises(ValueError) as exc_info:
            self._settings(
                ENVIRONMENT="production",
                DEBUG=True,
                SECRET_KEY="a-very-secure-secret-key-that-is-long-enough-32chars",
                DATABASE_URL="postgresql+asyncpg://hris:Str0ng-Pass@db/hris",
                ALLOWED_ORIGINS=["http://localhost:5173"],
            )

        message = str(exc_info.value)
        assert "DEBUG must be False" in message
        assert "ALLOWED_ORIGINS" in message

    def test_valid_production_settings(self):
        settings = self._settings(
            ENVIRONMENT="production",
            DEBUG=False,
            SECRET_KEY="a-very-secure-secret-key-that-is-long-enough-32chars",
            DATABASE_URL="postgresql+asyncpg://hris:Str0ng-Pass@db/hris",
            ALLOWED_ORIGINS=["https://hr.example.com"],
        )

        assert settings.COOKIE_SECURE is True


class TestDerivedSettings:
    def test_database_url_built_from_postgres_parts(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        from hris.core.config import Settings

        settings = Settings(
            _env_file=None,
            POSTGRES_USER="hr",
            POSTGRES_PASSWORD="pw",
            POSTGRES_SERVER="pg",
            POSTGRES_PORT=5433,
            POSTGRES_DB="people",
        )

        assert settings.DATABASE_URL == "postgresql+asyncpg://hr:pw@pg:5433/people"

    def test_csv_lists_are_split(self):
        from hris.core.config import Settings

        settings = Settings(
            _env_file=None,
            ALLOWED_ORIGINS="https://a.example.com, https://b.example.com",
            ALLOWED_UPLOAD_EXTENSIONS="pdf,png",
        )

        assert settings.ALLOWED_ORIGINS == ["https://a.example.com", "https://b.example.com"]
        assert settings.ALLOWED_UPLOAD_EXTENSIONS == ["pdf", "png"]

    def test_upload_size_in_bytes(self):
        from hris.core.config import Settings

        assert Settings(_env_file=None, MAX_UPLOAD_SIZE_MB=2).MAX_UPLOAD_SIZE_BYTES == 2 * 1024 * 1024
