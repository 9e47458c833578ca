"""
Tests de la configuración (pydantic-settings) y del logging.
"""
from loguru import logger

from roastify.core.config import Settings, get_cors_origins
from roastify.core.logging_config import configure_logging


def test_effective_database_url_from_components():
    settings = Settings(
        _env_file=None,
        DATABASE_URL="",
        DATABASE_USER="app",
        DATABASE_PASSWORD="pw",
        DATABASE_HOST="db",
        DATABASE_PORT=5433,
        DATABASE_NAME="roastify",
    )
    assert settings.effective_database_url == "postgresql+asyncpg://app:pw@db:5433/roastify"


def test_database_url_overrides_components():
    settings = Settings(_env_file=None, DATABASE_URL="sqlite+aiosqlite:///./dev.db")
    assert settings.effective_database_url == "sqlite+aiosqlite:///./dev.db"


def test_mirror_defaults():
    settings = Settings(_env_file=None)
    assert settings.MIRROR_STRATEGY == "row_count"
    assert settings.MIRROR_BATCH_SIZE == 100
    assert settings.REMOTE_DB_SSLMODE == "require"
    assert settings.TIMER_TICK_SECONDS == 1.0
    assert settings.TIMER_POLL_SECONDS == 5.0


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("REMOTE_DB_HOST", "remote.example.com")
    monkeypatch.setenv("MIRROR_BATCH_SIZE", "25")
    settings = Settings(_env_file=None)
    assert settings.REMOTE_DB_HOST == "remote.example.com"
    assert settings.MIRROR_BATCH_SIZE == 25


def test_cors_origins_parsing():
    assert get_cors_origins("*") == ["*"]
    assert get_cors_origins('["http://a.com", "http://b.com"]') == ["http://a.com", "http://b.com"]
    assert get_cors_origins("http://a.com, http://b.com") == ["http://a.com", "http://b.com"]


def test_configure_logging_writes_file_sink(tmp_path):
    log_file = tmp_path / "app.log"
    configure_logging("DEBUG", str(log_file))
    try:
        logger.debug("mirror listo")
    finally:
        configure_logging("INFO")

    assert "mirror listo" in log_file.read_text(encoding="utf-8")
