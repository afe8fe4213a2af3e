"""Unit tests for engine settings configuration."""

from pathlib import Path

from knowledge_engine.config import Settings


def test_settings_uses_backend_env_file_independent_of_cwd():
    """Settings should always include backend/.env as an env source."""
    env_files = Settings.model_config.get("env_file")
    assert env_files is not None

    normalized = {str(Path(item)) for item in env_files}
    expected_backend_env = str(Path(__file__).resolve().parents[2] / ".env")

    assert expected_backend_env in normalized
    assert str(Path(".env")) in normalized


def test_environment_overrides_defaults(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite:///./override.db")
    monkeypatch.setenv("DB_POOL_SIZE", "3")
    monkeypatch.setenv("AUTO_CREATE_SCHEMA", "true")

    settings = Settings(_env_file=None)

    assert settings.database_url == "sqlite:///./override.db"
    assert settings.db_pool_size == 3
    assert settings.auto_create_schema is True


def test_log_levels_default_to_quiet_sql(monkeypatch):
    for name in ("LOG_LEVEL", "LOG_LEVEL_SQL", "LOG_LEVEL_REPOSITORY"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.log_level == "INFO"
    assert settings.log_level_sql == "WARNING"
    assert settings.log_level_repository == "INFO"
