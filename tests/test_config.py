import pytest
from tasks_api.config import get_settings, Settings


def test_get_settings():
    """Test that settings can be loaded"""
    settings = get_settings()
    assert settings is not None
    assert isinstance(settings, Settings)


def test_settings_has_required_fields():
    """Test that settings has all required fields"""
    settings = get_settings()
    assert hasattr(settings, 'app_name')
    assert hasattr(settings, 'database_url')
    assert hasattr(settings, 'log_level')
    assert hasattr(settings, 'db_statement_timeout_ms')


def test_settings_default_values():
    """Test default values in settings"""
    settings = Settings(_env_file=None)
    assert settings.app_name == "Tasks API"
    assert settings.api_prefix == "/api/v1"
    assert settings.port == 3000
    assert settings.debug is False
    assert settings.migration_table is None


def test_settings_read_from_environment(monkeypatch):
    """Environment variables override defaults, case-insensitively"""
    monkeypatch.setenv("DB_POOL_SIZE", "3")
    monkeypatch.setenv("db_max_overflow", "2")
    settings = Settings(_env_file=None)
    assert settings.db_pool_size == 3
    assert settings.max_open_connections == 5


def test_conftest_database_url():
    """The suite runs against in-memory SQLite"""
    assert get_settings().database_url == "sqlite://"


def test_test_database_url_must_differ():
    settings = Settings(_env_file=None, database_url="sqlite://", test_database_url="sqlite://")
    with pytest.raises(ValueError):
        settings.get_database_url(is_test=True)


def test_is_production():
    assert Settings(_env_file=None, environment="Production").is_production is True
    assert Settings(_env_file=None, environment="development").is_production is False


def test_settings_singleton():
    """Test that get_settings returns the same instance (cached)"""
    settings1 = get_settings()
    settings2 = get_settings()
    assert settings1 is settings2
