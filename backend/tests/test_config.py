"""
Tests for application settings
"""
from reflect.core.config import Settings, get_settings


def test_test_environment_is_loaded():
    settings = get_settings()
    assert settings.app_env == "test"
    assert settings.database_url == "sqlite://"
    assert settings.app_name == "Reflect"
    assert settings.app_description == "Journaling App"


def test_postgres_url_is_built_from_parts():
    settings = Settings(
        secret_key="x",
        database_url_override=None,
        postgres_user="journal",
        postgres_password="pw",
        postgres_host="db",
        postgres_port=5433,
        postgres_db="reflect_test",
    )
    assert settings.database_url == "postgresql://journal:pw@db:5433/reflect_test"


def test_comma_separated_lists():
    settings = Settings(
        secret_key="x",
        allowed_origins="http://a.test, http://b.test,",
        image_remote_patterns="https://**, http://localhost",
    )
    assert settings.allowed_origins_list == ["http://a.test", "http://b.test"]
    assert settings.image_remote_patterns_list == ["https://**", "http://localhost"]
