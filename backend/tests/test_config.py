"""
Postboard Backend: Configuration Tests
=======================================

What:  Environment validation and the fail-fast entry point.
"""

from unittest.mock import patch

import pytest

from app.config import Settings, get_settings, load_settings
from app.exceptions import ConfigurationError


@pytest.fixture
def fresh_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestLoadSettings:

    def test_defaults(self):
        settings = load_settings()

        assert settings.port == 5000
        assert settings.environment == "development"
        assert settings.api_prefix == "/api"
        assert settings.db_pool_size == 15
        assert settings.cors_origins_list == ["*"]

    def test_missing_database_url(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)

        with pytest.raises(ConfigurationError) as exc_info:
            load_settings()

        assert any(p.startswith("DATABASE_URL") for p in exc_info.value.problems)

    def test_missing_environment(self, monkeypatch):
        monkeypatch.delenv("ENVIRONMENT", raising=False)

        with pytest.raises(ConfigurationError) as exc_info:
            load_settings()

        assert any(p.startswith("ENVIRONMENT") for p in exc_info.value.problems)

    def test_every_problem_reported(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.setenv("ENVIRONMENT", "staging")
        monkeypatch.setenv("PORT", "not-a-port")

        with pytest.raises(ConfigurationError) as exc_info:
            load_settings()

        names = {p.split(":")[0] for p in exc_info.value.problems}
        assert names == {"DATABASE_URL", "ENVIRONMENT", "PORT"}

    @pytest.mark.parametrize("port", ["0", "70000"])
    def test_port_out_of_range(self, monkeypatch, port):
        monkeypatch.setenv("PORT", port)

        with pytest.raises(ConfigurationError):
            load_settings()

    @pytest.mark.parametrize("url", ["", "   ", "not a url"])
    def test_malformed_database_url(self, monkeypatch, url):
        monkeypatch.setenv("DATABASE_URL", url)

        with pytest.raises(ConfigurationError):
            load_settings()

    def test_postgres_url_uses_asyncpg(self):
        settings = Settings(database_url="postgresql://u:p@db:5432/posts", environment="production")

        assert settings.database_url == "postgresql+asyncpg://u:p@db:5432/posts"

    def test_cors_origins_list(self):
        settings = Settings(
            database_url="sqlite+aiosqlite://",
            environment="production",
            cors_origins="http://a.test, http://b.test",
        )

        assert settings.cors_origins_list == ["http://a.test", "http://b.test"]

    def test_api_prefix_must_be_absolute(self, monkeypatch):
        monkeypatch.setenv("API_PREFIX", "api")

        with pytest.raises(ConfigurationError):
            load_settings()


class TestEntryPoint:

    def test_exits_before_listening_without_database_url(self, monkeypatch, fresh_settings_cache):
        from app import __main__ as entry

        monkeypatch.delenv("DATABASE_URL", raising=False)

        with patch.object(entry.uvicorn, "run") as mock_run:
            with pytest.raises(SystemExit) as exc_info:
                entry.main()

        assert exc_info.value.code == 1
        mock_run.assert_not_called()

    def test_runs_uvicorn_on_configured_port(self, monkeypatch, fresh_settings_cache):
        from app import __main__ as entry

        monkeypatch.setenv("PORT", "5050")

        with patch.object(entry.uvicorn, "run") as mock_run:
            entry.main()

        mock_run.assert_called_once()
        assert mock_run.call_args.kwargs["port"] == 5050

    def test_uvicorn_server_header_disabled(self, fresh_settings_cache):
        from app import __main__ as entry

        with patch.object(entry.uvicorn, "run") as mock_run:
            entry.main()

        # Server is stripped in middleware, but uvicorn would add its own
        assert mock_run.call_args.kwargs["server_header"] is False
