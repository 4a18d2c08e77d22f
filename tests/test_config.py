"""Tests for environment settings."""

from orderflow.config import Settings


class TestFromEnv:
    def test_defaults(self, monkeypatch):
        for name in (
            "DATABASE_URL",
            "LOG_LEVEL",
            "SQL_ECHO",
            "ORDER_NUMBER_ATTEMPTS",
            "REPORT_WINDOW_DAYS",
            "TOP_PRODUCTS",
            "HOST",
            "PORT",
        ):
            monkeypatch.delenv(f"ORDERFLOW_{name}", raising=False)

        settings = Settings.from_env()

        assert settings == Settings()
        assert settings.database_url == "sqlite+aiosqlite:///./orderflow.db"
        assert settings.report_window_days == 30

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("ORDERFLOW_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
        monkeypatch.setenv("ORDERFLOW_LOG_LEVEL", "debug")
        monkeypatch.setenv("ORDERFLOW_SQL_ECHO", "yes")
        monkeypatch.setenv("ORDERFLOW_TOP_PRODUCTS", "3")
        monkeypatch.setenv("ORDERFLOW_PORT", "9000")

        settings = Settings.from_env()

        assert settings.database_url == "sqlite+aiosqlite:///:memory:"
        assert settings.log_level == "DEBUG"
        assert settings.sql_echo is True
        assert settings.top_products == 3
        assert settings.port == 9000
