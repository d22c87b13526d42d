import pytest

from epharmacy.core.config import Settings


@pytest.mark.unit
class TestSettings:

    def test_cors_origins_comma_list(self, monkeypatch):
        monkeypatch.setenv("BACKEND_CORS_ORIGINS", "http://localhost:3000, http://example.com")

        settings = Settings()

        assert [str(o).rstrip("/") for o in settings.BACKEND_CORS_ORIGINS] == [
            "http://localhost:3000",
            "http://example.com",
        ]

    def test_cors_origins_json_list(self, monkeypatch):
        monkeypatch.setenv("BACKEND_CORS_ORIGINS", '["http://localhost:3000", "http://example.com"]')

        settings = Settings()

        assert len(settings.BACKEND_CORS_ORIGINS) == 2
        assert str(settings.BACKEND_CORS_ORIGINS[1]).rstrip("/") == "http://example.com"

    def test_cors_origins_default_empty(self, monkeypatch):
        monkeypatch.delenv("BACKEND_CORS_ORIGINS", raising=False)

        assert Settings().BACKEND_CORS_ORIGINS == []

    @pytest.mark.parametrize("url,expected", [
        ("sqlite:///./local.db", "sqlite+aiosqlite:///./local.db"),
        ("postgresql://u:p@db:5432/pharmacy", "postgresql+asyncpg://u:p@db:5432/pharmacy"),
        (
            "postgresql://u:p@db/pharmacy?sslmode=require&channel_binding=require",
            "postgresql+asyncpg://u:p@db/pharmacy?ssl=require",
        ),
    ])
    def test_database_url_rewritten_for_async_drivers(self, monkeypatch, url, expected):
        monkeypatch.setenv("DATABASE_URL", url)

        assert Settings().DATABASE_URL == expected
