from app.core.config import Settings


class TestSettings:
    def test_database_url_assembled_from_postgres_parts(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        settings = Settings(
            POSTGRES_SERVER="pg",
            POSTGRES_USER="asylum",
            POSTGRES_PASSWORD="secret",
            POSTGRES_DB="site",
        )
        assert settings.DATABASE_URL == "postgresql://asylum:secret@pg/site"

    def test_explicit_database_url_wins(self):
        assert Settings(DATABASE_URL="sqlite:///local.db").DATABASE_URL == "sqlite:///local.db"

    def test_bearer_strategy_is_the_default(self):
        settings = Settings(DATABASE_URL="sqlite://")
        assert settings.AUTH_TOKEN_STRATEGY == "bearer"
        assert settings.token_ttl_seconds == 7 * 24 * 60 * 60

    def test_exchange_strategy_uses_short_ttl(self):
        settings = Settings(DATABASE_URL="sqlite://", AUTH_TOKEN_STRATEGY="exchange")
        assert settings.token_ttl_seconds == 60

    def test_admin_override_disabled_by_default(self, monkeypatch):
        monkeypatch.delenv("ADMIN_OVERRIDE_CODE", raising=False)
        assert Settings(DATABASE_URL="sqlite://").ADMIN_OVERRIDE_CODE is None

    def test_discord_configured(self):
        assert not Settings(DATABASE_URL="sqlite://").discord_configured
        assert Settings(
            DATABASE_URL="sqlite://", DISCORD_CLIENT_ID="id", DISCORD_CLIENT_SECRET="secret"
        ).discord_configured
