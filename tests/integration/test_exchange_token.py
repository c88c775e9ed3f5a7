import pytest

from app.core.config import Settings

EXCHANGE_TTL = 60


@pytest.fixture
def settings(tmp_path):
    return Settings(
        SECRET_KEY="test-secret",
        DATABASE_URL="sqlite://",
        UPLOAD_DIR=str(tmp_path / "uploads"),
        SEED_DATABASE=False,
        DISCORD_CLIENT_ID=None,
        OPENAI_API_KEY=None,
        BASE_URL=None,
        AUTH_TOKEN_STRATEGY="exchange",
    )


class TestExchangeToken:
    def test_exchange_establishes_session(self, client, login):
        token = login()
        client.cookies.clear()

        response = client.post("/api/auth/exchange-token", json={"token": token})

        assert response.status_code == 200
        assert response.json()["user"]["discord_id"] == "1001"
        assert client.get("/api/auth/user").status_code == 200

    def test_token_is_single_use(self, client, login):
        token = login()

        first = client.post("/api/auth/exchange-token", json={"token": token})
        second = client.post("/api/auth/exchange-token", json={"token": token})

        assert first.status_code == 200
        assert second.status_code == 401
        assert second.json() == {"message": "Invalid or expired token"}

    def test_token_expires_after_a_minute(self, client, login, clock):
        token = login()
        clock.advance(EXCHANGE_TTL + 1)

        response = client.post("/api/auth/exchange-token", json={"token": token})

        assert response.status_code == 401

    def test_unknown_token(self, client):
        response = client.post("/api/auth/exchange-token", json={"token": "forged"})
        assert response.status_code == 401

    def test_missing_token_is_invalid_input(self, client):
        response = client.post("/api/auth/exchange-token", json={})
        assert response.status_code == 400
        assert response.json() == {"message": "Invalid input", "field": "token"}

    def test_exchange_tokens_are_not_bearer_tokens(self, client, login):
        token = login()
        client.cookies.clear()

        response = client.get("/api/auth/user", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
