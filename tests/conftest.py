"""Root conftest: in-memory database, fake Discord provider and a controllable clock."""

import os

# Must run before app.* is imported: app.main builds a default app from the environment
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret")

from urllib.parse import parse_qs, urlparse

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine, select
from starlette.responses import RedirectResponse
from starlette.testclient import TestClient

from app.core.config import Settings
from app.core.errors import ProviderHandshakeFailed
from app.core.security import InMemoryTokenStore
from app.main import create_app
from app.models.user import User
from app.schemas.auth import DiscordIdentity

ADMIN_CODE = "1327"


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeDiscordProvider:
    """Stands in for Discord: no network, configurable outcome."""

    def __init__(self) -> None:
        self.identity = DiscordIdentity(
            discord_id="1001",
            username="survivor",
            email="survivor@example.com",
            avatar="a1b2c3",
        )
        self.fail = False
        self.redirect_uris: list[str] = []

    async def authorize_redirect(self, request, redirect_uri):
        self.redirect_uris.append(redirect_uri)
        return RedirectResponse(f"https://discord.com/oauth2/authorize?redirect_uri={redirect_uri}", status_code=302)

    async def fetch_identity(self, request):
        if self.fail:
            raise ProviderHandshakeFailed("access_denied")
        return self.identity


@pytest.fixture
def engine():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def db(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def settings(tmp_path):
    return Settings(
        SECRET_KEY="test-secret",
        DATABASE_URL="sqlite://",
        ADMIN_OVERRIDE_CODE=ADMIN_CODE,
        DISCORD_CLIENT_ID=None,
        OPENAI_API_KEY=None,
        BASE_URL=None,
        UPLOAD_DIR=str(tmp_path / "uploads"),
        SEED_DATABASE=False,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def provider():
    return FakeDiscordProvider()


@pytest.fixture
def app(settings, engine, clock, provider):
    app = create_app(settings)
    app.state.engine = engine
    app.state.token_store = InMemoryTokenStore(ttl_seconds=settings.token_ttl_seconds, clock=clock)
    app.state.identity_provider = provider
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def login(client):
    """Run the Discord callback and return the issued token."""

    def _login() -> str:
        response = client.get("/api/callback?code=abc&state=xyz", follow_redirects=False)
        assert response.status_code == 302
        query = parse_qs(urlparse(response.headers["location"]).query)
        return query["authToken"][0]

    return _login


@pytest.fixture
def make_admin(db):
    def _make_admin(discord_id: str = "1001") -> None:
        user = db.exec(select(User).where(User.discord_id == discord_id)).one()
        user.is_admin = True
        db.add(user)
        db.commit()

    return _make_admin


@pytest.fixture
def admin_headers():
    return {"x-admin-code": ADMIN_CODE}
