from typing import Optional

import httpx
import structlog
from authlib.integrations.starlette_client import OAuth, OAuthError
from starlette.requests import Request
from starlette.responses import Response

from app.core.config import Settings
from app.core.errors import ProviderHandshakeFailed
from app.schemas.auth import DiscordIdentity

logger = structlog.get_logger(__name__)

DISCORD_API_URL = "https://discord.com/api/"


class DiscordProvider:
    """
    OAuth2 Discord via Authlib. Le paramètre "state" est gardé dans
    request.session, le SessionMiddleware est donc obligatoire.
    """

    def __init__(self, client_id: str, client_secret: str):
        self.oauth = OAuth()
        self.oauth.register(
            name="discord",
            client_id=client_id,
            client_secret=client_secret,
            authorize_url="https://discord.com/oauth2/authorize",
            access_token_url=f"{DISCORD_API_URL}oauth2/token",
            api_base_url=DISCORD_API_URL,
            client_kwargs={
                "scope": "identify email",
                "token_endpoint_auth_method": "client_secret_post",
            },
        )

    @property
    def client(self):
        return self.oauth.discord

    async def authorize_redirect(self, request: Request, redirect_uri: str) -> Response:
        return await self.client.authorize_redirect(request, redirect_uri)

    async def fetch_identity(self, request: Request) -> DiscordIdentity:
        try:
            # 1. Échange du code contre un access token
            token = await self.client.authorize_access_token(request)
            # 2. Lecture du profil
            resp = await self.client.get("users/@me", token=token)
            resp.raise_for_status()
            return DiscordIdentity.from_profile(resp.json())
        except (OAuthError, httpx.HTTPError, KeyError, ValueError) as e:
            raise ProviderHandshakeFailed(str(e)) from e


def build_discord_provider(settings: Settings) -> Optional[DiscordProvider]:
    if not settings.discord_configured:
        logger.warning("Discord OAuth not configured: missing DISCORD_CLIENT_ID or DISCORD_CLIENT_SECRET")
        return None
    return DiscordProvider(settings.DISCORD_CLIENT_ID, settings.DISCORD_CLIENT_SECRET)
