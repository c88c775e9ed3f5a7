from fastapi import APIRouter, Request
from starlette.concurrency import run_in_threadpool
from starlette.responses import RedirectResponse
import structlog

from app.api import deps
from app.api.deps import AppSettings, BearerCredentials, CurrentUser, DbSession, Tokens
from app.core.errors import InvalidOrExpiredToken, NotFound, ProviderHandshakeFailed, ProviderUnconfigured
from app.models.user import UserRead
from app.schemas.auth import ExchangeTokenRequest, ExchangeTokenResponse
from app.services.user_service import UserService

logger = structlog.get_logger(__name__)

router = APIRouter()

FAILED_LOGIN_URL = "/?auth=failed"


def _callback_url(request: Request, settings) -> str:
    if settings.BASE_URL:
        return f"{settings.BASE_URL.rstrip('/')}/api/callback"
    # Lié à l'hôte utilisé par le navigateur
    return str(request.url_for("auth_callback"))


@router.get("/login")
async def login(request: Request, settings: AppSettings):
    provider = request.app.state.identity_provider
    if provider is None:
        raise ProviderUnconfigured()
    return await provider.authorize_redirect(request, _callback_url(request, settings))


@router.get("/callback", name="auth_callback")
async def auth_callback(request: Request, db: DbSession, token_store: Tokens):
    provider = request.app.state.identity_provider
    if provider is None:
        return RedirectResponse(url=FAILED_LOGIN_URL, status_code=302)

    try:
        # 1. Code -> profil Discord
        identity = await provider.fetch_identity(request)
    except ProviderHandshakeFailed as e:
        logger.warning("discord login failed", error=str(e))
        return RedirectResponse(url=FAILED_LOGIN_URL, status_code=302)

    # 2. Création ou mise à jour de l'utilisateur local (appel DB bloquant, hors de la boucle)
    user = await run_in_threadpool(UserService(db).upsert_from_identity, identity)

    # 3. Jeton pour les navigateurs qui perdent le cookie cross-site (mobile)
    token = token_store.issue(user.discord_id)

    # 4. Session pour tous les autres
    deps.establish_session(request, user)

    logger.info("discord login succeeded", user_id=user.id)
    return RedirectResponse(url=f"/?authToken={token}", status_code=302)


@router.post("/auth/exchange-token", response_model=ExchangeTokenResponse)
def exchange_token(
    body: ExchangeTokenRequest,
    request: Request,
    db: DbSession,
    token_store: Tokens,
    settings: AppSettings,
):
    """
    Échange un jeton de connexion à usage unique contre un cookie de session.
    N'existe qu'avec AUTH_TOKEN_STRATEGY=exchange.
    """
    if settings.AUTH_TOKEN_STRATEGY != "exchange":
        raise NotFound()

    discord_id = token_store.consume(body.token)
    if discord_id is None:
        raise InvalidOrExpiredToken()

    user = UserService(db).get_by_discord_id(discord_id)
    if user is None:
        raise InvalidOrExpiredToken()

    deps.establish_session(request, user)
    return ExchangeTokenResponse(user=UserRead.model_validate(user))


@router.get("/auth/user", response_model=UserRead)
def read_current_user(current_user: CurrentUser):
    return current_user


def _logout(request: Request, token_store, credentials) -> None:
    if credentials is not None:
        token_store.revoke(credentials.credentials)
        logger.info("auth token revoked")
    request.session.clear()


@router.get("/logout")
def logout_redirect(request: Request, token_store: Tokens, credentials: BearerCredentials):
    _logout(request, token_store, credentials)
    return RedirectResponse(url="/", status_code=302)


@router.post("/logout")
def logout(request: Request, token_store: Tokens, credentials: BearerCredentials):
    _logout(request, token_store, credentials)
    return {"success": True}
