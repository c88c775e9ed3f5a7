from typing import Annotated, Optional
from fastapi import Depends, Header, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session
import structlog

from app.core.config import Settings
from app.core.errors import Forbidden, Unauthorized
from app.core.security import TokenStore, check_admin_code
from app.db.session import get_db
from app.models.user import User
from app.services.user_service import UserService

logger = structlog.get_logger(__name__)

SESSION_USER_KEY = "discord_id"

# auto_error=False : sans header, on tombe sur le 401 plus bas
bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_store(request: Request) -> TokenStore:
    return request.app.state.token_store


DbSession = Annotated[Session, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_settings)]
Tokens = Annotated[TokenStore, Depends(get_token_store)]
BearerCredentials = Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)]


def establish_session(request: Request, user: User) -> None:
    request.session[SESSION_USER_KEY] = user.discord_id


def authenticate(
    request: Request,
    db: Session,
    token_store: TokenStore,
    settings: Settings,
    credentials: Optional[HTTPAuthorizationCredentials],
) -> User:
    """
    Le "Videur" : identifie l'appelant.
    1. Un cookie de session qui pointe vers un utilisateur connu.
    2. Sinon un jeton bearer (stratégie bearer uniquement).
    3. Sinon 401.
    """
    users = UserService(db)

    discord_id = request.session.get(SESSION_USER_KEY)
    if discord_id:
        user = users.get_by_discord_id(discord_id)
        if user is not None:
            return user

    if credentials is not None and settings.AUTH_TOKEN_STRATEGY == "bearer":
        discord_id = token_store.validate(credentials.credentials)
        if discord_id:
            user = users.get_by_discord_id(discord_id)
            if user is not None:
                return user

    raise Unauthorized()


def get_current_user(
    request: Request,
    db: DbSession,
    token_store: Tokens,
    settings: AppSettings,
    credentials: BearerCredentials,
) -> User:
    return authenticate(request, db, token_store, settings, credentials)


def get_optional_user(
    request: Request,
    db: DbSession,
    token_store: Tokens,
    settings: AppSettings,
    credentials: BearerCredentials,
) -> Optional[User]:
    try:
        return authenticate(request, db, token_store, settings, credentials)
    except Unauthorized:
        return None


def require_admin(
    request: Request,
    db: DbSession,
    token_store: Tokens,
    settings: AppSettings,
    credentials: BearerCredentials,
    x_admin_code: Annotated[Optional[str], Header()] = None,
) -> Optional[User]:
    """
    Contrôle admin. Un header x-admin-code correct court-circuite l'identification
    (accès de secours) et chaque usage est journalisé. Renvoie alors None.
    """
    if x_admin_code is not None and check_admin_code(x_admin_code, settings.ADMIN_OVERRIDE_CODE):
        logger.warning(
            "admin override code used",
            method=request.method,
            path=request.url.path,
            client=request.client.host if request.client else None,
        )
        return None

    user = authenticate(request, db, token_store, settings, credentials)
    if not user.is_admin:
        logger.info("admin access denied", user_id=user.id, path=request.url.path)
        raise Forbidden()
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
OptionalUser = Annotated[Optional[User], Depends(get_optional_user)]
AdminAccess = Annotated[Optional[User], Depends(require_admin)]
