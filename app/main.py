from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import Session
from starlette.middleware.sessions import SessionMiddleware
import structlog

from app.core.config import Settings, settings
from app.core.errors import AsylumError, asylum_error_handler, validation_error_handler
from app.core.logging import setup_logging
from app.core.security import InMemoryTokenStore
from app.db.seed import seed_database
from app.db.session import build_engine, init_db
from app.services.chat_service import build_chat_service
from app.services.discord import build_discord_provider
from app.services.uploads import ImageStorage

from app.api.endpoints import admin, auth, battlepass, challenges, chat, servers, support, uploads

logger = structlog.get_logger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Ce code s'exécute au démarrage (avant le yield) et à l'arrêt (après le yield).
    """
    app_settings: Settings = app.state.settings
    logger.info("starting", project=app_settings.PROJECT_NAME)

    init_db(app.state.engine)
    if app_settings.SEED_DATABASE:
        with Session(app.state.engine) as db:
            seed_database(db)
    logger.info("database tables synchronized")

    app.state.token_store.start_sweeping(app_settings.TOKEN_SWEEP_INTERVAL_SECONDS)
    yield
    await app.state.token_store.stop_sweeping()
    app.state.engine.dispose()
    logger.info("stopped", project=app_settings.PROJECT_NAME)

def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    if app_settings is None:
        app_settings = settings

    setup_logging(app_settings.LOG_LEVEL, app_settings.LOG_FORMAT)

    app = FastAPI(
        title=app_settings.PROJECT_NAME,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Collaborateurs de l'application (remplacés dans les tests)
    app.state.settings = app_settings
    app.state.engine = build_engine(app_settings)
    app.state.token_store = InMemoryTokenStore(ttl_seconds=app_settings.token_ttl_seconds)
    app.state.identity_provider = build_discord_provider(app_settings)
    app.state.chat_service = build_chat_service(app_settings)
    app.state.image_storage = ImageStorage(app_settings.UPLOAD_DIR, app_settings.MAX_UPLOAD_BYTES)

    app.add_exception_handler(AsylumError, asylum_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    # Middleware Session (Obligatoire pour Authlib et pour la session de connexion)
    app.add_middleware(
        SessionMiddleware,
        secret_key=app_settings.SECRET_KEY,
        max_age=app_settings.SESSION_MAX_AGE_SECONDS,
        same_site="lax",
        https_only=app_settings.SESSION_HTTPS_ONLY,
    )

    # Configuration CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Inclusion des routes
    app.include_router(auth.router, prefix="/api", tags=["Authentication"])
    app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])
    app.include_router(servers.router, prefix="/api/servers", tags=["Servers"])
    app.include_router(battlepass.router, prefix="/api/battlepass", tags=["Battlepass"])
    app.include_router(challenges.router, prefix="/api/challenges", tags=["Challenges"])
    app.include_router(support.router, prefix="/api/support", tags=["Support"])
    app.include_router(uploads.router, prefix="/api/upload", tags=["Uploads"])
    app.include_router(chat.router, prefix="/api/chat", tags=["Chat"])

    @app.get("/")
    def read_root():
        return {"status": "online", "message": f"{app_settings.PROJECT_NAME} is running"}

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    return app

app = create_app()
