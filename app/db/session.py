from fastapi import Request
from sqlalchemy.engine import Engine
from sqlmodel import create_engine, Session, SQLModel
from app.core.config import Settings

# IMPORTANT : On doit importer les modèles ici pour que SQLModel les "voie"
# et puisse créer les tables au démarrage.
from app.models.user import User  # noqa: F401
from app.models.server import Server  # noqa: F401
from app.models.battlepass import BattlepassConfig, BattlepassLevel  # noqa: F401
from app.models.support import SupportRequest  # noqa: F401
from app.models.challenge import WeeklyChallenge  # noqa: F401

def build_engine(app_settings: Settings) -> Engine:
    """
    Création du moteur de connexion à partir des settings de l'application.
    DB_ECHO=true affiche les requêtes SQL dans le terminal (utile pour le debug).
    """
    return create_engine(app_settings.DATABASE_URL, echo=app_settings.DB_ECHO, pool_pre_ping=True)

def get_db(request: Request):
    """
    Fonction de dépendance : une session DB par requête, fermée après la réponse.
    Le moteur est celui construit par create_app.
    """
    with Session(request.app.state.engine) as session:
        yield session

def init_db(bind: Engine) -> None:
    SQLModel.metadata.create_all(bind)
