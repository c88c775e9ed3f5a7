import structlog
from sqlmodel import Session, select

from app.models.battlepass import BattlepassLevel
from app.models.server import Server

logger = structlog.get_logger(__name__)

BATTLEPASS_LEVEL_COUNT = 50

DEFAULT_SERVERS = [
    {
        "name": "Livonia 101x | ASYLUM™",
        "map": "Livonia",
        "description": "High loot, full cars, PvPvE experience in Livonia.",
        "multiplier": "101x",
        "features": ["PvPvE", "Full cars", "Economy"],
        "connection_info": "127.0.0.1:2302",
    },
    {
        "name": "Chernarus 102x | ASYLUM™",
        "map": "Chernarus",
        "description": "Extreme survival with boosted economy.",
        "multiplier": "102x",
        "features": ["PvPvE", "Full cars", "Economy"],
        "connection_info": "127.0.0.1:2302",
    },
]


def seed_database(db: Session) -> None:
    """Remplit les tables vides dont dépendent les pages publiques. Idempotent."""
    if db.exec(select(Server)).first() is None:
        for server in DEFAULT_SERVERS:
            db.add(Server(**{**server, "features": list(server["features"])}))
        logger.info("seeded servers", count=len(DEFAULT_SERVERS))

    if db.exec(select(BattlepassLevel)).first() is None:
        for i in range(1, BATTLEPASS_LEVEL_COUNT + 1):
            db.add(BattlepassLevel(
                level=i,
                free_reward=f"Level {i} Scrap",
                premium_reward=f"Level {i} Tactical Gear",
            ))
        logger.info("seeded battlepass levels", count=BATTLEPASS_LEVEL_COUNT)

    db.commit()
