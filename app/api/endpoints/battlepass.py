from typing import List
from fastapi import APIRouter, status
from sqlmodel import Session, select
import structlog

from app.api.deps import AdminAccess, DbSession
from app.core.errors import NotFound
from app.models.battlepass import (
    BattlepassConfig,
    BattlepassConfigUpdate,
    BattlepassLevel,
    BattlepassLevelCreate,
    BattlepassLevelUpdate,
)

logger = structlog.get_logger(__name__)

router = APIRouter()


def get_or_create_config(db: Session) -> BattlepassConfig:
    config = db.exec(select(BattlepassConfig).order_by(BattlepassConfig.id)).first()
    if config is None:
        config = BattlepassConfig()
        db.add(config)
        db.commit()
        db.refresh(config)
    return config


@router.get("/config", response_model=BattlepassConfig)
def read_config(db: DbSession):
    return get_or_create_config(db)


@router.patch("/config", response_model=BattlepassConfig)
def update_config(body: BattlepassConfigUpdate, db: DbSession, _admin: AdminAccess):
    config = get_or_create_config(db)
    config.sqlmodel_update(body.model_dump(exclude_unset=True))
    db.add(config)
    db.commit()
    db.refresh(config)
    logger.info("battlepass config updated", season_name=config.season_name)
    return config


@router.get("/levels", response_model=List[BattlepassLevel])
def list_levels(db: DbSession):
    return db.exec(select(BattlepassLevel).order_by(BattlepassLevel.level)).all()


@router.post("/levels", response_model=BattlepassLevel, status_code=status.HTTP_201_CREATED)
def create_level(body: BattlepassLevelCreate, db: DbSession, _admin: AdminAccess):
    level = BattlepassLevel.model_validate(body)
    db.add(level)
    db.commit()
    db.refresh(level)
    return level


@router.api_route("/levels/{level_id}", methods=["PUT", "PATCH"], response_model=BattlepassLevel)
def update_level(level_id: int, body: BattlepassLevelUpdate, db: DbSession, _admin: AdminAccess):
    level = db.get(BattlepassLevel, level_id)
    if level is None:
        raise NotFound()
    level.sqlmodel_update(body.model_dump(exclude_unset=True))
    db.add(level)
    db.commit()
    db.refresh(level)
    return level
