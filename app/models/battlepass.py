from typing import Optional
from pydantic import field_validator
from sqlmodel import Field, SQLModel


class BattlepassConfig(SQLModel, table=True):
    """Table à une seule ligne, créée à la première lecture."""

    __tablename__ = "battlepass_config"

    id: Optional[int] = Field(default=None, primary_key=True)
    season_name: str = Field(default="Genesis")
    days_left: int = Field(default=25)
    theme_color: str = Field(default="tech-blue")


class BattlepassConfigUpdate(SQLModel):
    season_name: Optional[str] = None
    days_left: Optional[int] = None
    theme_color: Optional[str] = None

    # Omis = inchangé, mais null n'est pas une valeur pour ces colonnes
    @field_validator("season_name", "days_left", "theme_color")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("must not be null")
        return v


class BattlepassLevelBase(SQLModel):
    level: int
    free_reward: str
    premium_reward: str
    image_url: Optional[str] = None
    free_image_url: Optional[str] = None
    premium_image_url: Optional[str] = None


class BattlepassLevel(BattlepassLevelBase, table=True):
    __tablename__ = "battlepass_levels"

    id: Optional[int] = Field(default=None, primary_key=True)


class BattlepassLevelCreate(BattlepassLevelBase):
    pass


class BattlepassLevelUpdate(SQLModel):
    level: Optional[int] = None
    free_reward: Optional[str] = None
    premium_reward: Optional[str] = None
    # null efface l'image
    image_url: Optional[str] = None
    free_image_url: Optional[str] = None
    premium_image_url: Optional[str] = None

    @field_validator("level", "free_reward", "premium_reward")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("must not be null")
        return v
