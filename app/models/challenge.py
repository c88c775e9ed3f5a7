from typing import Optional
from pydantic import field_validator
from sqlmodel import Field, SQLModel


class WeeklyChallengeBase(SQLModel):
    title: str
    description: str
    xp_reward: int = Field(default=100)
    is_active: bool = Field(default=True)
    target_count: int = Field(default=1)
    challenge_type: str = Field(default="manual")


class WeeklyChallenge(WeeklyChallengeBase, table=True):
    __tablename__ = "weekly_challenges"

    id: Optional[int] = Field(default=None, primary_key=True)


class WeeklyChallengeCreate(WeeklyChallengeBase):
    pass


class WeeklyChallengeUpdate(SQLModel):
    title: Optional[str] = None
    description: Optional[str] = None
    xp_reward: Optional[int] = None
    is_active: Optional[bool] = None
    target_count: Optional[int] = None
    challenge_type: Optional[str] = None

    # Mise à jour partielle : un champ peut manquer, mais pas valoir null
    @field_validator("*")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("must not be null")
        return v
