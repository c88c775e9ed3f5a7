from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4
from sqlmodel import Field, SQLModel, AutoString
from pydantic import EmailStr


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserBase(SQLModel):
    # Snowflake Discord : la clé sur laquelle chaque connexion fait l'upsert
    discord_id: str = Field(unique=True, index=True)
    username: str

    email: Optional[EmailStr] = Field(default=None, sa_type=AutoString)
    avatar_url: Optional[str] = None

    is_admin: bool = Field(default=False)


class User(UserBase, table=True):
    __tablename__ = "users"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class UserRead(UserBase):
    id: str
    created_at: datetime
    updated_at: datetime
