from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, SQLModel

from app.models.user import utcnow


class SupportStatus(str, Enum):
    PENDING = "pending"          # En attente d'un membre du staff
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"


class SupportRequestBase(SQLModel):
    name: Optional[str] = None
    email: Optional[str] = None
    discord_username: Optional[str] = None

    category: str = Field(min_length=1)
    subject: str = Field(min_length=1)
    message: str = Field(min_length=1)


class SupportRequest(SupportRequestBase, table=True):
    __tablename__ = "support_requests"

    id: Optional[int] = Field(default=None, primary_key=True)
    status: SupportStatus = Field(default=SupportStatus.PENDING)
    created_at: datetime = Field(default_factory=utcnow)


class SupportRequestCreate(SupportRequestBase):
    pass


class SupportStatusUpdate(SQLModel):
    status: SupportStatus
