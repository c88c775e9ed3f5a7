from typing import List, Optional
from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class ServerBase(SQLModel):
    name: str
    map: str
    description: str
    multiplier: str  # ex: "101x"
    connection_info: Optional[str] = None


class Server(ServerBase, table=True):
    __tablename__ = "servers"

    id: Optional[int] = Field(default=None, primary_key=True)
    features: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))


class ServerCreate(ServerBase):
    features: List[str] = []
