from typing import List
from fastapi import APIRouter, status
from sqlmodel import select

from app.api.deps import AdminAccess, DbSession
from app.models.server import Server, ServerCreate

router = APIRouter()

@router.get("", response_model=List[Server])
def list_servers(db: DbSession):
    return db.exec(select(Server).order_by(Server.id)).all()

@router.post("", response_model=Server, status_code=status.HTTP_201_CREATED)
def create_server(body: ServerCreate, db: DbSession, _admin: AdminAccess):
    server = Server(**body.model_dump())
    db.add(server)
    db.commit()
    db.refresh(server)
    return server
