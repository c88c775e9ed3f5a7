from typing import List
from fastapi import APIRouter
from sqlmodel import select
import structlog

from app.api.deps import AdminAccess, DbSession
from app.core.errors import NotFound
from app.models.support import SupportRequest, SupportRequestCreate, SupportStatusUpdate

logger = structlog.get_logger(__name__)

router = APIRouter()

@router.post("")
def submit_support_request(body: SupportRequestCreate, db: DbSession):
    """
    Public : tout le monde peut ouvrir un ticket, connecté ou non.
    """
    ticket = SupportRequest.model_validate(body)
    db.add(ticket)
    db.commit()
    db.refresh(ticket)
    logger.info("support request submitted", ticket_id=ticket.id, category=ticket.category)
    return {"success": True, "message": "Support request submitted successfully"}

@router.get("", response_model=List[SupportRequest])
def list_support_requests(db: DbSession, _admin: AdminAccess):
    # Plus récents d'abord
    return db.exec(select(SupportRequest).order_by(SupportRequest.id.desc())).all()

@router.patch("/{request_id}", response_model=SupportRequest)
def update_support_status(request_id: int, body: SupportStatusUpdate, db: DbSession, _admin: AdminAccess):
    ticket = db.get(SupportRequest, request_id)
    if ticket is None:
        raise NotFound()
    ticket.status = body.status
    db.add(ticket)
    db.commit()
    db.refresh(ticket)
    return ticket
