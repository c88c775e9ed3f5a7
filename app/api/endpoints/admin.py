from fastapi import APIRouter
from fastapi.responses import JSONResponse
import structlog

from app.api.deps import AppSettings, DbSession, OptionalUser
from app.core.security import check_admin_code
from app.schemas.auth import AdminCodeRequest
from app.services.user_service import UserService

logger = structlog.get_logger(__name__)

router = APIRouter()

@router.post("/verify-code")
def verify_admin_code(body: AdminCodeRequest, db: DbSession, settings: AppSettings, current_user: OptionalUser):
    """
    Vérifie le code admin. Un appelant connecté qui le connaît garde
    le statut admin définitivement.
    """
    if not check_admin_code(body.code, settings.ADMIN_OVERRIDE_CODE):
        logger.warning("invalid admin code submitted", user_id=current_user.id if current_user else None)
        return JSONResponse({"success": False, "message": "Invalid code"}, status_code=401)

    if current_user is not None and not current_user.is_admin:
        UserService(db).grant_admin(current_user)
    return {"success": True}
