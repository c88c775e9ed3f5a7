import json
from typing import Any, Optional, Tuple

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile
import structlog

from app.api.deps import AppSettings
from app.core.errors import BadRequest
from app.schemas.chat import ChatImage, ChatRequest, ChatResponse
from app.services.chat_service import sanitize_history

logger = structlog.get_logger(__name__)

router = APIRouter()

CHAT_ERROR = "Sorry, I encountered an error. Please try again."
FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


def _reply(text: str, status_code: int = 200) -> JSONResponse:
    return JSONResponse(ChatResponse(response=text).model_dump(), status_code=status_code)


async def _read_chat_request(request: Request, max_image_bytes: int) -> Tuple[ChatRequest, Optional[ChatImage]]:
    """
    Le widget envoie du JSON, ou un formulaire quand une capture est jointe
    (history est alors une chaîne JSON).
    """
    content_type = request.headers.get("content-type", "")
    image = None

    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        history: Any = form.get("history")
        if isinstance(history, str):
            try:
                history = json.loads(history)
            except ValueError:
                history = []
        upload = form.get("image")
        if isinstance(upload, UploadFile):
            data = await upload.read(max_image_bytes + 1)
            if len(data) > max_image_bytes:
                logger.info("chat image rejected", filename=upload.filename, limit=max_image_bytes)
                raise BadRequest("Image too large")
            if data:
                image = ChatImage(data=data, mime_type=upload.content_type or "image/jpeg")
        message = form.get("message")
        return ChatRequest(message=message if isinstance(message, str) else None, history=history), image

    try:
        body = await request.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}
    message = body.get("message")
    return ChatRequest(message=message if isinstance(message, str) else None, history=body.get("history")), image


@router.post("", response_model=ChatResponse)
async def chat(request: Request, settings: AppSettings):
    chat_request, image = await _read_chat_request(request, settings.MAX_CHAT_IMAGE_BYTES)

    if not chat_request.message or not chat_request.message.strip():
        return _reply("Please provide a message.", status_code=400)

    service = request.app.state.chat_service
    if service is None:
        return _reply("AI service not configured.", status_code=500)

    try:
        answer = await service.reply(chat_request.message, sanitize_history(chat_request.history), image)
    except Exception:
        logger.exception("chat completion failed")
        return _reply(CHAT_ERROR, status_code=500)
    return _reply(answer)
