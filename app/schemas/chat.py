from typing import Any, List, Optional
from pydantic import BaseModel


class ChatTurn(BaseModel):
    role: str  # "user" ou "assistant"
    content: str


class ChatRequest(BaseModel):
    message: Optional[str] = None
    # Brut : les entrées mal formées sont ignorées, pas rejetées
    history: Any = None


class ChatImage(BaseModel):
    data: bytes
    mime_type: str = "image/jpeg"


class ChatResponse(BaseModel):
    response: str


ChatHistory = List[ChatTurn]
