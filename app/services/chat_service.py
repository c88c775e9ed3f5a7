import base64
from typing import Any, List, Optional

import structlog
from openai import AsyncOpenAI

from app.core.config import Settings
from app.schemas.chat import ChatHistory, ChatImage, ChatTurn

logger = structlog.get_logger(__name__)

MAX_HISTORY_TURNS = 10
MAX_CONTENT_CHARS = 2000

SYSTEM_PROMPT = """You are an AI helper for a DayZ server on PS4/PS5. Keep responses short and natural - sound human, not robotic. Avoid overly formal phrases like "Respectfully" and don't keep repeating the server name.

SERVER NAMES:
101x | ASYLUM™ | PvPvE | Full cars | Economy
102x | ASYLUM™ | PvPvE | Full cars | Economy

RAIDING RULES:
- Raiding during weekdays is strictly prohibited. Weekdays are for gathering, building, and general gameplay.
- Raids only occur on weekends to maintain server balance and fairness.
- Raiding hours: 5:00 PM EST to 1:00 AM EST only.

GENERAL RULES:
- Crates are not allowed - they despawn after every reset.
- No griefing: no blowing up tents/storage, no blocking entrances with tents/cars, no spamming traps (landmines/beartraps).

BASE MAINTENANCE:
- For containers and tents: take an object out, wait 10 seconds, put it back.
- For walls: put a camo net on, leave 5 seconds, remove it.
- Flags automatically refresh structures, but every 10 days you must remove and reattach the flag to refresh it. This prevents lag and keeps the base system healthy. Unattended bases despawn automatically.

HOW TO SHOP (in Discord):
1. Go to 🛒┆shop-commands
2. Use /shop list items (click the popup)
3. Type the exact item name, provide coordinates and payment method
4. If items don't spawn, make a support ticket

TRADING RULES (in #🔂┆trading):
- No scams - if scammed, open a ticket in #🎫┆support
- No real money trades
- No KOS while trading
- No fake trades or wasting members' time

CUSTOM NPCs:
- Default (no explosives): 35k
- Upgraded (explosives + unreleased items): 50k
- To buy: make a shop ticket in Discord. After paying the creation fee, you pay spawn fees like any other NPC.

CUSTOM BASES (monthly):
- Medium Castle Base: 30,000
- Large Castle Base: 50,000
- Extras: Water Pump 5k, Greenhouse 5k, VIP Entrance 10k

FACTIONS:
- Creation: 10k
- Rename existing: 3k
- Cancellation: 1k

If the user sends an image, analyze it and respond helpfully. For DayZ-related images (maps, bases, gear, gameplay), provide tactical advice."""

NO_RESPONSE = "No response generated."


def sanitize_history(history: Any) -> ChatHistory:
    """Garde les derniers tours qui ressemblent à des messages, ignore le reste."""
    if not isinstance(history, list):
        return []
    turns: List[ChatTurn] = []
    for item in history[-MAX_HISTORY_TURNS:]:
        if isinstance(item, dict) and isinstance(item.get("content"), str):
            role = "user" if item.get("role") == "user" else "assistant"
            turns.append(ChatTurn(role=role, content=item["content"][:MAX_CONTENT_CHARS]))
    return turns


class AsylumChatService:

    def __init__(self, client: AsyncOpenAI, model: str, vision_model: str):
        self.client = client
        self.model = model
        self.vision_model = vision_model

    def build_messages(self, message: str, history: ChatHistory, image: Optional[ChatImage] = None) -> List[dict]:
        text = message[:MAX_CONTENT_CHARS]
        if image is not None:
            encoded = base64.b64encode(image.data).decode("ascii")
            user_content: Any = [
                {"type": "text", "text": text},
                {
                    "type": "image_url",
                    "image_url": {"url": f"data:{image.mime_type};base64,{encoded}", "detail": "low"},
                },
            ]
        else:
            user_content = text

        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            *[turn.model_dump() for turn in history],
            {"role": "user", "content": user_content},
        ]

    async def reply(self, message: str, history: ChatHistory, image: Optional[ChatImage] = None) -> str:
        completion = await self.client.chat.completions.create(
            model=self.vision_model if image is not None else self.model,
            messages=self.build_messages(message, history, image),
            max_tokens=500,
            temperature=0.7,
        )
        if not completion.choices:
            return NO_RESPONSE
        return completion.choices[0].message.content or NO_RESPONSE


def build_chat_service(settings: Settings) -> Optional[AsylumChatService]:
    if not settings.OPENAI_API_KEY:
        return None
    return AsylumChatService(
        client=AsyncOpenAI(api_key=settings.OPENAI_API_KEY),
        model=settings.CHAT_MODEL,
        vision_model=settings.CHAT_VISION_MODEL,
    )
