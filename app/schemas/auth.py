from typing import Any, Mapping, Optional
from pydantic import BaseModel, EmailStr, TypeAdapter, ValidationError, field_validator
import structlog

from app.models.user import UserRead

logger = structlog.get_logger(__name__)

DISCORD_CDN_URL = "https://cdn.discordapp.com"

_email_adapter = TypeAdapter(EmailStr)


class DiscordIdentity(BaseModel):
    """Ce que le reste de l'application sait d'une connexion Discord."""

    discord_id: str
    username: str
    email: Optional[EmailStr] = None
    avatar: Optional[str] = None  # hash de l'avatar, pas une URL

    @field_validator("email", mode="before")
    @classmethod
    def drop_invalid_email(cls, v: Any) -> Optional[str]:
        # Discord accepte des adresses que EmailStr refuse (ex: *.local)
        if not v:
            return None
        try:
            return _email_adapter.validate_python(v)
        except ValidationError:
            logger.info("discord email discarded", reason="invalid address")
            return None

    @property
    def avatar_url(self) -> Optional[str]:
        if not self.avatar:
            return None
        return f"{DISCORD_CDN_URL}/avatars/{self.discord_id}/{self.avatar}.png"

    @classmethod
    def from_profile(cls, profile: Mapping[str, Any]) -> "DiscordIdentity":
        # Réponse de users/@me
        return cls(
            discord_id=str(profile["id"]),
            username=profile.get("username") or str(profile["id"]),
            email=profile.get("email"),
            avatar=profile.get("avatar"),
        )


class ExchangeTokenRequest(BaseModel):
    token: str


class ExchangeTokenResponse(BaseModel):
    user: UserRead


class AdminCodeRequest(BaseModel):
    code: Optional[str] = None
