import pytest
from pydantic import ValidationError

from app.core.config import Settings
from app.schemas.auth import DiscordIdentity
from app.services.discord import DiscordProvider, build_discord_provider


class TestDiscordIdentity:
    def test_from_profile(self):
        identity = DiscordIdentity.from_profile(
            {"id": 80351110224678912, "username": "nelly", "email": "nelly@discord.com", "avatar": "8342729096ea3675442027381ff50dfe"}
        )
        assert identity.discord_id == "80351110224678912"
        assert identity.username == "nelly"
        assert identity.avatar_url == (
            "https://cdn.discordapp.com/avatars/80351110224678912/8342729096ea3675442027381ff50dfe.png"
        )

    def test_profile_without_avatar_or_email(self):
        identity = DiscordIdentity.from_profile({"id": "42", "username": "ghost", "avatar": None})
        assert identity.email is None
        assert identity.avatar_url is None

    def test_reserved_email_is_dropped(self):
        identity = DiscordIdentity.from_profile({"id": "42", "username": "ghost", "email": "player@host.local"})
        assert identity.email is None

    def test_profile_without_id_is_rejected(self):
        with pytest.raises(KeyError):
            DiscordIdentity.from_profile({"username": "ghost"})

    def test_discord_id_is_required(self):
        with pytest.raises(ValidationError):
            DiscordIdentity(username="ghost")


class TestBuildDiscordProvider:
    def test_unconfigured(self):
        assert build_discord_provider(Settings(DATABASE_URL="sqlite://")) is None

    def test_partially_configured(self):
        settings = Settings(DATABASE_URL="sqlite://", DISCORD_CLIENT_ID="id")
        assert build_discord_provider(settings) is None

    def test_configured(self):
        settings = Settings(DATABASE_URL="sqlite://", DISCORD_CLIENT_ID="id", DISCORD_CLIENT_SECRET="secret")
        provider = build_discord_provider(settings)
        assert isinstance(provider, DiscordProvider)
        assert provider.client.client_id == "id"
