from typing import Optional

import structlog
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.models.user import User, utcnow
from app.schemas.auth import DiscordIdentity

logger = structlog.get_logger(__name__)


class UserService:

    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: str) -> Optional[User]:
        return self.db.get(User, user_id)

    def get_by_discord_id(self, discord_id: str) -> Optional[User]:
        statement = select(User).where(User.discord_id == discord_id)
        return self.db.exec(statement).first()

    def _apply_identity(self, user: User, identity: DiscordIdentity) -> None:
        user.username = identity.username
        user.email = identity.email
        user.avatar_url = identity.avatar_url
        user.updated_at = utcnow()

    def upsert_from_identity(self, identity: DiscordIdentity) -> User:
        """
        Crée l'utilisateur à la première connexion, rafraîchit le profil
        aux suivantes. Exactement une ligne par discord_id.
        """
        user = self.get_by_discord_id(identity.discord_id)
        created = user is None

        if created:
            user = User(discord_id=identity.discord_id, username=identity.username)
        self._apply_identity(user, identity)
        self.db.add(user)

        try:
            self.db.commit()
        except IntegrityError:
            # Une connexion concurrente a inséré le même discord_id avant nous
            self.db.rollback()
            user = self.get_by_discord_id(identity.discord_id)
            if user is None:
                raise
            created = False
            self._apply_identity(user, identity)
            self.db.add(user)
            self.db.commit()

        self.db.refresh(user)
        logger.info("user upserted", user_id=user.id, discord_id=user.discord_id, created=created)
        return user

    def grant_admin(self, user: User) -> User:
        if user.is_admin:
            return user
        user.is_admin = True
        user.updated_at = utcnow()
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        logger.warning("admin flag granted", user_id=user.id, discord_id=user.discord_id)
        return user
