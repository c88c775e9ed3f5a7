"""Jetons de connexion éphémères et vérification du code admin de secours.

Les jetons vivent uniquement en mémoire : un redémarrage impose de se reconnecter.
"""

import asyncio
import contextlib
import hmac
import secrets
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol

import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class AuthToken:
    token: str
    discord_id: str
    expires_at: float


class TokenStore(Protocol):
    def issue(self, discord_id: str) -> str: ...

    def validate(self, token: str) -> Optional[str]: ...

    def consume(self, token: str) -> Optional[str]: ...

    def revoke(self, token: str) -> None: ...

    def sweep(self) -> int: ...


class InMemoryTokenStore:
    """Table de jetons protégée par un verrou, expiration paresseuse et périodique."""

    def __init__(self, ttl_seconds: int, clock: Callable[[], float] = time.time) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._tokens: Dict[str, AuthToken] = {}
        self._lock = threading.Lock()
        self._sweep_task: Optional[asyncio.Task] = None

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)

    def issue(self, discord_id: str) -> str:
        token = secrets.token_urlsafe(32)
        entry = AuthToken(token=token, discord_id=discord_id, expires_at=self._clock() + self.ttl_seconds)
        with self._lock:
            self._tokens[token] = entry
        return token

    def _get_live(self, token: str) -> Optional[AuthToken]:
        # l'appelant tient le verrou
        entry = self._tokens.get(token)
        if entry is None:
            return None
        if self._clock() > entry.expires_at:
            del self._tokens[token]
            return None
        return entry

    def validate(self, token: str) -> Optional[str]:
        """Renvoie le discord_id associé, ou None si inconnu ou expiré."""
        with self._lock:
            entry = self._get_live(token)
        return entry.discord_id if entry else None

    def consume(self, token: str) -> Optional[str]:
        """Valide et supprime en une étape (jetons à usage unique)."""
        with self._lock:
            entry = self._get_live(token)
            if entry is not None:
                del self._tokens[token]
        return entry.discord_id if entry else None

    def revoke(self, token: str) -> None:
        with self._lock:
            self._tokens.pop(token, None)

    def sweep(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [t for t, entry in self._tokens.items() if now > entry.expires_at]
            for t in expired:
                del self._tokens[t]
        if expired:
            logger.info("swept expired auth tokens", count=len(expired))
        return len(expired)

    def start_sweeping(self, interval_seconds: float) -> None:
        if self._sweep_task is not None and not self._sweep_task.done():
            return
        self._sweep_task = asyncio.create_task(self._sweep_loop(interval_seconds))

    async def stop_sweeping(self) -> None:
        if self._sweep_task is not None:
            self._sweep_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._sweep_task
            self._sweep_task = None

    async def _sweep_loop(self, interval_seconds: float) -> None:
        while True:
            await asyncio.sleep(interval_seconds)
            self.sweep()


def check_admin_code(candidate: Optional[str], expected: Optional[str]) -> bool:
    """Comparaison en temps constant. Un code non configuré ne correspond jamais."""
    if not candidate or not expected:
        return False
    return hmac.compare_digest(candidate.strip().encode(), expected.encode())
