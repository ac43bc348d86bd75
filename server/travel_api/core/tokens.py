"""Bearer token stores."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Protocol

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..models.user import AuthToken
from .config import settings
from .security import generate_token

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenStore(Protocol):
    """Issues, validates and revokes opaque bearer tokens."""

    async def issue(self, user_id: str) -> str: ...

    async def validate(self, token: str) -> Optional[str]: ...

    async def revoke(self, token: str) -> Optional[str]: ...

    async def revoke_user(self, user_id: str) -> int: ...

    async def sweep(self) -> int: ...

    async def count(self) -> int: ...


@dataclass
class TokenRecord:
    user_id: str
    expires_at: datetime


class InMemoryTokenStore:
    """
    Process-local token store.

    Only suitable for a single API instance; tokens are lost on restart.
    Expired tokens are rejected on read and removed by ``sweep``.
    """

    def __init__(self, ttl: timedelta, clock: Callable[[], datetime] = _utcnow):
        self.ttl = ttl
        self._clock = clock
        self._tokens: dict[str, TokenRecord] = {}

    async def issue(self, user_id: str) -> str:
        token = generate_token()
        self._tokens[token] = TokenRecord(user_id=user_id, expires_at=self._clock() + self.ttl)
        return token

    async def validate(self, token: str) -> Optional[str]:
        record = self._tokens.get(token)
        if record is None:
            return None
        if record.expires_at <= self._clock():
            self._tokens.pop(token, None)
            return None
        return record.user_id

    async def revoke(self, token: str) -> Optional[str]:
        record = self._tokens.pop(token, None)
        return record.user_id if record else None

    async def revoke_user(self, user_id: str) -> int:
        doomed = [token for token, record in self._tokens.items() if record.user_id == user_id]
        for token in doomed:
            del self._tokens[token]
        return len(doomed)

    async def sweep(self) -> int:
        now = self._clock()
        expired = [token for token, record in self._tokens.items() if record.expires_at <= now]
        for token in expired:
            del self._tokens[token]
        return len(expired)

    async def count(self) -> int:
        return len(self._tokens)


class DatabaseTokenStore:
    """Token store backed by the ``auth_tokens`` table, shared by every instance."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        ttl: timedelta,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.session_factory = session_factory
        self.ttl = ttl
        self._clock = clock

    async def issue(self, user_id: str) -> str:
        token = generate_token()
        async with self.session_factory() as db:
            db.add(AuthToken(token=token, user_id=user_id, expires_at=self._clock() + self.ttl))
            await db.commit()
        return token

    async def validate(self, token: str) -> Optional[str]:
        stmt = select(AuthToken.user_id).where(
            AuthToken.token == token,
            AuthToken.expires_at > self._clock(),
        )
        async with self.session_factory() as db:
            result = await db.execute(stmt)
            return result.scalar_one_or_none()

    async def revoke(self, token: str) -> Optional[str]:
        async with self.session_factory() as db:
            row = await db.get(AuthToken, token)
            if row is None:
                return None
            user_id = row.user_id
            await db.delete(row)
            await db.commit()
            return user_id

    async def revoke_user(self, user_id: str) -> int:
        async with self.session_factory() as db:
            result = await db.execute(delete(AuthToken).where(AuthToken.user_id == user_id))
            await db.commit()
            return result.rowcount or 0

    async def sweep(self) -> int:
        async with self.session_factory() as db:
            result = await db.execute(delete(AuthToken).where(AuthToken.expires_at <= self._clock()))
            await db.commit()
            return result.rowcount or 0

    async def count(self) -> int:
        async with self.session_factory() as db:
            result = await db.execute(
                select(func.count()).select_from(AuthToken).where(AuthToken.expires_at > self._clock())
            )
            return result.scalar_one()


def build_token_store() -> TokenStore:
    """Create the token store selected by configuration."""
    ttl = timedelta(hours=settings.token_ttl_hours)
    if settings.token_store_backend == "database":
        from .database import async_session_factory

        logger.info("Using database-backed token store")
        return DatabaseTokenStore(async_session_factory, ttl)

    logger.info("Using in-memory token store")
    return InMemoryTokenStore(ttl)


# Global token store instance
token_store: TokenStore = build_token_store()


def get_token_store() -> TokenStore:
    """FastAPI dependency returning the configured token store."""
    return token_store
