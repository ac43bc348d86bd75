"""FastAPI dependencies for database sessions and authentication."""

from typing import Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.user import User
from ..services.user_service import UserService
from .database import get_db
from .exceptions import AuthenticationError, AuthorizationError
from .tokens import TokenStore, get_token_store

SESSION_USER_KEY = "user_id"


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """
    Pull the token out of an ``Authorization: Bearer <token>`` header.

    Returns:
        The token, or None when the header is absent or uses another scheme
    """
    if not authorization:
        return None
    try:
        scheme, token = authorization.split()
    except ValueError:
        return None
    if scheme.lower() != "bearer":
        return None
    return token


async def _resolve_user_id(
    request: Request,
    authorization: Optional[str],
    token_store: TokenStore,
) -> Optional[str]:
    token = extract_bearer_token(authorization)
    if token:
        user_id = await token_store.validate(token)
        if user_id:
            return user_id
    return request.session.get(SESSION_USER_KEY)


async def get_optional_user(
    request: Request,
    authorization: Optional[str] = Header(None, alias="Authorization"),
    db: AsyncSession = Depends(get_db),
    token_store: TokenStore = Depends(get_token_store),
) -> Optional[User]:
    """
    Resolve the caller from a bearer token, falling back to the session cookie.

    The user row is re-read on every request so role changes and deletions
    take effect immediately.
    """
    user_id = await _resolve_user_id(request, authorization, token_store)
    if not user_id:
        return None
    return await UserService(db).get_user_by_id(user_id)


async def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    """
    Authentication dependency for routes that need a signed-in user.

    Raises:
        AuthenticationError: If neither a bearer token nor a session resolves to a user
    """
    if user is None:
        raise AuthenticationError(detail="Not authenticated")
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """
    Raises:
        AuthorizationError: If the signed-in user is not an admin
    """
    if not user.is_admin:
        raise AuthorizationError(detail="Admin access required", required_role="admin")
    return user


RequiredAuth = Depends(get_current_user)
AdminAuth = Depends(require_admin)
DatabaseSession = Depends(get_db)
