"""Authentication router: password login, Google sign-in and bearer tokens."""

import logging
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..core.database import get_db
from ..core.dependencies import (
    SESSION_USER_KEY,
    extract_bearer_token,
    get_current_user,
    get_optional_user,
    require_admin,
)
from ..core.exceptions import AuthenticationError, ProblemDetailsException
from ..core.security import create_oauth_state, decode_oauth_state
from ..core.tokens import TokenStore, get_token_store
from ..models.user import User as UserModel
from ..schemas.common import MessageResponse
from ..schemas.user import (
    AuthResponse,
    LoginRequest,
    SignupRequest,
    TokenResponse,
    User,
    VerifyTokenResponse,
)
from ..services.oauth_service import GoogleOAuthClient, get_google_client
from ..services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

DB_DEPENDENCY = Depends(get_db)
TOKEN_STORE_DEPENDENCY = Depends(get_token_store)
AUTHORIZATION_HEADER = Header(None, alias="Authorization")


def _user_body(user: UserModel) -> dict:
    return User.model_validate(user).model_dump(mode="json", by_alias=True)


async def _start_session(request: Request, user: UserModel, token_store: TokenStore) -> str:
    """Bind the user to the session cookie and issue a bearer token."""
    request.session[SESSION_USER_KEY] = user.id
    return await token_store.issue(user.id)


@router.post("/signup", response_model=AuthResponse, status_code=201)
async def signup(
    payload: SignupRequest,
    request: Request,
    db: AsyncSession = DB_DEPENDENCY,
    token_store: TokenStore = TOKEN_STORE_DEPENDENCY
) -> JSONResponse:
    """Register a password account and sign it in."""
    try:
        user = await UserService(db).create_user(payload)
        token = await _start_session(request, user, token_store)

        response_data = AuthResponse(user=User.model_validate(user), token=token)
        return JSONResponse(
            status_code=201,
            content=response_data.model_dump(mode="json", by_alias=True)
        )

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in signup",
            extra={"email": payload.email, "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: LoginRequest,
    request: Request,
    db: AsyncSession = DB_DEPENDENCY,
    token_store: TokenStore = TOKEN_STORE_DEPENDENCY
) -> JSONResponse:
    try:
        user = await UserService(db).authenticate(payload.email, payload.password)
        token = await _start_session(request, user, token_store)

        logger.info("User logged in", extra={"user_id": user.id})

        response_data = AuthResponse(user=User.model_validate(user), token=token)
        return JSONResponse(
            status_code=200,
            content=response_data.model_dump(mode="json", by_alias=True)
        )

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in login",
            extra={"email": payload.email, "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.post("/logout", response_model=MessageResponse)
async def logout(
    request: Request,
    authorization: Optional[str] = AUTHORIZATION_HEADER,
    user: Optional[UserModel] = Depends(get_optional_user),
    token_store: TokenStore = TOKEN_STORE_DEPENDENCY
) -> JSONResponse:
    """
    Sign out everywhere.

    Revokes the presented bearer token and every other token of the user,
    then clears the session cookie.
    """
    token = extract_bearer_token(authorization)
    if token:
        await token_store.revoke(token)

    revoked = 0
    if user is not None:
        revoked = await token_store.revoke_user(user.id)
        logger.info("User logged out", extra={"user_id": user.id, "revoked_tokens": revoked})

    request.session.clear()
    return JSONResponse(status_code=200, content={"message": "Logged out successfully"})


@router.get("/user", response_model=User)
async def current_user(user: UserModel = Depends(get_current_user)) -> JSONResponse:
    return JSONResponse(status_code=200, content=_user_body(user))


@router.get("/admin", response_model=User)
async def current_admin(user: UserModel = Depends(require_admin)) -> JSONResponse:
    """Return the signed-in user if they are an admin, else 403."""
    return JSONResponse(status_code=200, content=_user_body(user))


@router.get("/token", response_model=TokenResponse)
async def issue_token(
    user: UserModel = Depends(get_current_user),
    token_store: TokenStore = TOKEN_STORE_DEPENDENCY
) -> JSONResponse:
    """Issue a bearer token for the already signed-in user."""
    token = await token_store.issue(user.id)
    response_data = TokenResponse(token=token, expires_in=settings.token_ttl_hours * 3600)
    return JSONResponse(status_code=200, content=response_data.model_dump(by_alias=True))


@router.get("/verify-token", response_model=VerifyTokenResponse)
async def verify_token(
    authorization: Optional[str] = AUTHORIZATION_HEADER,
    db: AsyncSession = DB_DEPENDENCY,
    token_store: TokenStore = TOKEN_STORE_DEPENDENCY
) -> JSONResponse:
    """Report whether the presented bearer token is live; session cookies are ignored."""
    token = extract_bearer_token(authorization)
    user = None
    if token:
        user_id = await token_store.validate(token)
        if user_id:
            user = await UserService(db).get_user_by_id(user_id)

    if user is None:
        raise AuthenticationError(detail="Invalid or expired token")

    response_data = VerifyTokenResponse(valid=True, user=User.model_validate(user))
    return JSONResponse(status_code=200, content=response_data.model_dump(mode="json", by_alias=True))


@router.get("/google")
async def google_login(
    next_path: str = Query("/", alias="next"),
    client: GoogleOAuthClient = Depends(get_google_client)
) -> RedirectResponse:
    """Redirect the browser to Google's consent screen."""
    if not next_path.startswith("/") or next_path.startswith("//"):
        next_path = "/"
    state = create_oauth_state(next_path)
    return RedirectResponse(client.authorization_url(state), status_code=302)


@router.get("/google/callback")
async def google_callback(
    request: Request,
    code: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
    error: Optional[str] = Query(None),
    db: AsyncSession = DB_DEPENDENCY,
    token_store: TokenStore = TOKEN_STORE_DEPENDENCY,
    client: GoogleOAuthClient = Depends(get_google_client)
) -> RedirectResponse:
    """
    Finish Google sign-in.

    Verifies the signed ``state``, exchanges the code for the user's profile,
    signs the user in and sends the browser back to the frontend with a
    bearer token in the query string.
    """
    if error:
        logger.warning("Google sign-in declined", extra={"error": error})
        raise AuthenticationError(detail="Google sign-in was cancelled")

    state_payload = decode_oauth_state(state) if state else None
    if not code or state_payload is None:
        raise AuthenticationError(detail="Invalid OAuth state")

    try:
        profile = await client.fetch_profile(code)
        user = await UserService(db).upsert_oauth_user(
            subject=profile.subject,
            email=profile.email,
            first_name=profile.first_name,
            last_name=profile.last_name,
            picture=profile.picture,
            email_verified=profile.email_verified,
        )
        token = await _start_session(request, user, token_store)

        logger.info("User signed in with Google", extra={"user_id": user.id})

        target = settings.frontend_url.rstrip("/") + state_payload.get("next", "/")
        return RedirectResponse(f"{target}?{urlencode({'token': token})}", status_code=302)

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in Google sign-in",
            extra={"error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e
