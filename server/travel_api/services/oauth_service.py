"""Google OAuth 2.0 authorization-code flow."""

import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlencode

import httpx

from ..core.config import settings
from ..core.exceptions import AuthenticationError, InternalServerError

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"


@dataclass(frozen=True)
class GoogleProfile:
    subject: str
    email: str
    first_name: Optional[str]
    last_name: Optional[str]
    picture: Optional[str]
    email_verified: bool


class GoogleOAuthClient:
    """Builds the consent URL and exchanges authorization codes for profiles."""

    def __init__(self, client_id: str, client_secret: str, redirect_url: str, timeout: float = 10.0):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_url = redirect_url
        self.timeout = timeout

    def authorization_url(self, state: str) -> str:
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_url,
            "response_type": "code",
            "scope": "openid email profile",
            "state": state,
            "prompt": "select_account",
        }
        return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"

    async def fetch_profile(self, code: str) -> GoogleProfile:
        """
        Exchange ``code`` for tokens and load the user's profile.

        Raises:
            AuthenticationError: If Google rejects the code or returns no email
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                token_response = await client.post(
                    GOOGLE_TOKEN_URL,
                    data={
                        "code": code,
                        "client_id": self.client_id,
                        "client_secret": self.client_secret,
                        "redirect_uri": self.redirect_url,
                        "grant_type": "authorization_code",
                    },
                )
                token_response.raise_for_status()
                access_token = token_response.json()["access_token"]

                userinfo_response = await client.get(
                    GOOGLE_USERINFO_URL,
                    headers={"Authorization": f"Bearer {access_token}"},
                )
                userinfo_response.raise_for_status()
                info = userinfo_response.json()
        except (httpx.HTTPError, KeyError, ValueError) as e:
            logger.warning("Google OAuth exchange failed", extra={"error": str(e)})
            raise AuthenticationError(detail="Google sign-in failed")

        if not info.get("sub") or not info.get("email"):
            raise AuthenticationError(detail="Google account has no email address")

        return GoogleProfile(
            subject=info["sub"],
            email=info["email"],
            first_name=info.get("given_name"),
            last_name=info.get("family_name"),
            picture=info.get("picture"),
            email_verified=bool(info.get("email_verified")),
        )


def get_google_client() -> GoogleOAuthClient:
    """FastAPI dependency returning the Google client, or a 500 if unconfigured."""
    if not settings.oauth_enabled:
        raise InternalServerError(detail="Google sign-in is not configured")
    return GoogleOAuthClient(
        client_id=settings.google_client_id,
        client_secret=settings.google_client_secret,
        redirect_url=settings.oauth_redirect_url,
    )
