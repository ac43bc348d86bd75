"""Password hashing, gateway signature checks and OAuth state tokens."""

import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from jwt import PyJWTError
from passlib.context import CryptContext

from .config import settings

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

OAUTH_STATE_AUDIENCE = "oauth-state"
OAUTH_STATE_TTL = timedelta(minutes=10)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password_hash:
        return False
    return pwd_context.verify(password, password_hash)


def compute_payment_signature(secret: str, order_id: str, payment_id: str) -> str:
    """
    Compute the gateway callback signature.

    The gateway signs ``"<order_id>|<payment_id>"`` with HMAC-SHA256 keyed by
    the merchant secret and sends the lowercase hex digest.
    """
    message = f"{order_id}|{payment_id}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


def verify_payment_signature(secret: str, order_id: str, payment_id: str, signature: str) -> bool:
    """Return True if ``signature`` matches the expected gateway signature."""
    expected = compute_payment_signature(secret, order_id, payment_id)
    return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))


def generate_token() -> str:
    """Return a random 32-byte token encoded as hex."""
    return secrets.token_hex(32)


def create_oauth_state(next_path: str = "/") -> str:
    """Create a signed, short-lived OAuth ``state`` value."""
    now = datetime.now(timezone.utc)
    payload = {
        "aud": OAUTH_STATE_AUDIENCE,
        "nonce": secrets.token_urlsafe(16),
        "next": next_path,
        "iat": now,
        "exp": now + OAUTH_STATE_TTL,
    }
    return jwt.encode(payload, settings.session_secret, algorithm="HS256")


def decode_oauth_state(state: str) -> Optional[dict]:
    """Return the state payload, or None if it is forged or expired."""
    try:
        return jwt.decode(
            state,
            settings.session_secret,
            algorithms=["HS256"],
            audience=OAUTH_STATE_AUDIENCE,
        )
    except PyJWTError:
        return None
