"""
Bearer tokens for signed-up users.

A token names the user and the role they held when it was issued. The role
claim is compared with the stored user on every request, so a token stops
working once the user's role no longer matches it.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, NamedTuple, Optional
import uuid

from jose import JWTError, jwt

from qc_inspection.config import settings
from qc_inspection.schemas.user import User


TOKEN_TYPE = "inspection-access"


class TokenClaims(NamedTuple):
    user_id: str
    role: Optional[str]


def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    """Issue a bearer token for a user, carrying their role."""
    issued_at = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    claims = {
        "sub": user.id,
        "role": user.role,
        "iat": issued_at,
        "exp": issued_at + lifetime,
        "jti": uuid.uuid4().hex,
        "type": TOKEN_TYPE,
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> Optional[dict[str, Any]]:
    """Decode and validate a JWT. Returns None if invalid or expired."""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None


def read_access_token(token: str) -> Optional[TokenClaims]:
    """Claims of a valid access token, or None."""
    payload = decode_token(token)
    if payload is None or payload.get("type") != TOKEN_TYPE:
        return None

    user_id = payload.get("sub")
    if not user_id:
        return None
    return TokenClaims(user_id=user_id, role=payload.get("role"))
