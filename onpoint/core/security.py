"""Password hashing and the two bearer tokens the mobile app holds.

The app sends the short-lived access token on every call and trades the
refresh token for a new pair at POST /auth/refresh. Both are HS256 JWTs
whose `type` claim keeps one from being used as the other.
"""
from datetime import datetime, timedelta, timezone

from jose import jwt
from passlib.context import CryptContext

from onpoint.core.config import settings

# PBKDF2 avoids bcrypt backend/version issues and the 72-byte bcrypt input limit.
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
ALGO = "HS256"
ACCESS = "access"
REFRESH = "refresh"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def _issue(user_id: str, token_type: str, lifetime: timedelta) -> str:
    payload = {"sub": user_id, "type": token_type, "exp": datetime.now(timezone.utc) + lifetime}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGO)


def create_access_token(user_id: str, expires_minutes: int | None = None) -> str:
    minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES if expires_minutes is None else expires_minutes
    return _issue(user_id, ACCESS, timedelta(minutes=minutes))


def create_refresh_token(user_id: str, expires_days: int | None = None) -> str:
    days = settings.REFRESH_TOKEN_EXPIRE_DAYS if expires_days is None else expires_days
    return _issue(user_id, REFRESH, timedelta(days=days))


def decode_token(token: str, expected_type: str = ACCESS) -> dict:
    """Verified claims of a traveler token; raises ValueError on the wrong `type`."""
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGO])
    if payload.get("type") != expected_type:
        raise ValueError(f"expected {expected_type} token")
    return payload
