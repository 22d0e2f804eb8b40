from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from mediavault.core.config import get_settings
from mediavault.core.errors import InvalidToken

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

_dummy_hash: str | None = None


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    return pwd_context.verify(password, hashed_password)


def burn_password_check(password: str) -> None:
    """Spend one bcrypt verification so unknown emails cost the same as wrong passwords."""
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = pwd_context.hash("not-a-real-password")
    pwd_context.verify(password, _dummy_hash)


def create_access_token(user_id: str, email: str, issued_at: datetime | None = None) -> str:
    settings = get_settings()
    issued = issued_at or datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "email": email,
        "iat": issued,
        "exp": issued + timedelta(days=settings.access_token_expire_days),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any]:
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise InvalidToken() from exc
    if not payload.get("sub") or not payload.get("email"):
        raise InvalidToken()
    return payload
