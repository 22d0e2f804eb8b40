import logging

from mediavault.core.errors import DuplicateEmail, InvalidCredentials, ValidationError
from mediavault.core.security import burn_password_check, create_access_token, hash_password, verify_password
from mediavault.models.user import User
from mediavault.schemas.auth import AuthResponse, UserPublic
from mediavault.store.users import CredentialStore

logger = logging.getLogger(__name__)


def _issue_session(user: User) -> AuthResponse:
    return AuthResponse(
        token=create_access_token(user.id, user.email),
        user=UserPublic(id=user.id, email=user.email),
    )


def register(users: CredentialStore, email: str | None, password: str | None) -> AuthResponse:
    if not email or not password:
        raise ValidationError()
    if users.find_by_email(email) is not None:
        raise DuplicateEmail()
    user = users.create(email, hash_password(password))
    logger.info("user_registered", extra={"user_id": user.id})
    return _issue_session(user)


def login(users: CredentialStore, email: str | None, password: str | None) -> AuthResponse:
    user = users.find_by_email(email) if email else None
    if user is None:
        burn_password_check(password or "")
        logger.info("login_failed", extra={"reason": "unknown_email"})
        raise InvalidCredentials()
    if not password or not verify_password(password, user.password_hash):
        logger.info("login_failed", extra={"reason": "bad_password", "user_id": user.id})
        raise InvalidCredentials()
    return _issue_session(user)
