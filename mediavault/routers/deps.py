from fastapi import Header, Request

from mediavault.core.config import Settings
from mediavault.core.errors import Unauthorized
from mediavault.core.security import decode_access_token
from mediavault.schemas.auth import UserPublic
from mediavault.store.files import FileIndex
from mediavault.store.users import CredentialStore


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_credential_store(request: Request) -> CredentialStore:
    return request.app.state.users


def get_file_index(request: Request) -> FileIndex:
    return request.app.state.files


def get_current_user(authorization: str | None = Header(default=None)) -> UserPublic:
    if not authorization:
        raise Unauthorized("Missing Authorization header")
    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        raise Unauthorized("Invalid Authorization header")
    payload = decode_access_token(parts[1])
    return UserPublic(id=payload["sub"], email=payload["email"])
