from mediavault.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserPublic
from mediavault.schemas.files import DeleteResponse, UploadResponse

__all__ = [
    "RegisterRequest",
    "LoginRequest",
    "UserPublic",
    "AuthResponse",
    "UploadResponse",
    "DeleteResponse",
]
