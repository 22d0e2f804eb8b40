class MediaVaultError(Exception):
    """Base for errors surfaced to API callers as ``{"error": message}``."""

    status_code = 500
    default_message = "Internal error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(MediaVaultError):
    status_code = 400
    default_message = "Email and password required"


class DuplicateEmail(MediaVaultError):
    status_code = 400
    default_message = "Email already registered"


class InvalidCredentials(MediaVaultError):
    status_code = 400
    default_message = "Invalid credentials"


class Unauthorized(MediaVaultError):
    status_code = 401
    default_message = "Missing Authorization header"


class InvalidToken(MediaVaultError):
    status_code = 401
    default_message = "Invalid token"


class NotFound(MediaVaultError):
    status_code = 404
    default_message = "Not found"


class UnsupportedType(MediaVaultError):
    status_code = 400
    default_message = "Unsupported file type"


class PayloadTooLarge(MediaVaultError):
    status_code = 413
    default_message = "File exceeds max size"


class StoreCorrupted(MediaVaultError):
    status_code = 500
    default_message = "Storage document is corrupted"
