from pathlib import Path

from mediavault.core.errors import DuplicateEmail, StoreCorrupted
from mediavault.models.user import User
from mediavault.store.json_store import JsonDocument


class CredentialStore:
    """Registered users, persisted as a JSON list."""

    def __init__(self, path: str | Path) -> None:
        self.document = JsonDocument(path, default=[])

    def ensure(self) -> None:
        self.document.ensure()

    def find_by_email(self, email: str) -> User | None:
        for row in self._rows(self.document.read()):
            if row.get("email") == email:
                return User.model_validate(row)
        return None

    def find_by_id(self, user_id: str) -> User | None:
        for row in self._rows(self.document.read()):
            if row.get("id") == user_id:
                return User.model_validate(row)
        return None

    def create(self, email: str, password_hash: str) -> User:
        with self.document.transaction() as data:
            rows = self._rows(data)
            if any(row.get("email") == email for row in rows):
                raise DuplicateEmail()
            user = User(email=email, password_hash=password_hash)
            rows.append(user.to_document())
        return user

    @staticmethod
    def _rows(data) -> list[dict]:
        if not isinstance(data, list):
            raise StoreCorrupted("users.json must hold a list")
        return data
