from collections.abc import Iterable
from pathlib import Path

from mediavault.core.errors import StoreCorrupted
from mediavault.models.file import FileRecord
from mediavault.store.json_store import JsonDocument


class FileIndex:
    """Upload metadata, persisted as ``{"files": [...]}`` in insertion order."""

    def __init__(self, path: str | Path) -> None:
        self.document = JsonDocument(path, default={"files": []})

    def ensure(self) -> None:
        self.document.ensure()

    def all(self) -> list[FileRecord]:
        return [FileRecord.model_validate(row) for row in self._rows(self.document.read())]

    def list_by_owner(self, owner_id: str) -> list[FileRecord]:
        return [
            FileRecord.model_validate(row)
            for row in self._rows(self.document.read())
            if row.get("ownerId") == owner_id
        ]

    def get(self, file_id: str, owner_id: str) -> FileRecord | None:
        # Records owned by someone else look exactly like missing ones.
        for row in self._rows(self.document.read()):
            if row.get("id") == file_id and row.get("ownerId") == owner_id:
                return FileRecord.model_validate(row)
        return None

    def append(self, record: FileRecord) -> None:
        with self.document.transaction() as data:
            self._rows(data).append(record.to_document())

    def remove(self, file_id: str, owner_id: str) -> bool:
        with self.document.transaction() as data:
            rows = self._rows(data)
            for idx, row in enumerate(rows):
                if row.get("id") == file_id and row.get("ownerId") == owner_id:
                    del rows[idx]
                    return True
        return False

    def discard(self, file_ids: Iterable[str]) -> int:
        targets = set(file_ids)
        with self.document.transaction() as data:
            rows = self._rows(data)
            kept = [row for row in rows if row.get("id") not in targets]
            removed = len(rows) - len(kept)
            rows[:] = kept
        return removed

    @staticmethod
    def _rows(data) -> list[dict]:
        if not isinstance(data, dict) or not isinstance(data.setdefault("files", []), list):
            raise StoreCorrupted("storage.json must hold an object with a files list")
        return data["files"]
