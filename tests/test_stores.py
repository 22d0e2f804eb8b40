import json
import threading

import pytest

from mediavault.core.errors import DuplicateEmail, StoreCorrupted
from mediavault.models.file import FileRecord
from mediavault.store.files import FileIndex
from mediavault.store.json_store import JsonDocument
from mediavault.store.users import CredentialStore


def _record(file_id: str, owner_id: str) -> FileRecord:
    return FileRecord(
        id=file_id,
        original_name=f"{file_id}.png",
        filename=f"{file_id}.png",
        mime_type="image/png",
        size=10,
        url=f"http://localhost/uploads/{file_id}.png",
        owner_id=owner_id,
    )


def test_document_ensure_writes_default(tmp_path):
    doc = JsonDocument(tmp_path / "nested" / "storage.json", default={"files": []})
    doc.ensure()
    assert json.loads(doc.path.read_text()) == {"files": []}
    assert not doc.path.with_name("storage.json.tmp").exists()


def test_transaction_skips_write_on_error(tmp_path):
    doc = JsonDocument(tmp_path / "users.json", default=[])
    doc.write([{"email": "a"}])
    with pytest.raises(RuntimeError):
        with doc.transaction() as rows:
            rows.append({"email": "b"})
            raise RuntimeError("boom")
    assert doc.read() == [{"email": "a"}]


def test_corrupted_document_raises(tmp_path):
    path = tmp_path / "users.json"
    path.write_text("{not json")
    with pytest.raises(StoreCorrupted):
        JsonDocument(path, default=[]).read()


def test_credential_store_create_and_find(tmp_path):
    users = CredentialStore(tmp_path / "users.json")
    created = users.create("a@example.com", "hash")
    assert users.find_by_email("a@example.com") == created
    assert users.find_by_id(created.id) == created
    assert users.find_by_email("A@example.com") is None
    with pytest.raises(DuplicateEmail):
        users.create("a@example.com", "other-hash")
    assert len(users.document.read()) == 1


def test_file_index_is_owner_scoped(tmp_path):
    index = FileIndex(tmp_path / "storage.json")
    index.append(_record("f1", "alice"))
    index.append(_record("f2", "bob"))
    index.append(_record("f3", "alice"))

    assert [r.id for r in index.list_by_owner("alice")] == ["f1", "f3"]
    assert index.list_by_owner("carol") == []
    assert index.get("f2", "alice") is None
    assert index.get("f2", "bob").original_name == "f2.png"

    assert index.remove("f2", "alice") is False
    assert index.remove("f2", "bob") is True
    assert [r.id for r in index.all()] == ["f1", "f3"]


def test_file_index_discard(tmp_path):
    index = FileIndex(tmp_path / "storage.json")
    for file_id in ("a", "b", "c"):
        index.append(_record(file_id, "owner"))
    assert index.discard(["a", "c", "missing"]) == 2
    assert [r.id for r in index.all()] == ["b"]


def test_file_index_rejects_wrong_shape(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text("[]")
    with pytest.raises(StoreCorrupted):
        FileIndex(path).all()


def test_concurrent_appends_are_not_lost(tmp_path):
    index = FileIndex(tmp_path / "storage.json")
    index.ensure()
    start = threading.Barrier(16)

    def append(n):
        start.wait()
        index.append(_record(f"f{n}", "owner"))

    workers = [threading.Thread(target=append, args=(n,)) for n in range(16)]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join()

    assert sorted(r.id for r in index.all()) == sorted(f"f{n}" for n in range(16))
