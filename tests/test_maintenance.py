from fastapi.testclient import TestClient

from conftest import auth_headers
from mediavault.core.config import get_settings
from mediavault.main import create_app
from mediavault.models.file import FileRecord
from mediavault.services.maintenance import sweep_orphans
from mediavault.store.files import FileIndex


def _record(file_id: str) -> FileRecord:
    return FileRecord(
        id=file_id,
        original_name="x.png",
        filename=f"{file_id}.png",
        mime_type="image/png",
        size=3,
        url=f"http://localhost/uploads/{file_id}.png",
        owner_id="owner",
    )


def test_sweep_removes_orphans_and_dangling_records(tmp_path):
    upload_dir = tmp_path / "uploads"
    upload_dir.mkdir()
    index = FileIndex(tmp_path / "storage.json")

    index.append(_record("kept"))
    (upload_dir / "kept.png").write_bytes(b"abc")
    index.append(_record("dangling"))
    (upload_dir / "orphan.mp4").write_bytes(b"partial")

    report = sweep_orphans(index, upload_dir)

    assert report.removed_files == ["orphan.mp4"]
    assert report.dropped_records == ["dangling"]
    assert [r.id for r in index.all()] == ["kept"]
    assert sorted(p.name for p in upload_dir.iterdir()) == ["kept.png"]


def test_sweep_runs_on_startup(settings, monkeypatch):
    monkeypatch.setenv("SWEEP_ORPHANS_ON_STARTUP", "true")
    get_settings.cache_clear()
    with TestClient(create_app()) as client:
        headers, _ = auth_headers(client)
        record = client.post(
            "/api/upload", headers=headers, files={"file": ("a.gif", b"GIF89a", "image/gif")}
        ).json()["file"]
    stray = settings.upload_path / "stray.webm"
    stray.write_bytes(b"leftover")

    with TestClient(create_app()) as client:
        listing = client.get("/api/files", headers=headers).json()

    assert not stray.exists()
    assert [row["id"] for row in listing] == [record["id"]]
