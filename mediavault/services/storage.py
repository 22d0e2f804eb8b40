import logging
import re
import uuid
from dataclasses import dataclass
from pathlib import Path

from starlette.datastructures import UploadFile

from mediavault.core.errors import PayloadTooLarge, UnsupportedType

logger = logging.getLogger(__name__)

EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/gif": ".gif",
    "video/mp4": ".mp4",
    "video/webm": ".webm",
    "video/ogg": ".ogv",
    "audio/mpeg": ".mp3",
}
ALLOWED_MIME_TYPES = frozenset(EXTENSIONS)

CHUNK_SIZE = 1024 * 1024
_SUFFIX_RE = re.compile(r"^\.[a-z0-9]{1,10}$")


@dataclass(slots=True)
class StoredUpload:
    file_id: str
    filename: str
    path: Path
    size: int


def ensure_upload_dir(root: Path) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    return root


def normalize_mime_type(content_type: str | None) -> str:
    return (content_type or "").split(";", 1)[0].strip().lower()


def validate_mime_type(content_type: str | None) -> str:
    mime_type = normalize_mime_type(content_type)
    if mime_type not in ALLOWED_MIME_TYPES:
        logger.warning("upload_rejected", extra={"content_type": content_type, "reason": "unsupported_type"})
        raise UnsupportedType()
    return mime_type


def resolve_extension(filename: str | None, mime_type: str) -> str:
    suffix = Path(filename or "").suffix.lower()
    if _SUFFIX_RE.match(suffix):
        return suffix
    return EXTENSIONS.get(mime_type, "")


async def save_upload_file(file: UploadFile, mime_type: str, root: Path, max_bytes: int) -> StoredUpload:
    """Stream ``file`` into ``root`` as ``<uuid><ext>``, enforcing ``max_bytes`` as it goes."""
    file_id = str(uuid.uuid4())
    filename = f"{file_id}{resolve_extension(file.filename, mime_type)}"
    final_path = ensure_upload_dir(root) / filename

    total = 0
    try:
        with final_path.open("wb") as handle:
            while True:
                chunk = await file.read(CHUNK_SIZE)
                if not chunk:
                    break
                total += len(chunk)
                if total > max_bytes:
                    raise PayloadTooLarge()
                handle.write(chunk)
    except BaseException:
        final_path.unlink(missing_ok=True)
        raise
    finally:
        await file.close()
    return StoredUpload(file_id=file_id, filename=filename, path=final_path, size=total)


def delete_file_if_exists(path: Path) -> bool:
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    return True
