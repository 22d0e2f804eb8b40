import logging

from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from mediavault.core.config import Settings
from mediavault.core.errors import InvalidToken, NotFound, ValidationError
from mediavault.models.file import FileRecord
from mediavault.routers.deps import get_app_settings, get_credential_store, get_current_user, get_file_index
from mediavault.schemas.auth import UserPublic
from mediavault.schemas.files import DeleteResponse, UploadResponse
from mediavault.services.storage import delete_file_if_exists, save_upload_file, validate_mime_type
from mediavault.store.files import FileIndex
from mediavault.store.users import CredentialStore

router = APIRouter(prefix="/api", tags=["files"])
logger = logging.getLogger(__name__)


def _public_url(request: Request, settings: Settings, filename: str) -> str:
    if settings.public_base_url:
        return f"{settings.public_base_url.rstrip('/')}/uploads/{filename}"
    return str(request.url_for("uploads", path=filename))


@router.get("/files", response_model=list[FileRecord])
def list_files(
    index: FileIndex = Depends(get_file_index),
    current_user: UserPublic = Depends(get_current_user),
) -> list[FileRecord]:
    return index.list_by_owner(current_user.id)


@router.get("/files/{file_id}", response_model=FileRecord)
def get_file(
    file_id: str,
    index: FileIndex = Depends(get_file_index),
    current_user: UserPublic = Depends(get_current_user),
) -> FileRecord:
    record = index.get(file_id, current_user.id)
    if record is None:
        raise NotFound()
    return record


@router.post("/upload", response_model=UploadResponse)
async def upload_file(
    request: Request,
    index: FileIndex = Depends(get_file_index),
    users: CredentialStore = Depends(get_credential_store),
    settings: Settings = Depends(get_app_settings),
    current_user: UserPublic = Depends(get_current_user),
) -> UploadResponse:
    # Store calls take a thread lock and do file I/O, so keep them off the event loop.
    if await run_in_threadpool(users.find_by_id, current_user.id) is None:
        raise InvalidToken()

    # The form is parsed only once the caller is authenticated.
    async with request.form(max_files=1) as form:
        upload = form.get("file")
        if not isinstance(upload, UploadFile):
            raise ValidationError("No file uploaded")
        mime_type = validate_mime_type(upload.content_type)
        stored = await save_upload_file(upload, mime_type, settings.upload_path, settings.max_upload_bytes)

    record = FileRecord(
        id=stored.file_id,
        original_name=upload.filename or stored.filename,
        filename=stored.filename,
        mime_type=mime_type,
        size=stored.size,
        url=_public_url(request, settings, stored.filename),
        owner_id=current_user.id,
    )
    try:
        await run_in_threadpool(index.append, record)
    except Exception:
        delete_file_if_exists(stored.path)
        raise
    logger.info("upload_stored", extra={"file_id": record.id, "owner_id": record.owner_id, "size": record.size})
    return UploadResponse(file=record)


@router.delete("/files/{file_id}", response_model=DeleteResponse)
def delete_file(
    file_id: str,
    index: FileIndex = Depends(get_file_index),
    settings: Settings = Depends(get_app_settings),
    current_user: UserPublic = Depends(get_current_user),
) -> DeleteResponse:
    record = index.get(file_id, current_user.id)
    if record is None:
        raise NotFound()
    # Bytes go first; if that raises, the record stays and the caller sees the failure.
    delete_file_if_exists(settings.upload_path / record.filename)
    index.remove(record.id, current_user.id)
    logger.info("file_deleted", extra={"file_id": record.id, "owner_id": current_user.id})
    return DeleteResponse()
