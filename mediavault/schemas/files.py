from pydantic import BaseModel

from mediavault.models.file import FileRecord


class UploadResponse(BaseModel):
    success: bool = True
    file: FileRecord


class DeleteResponse(BaseModel):
    success: bool = True
