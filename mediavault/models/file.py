from datetime import datetime

from pydantic import Field

from mediavault.models.common import CamelModel, utcnow


class FileRecord(CamelModel):
    id: str
    original_name: str
    filename: str
    mime_type: str
    size: int
    url: str
    owner_id: str
    created_at: datetime = Field(default_factory=utcnow)
