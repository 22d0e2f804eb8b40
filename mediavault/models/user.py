from datetime import datetime

from pydantic import Field

from mediavault.models.common import CamelModel, new_id, utcnow


class User(CamelModel):
    id: str = Field(default_factory=new_id)
    email: str
    password_hash: str
    created_at: datetime = Field(default_factory=utcnow)
