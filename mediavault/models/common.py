import uuid
from datetime import datetime, timezone

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase keys on disk and on the wire."""

    model_config = {"alias_generator": to_camel, "populate_by_name": True}

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
