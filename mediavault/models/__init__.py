from mediavault.models.file import FileRecord
from mediavault.models.user import User

__all__ = ["User", "FileRecord"]
