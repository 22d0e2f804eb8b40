from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore")

    app_name: str = "MediaVault"
    environment: Literal["dev", "test", "prod"] = "dev"
    debug: bool = False
    log_level: str = "INFO"

    jwt_secret: str = "dev_secret_change_me"
    jwt_algorithm: str = "HS256"
    access_token_expire_days: int = 7

    data_dir: str = "data"
    static_dir: str = str(PACKAGE_DIR / "static")
    public_base_url: str = ""

    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    max_upload_size_mb: int = 200
    sweep_orphans_on_startup: bool = True

    @property
    def users_path(self) -> Path:
        return Path(self.data_dir) / "users.json"

    @property
    def storage_path(self) -> Path:
        return Path(self.data_dir) / "storage.json"

    @property
    def upload_path(self) -> Path:
        return Path(self.data_dir) / "uploads"

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
