from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="CGAL_", extra="ignore")

    # container paths
    media_root: str = Field("/media")
    config_root: str = Field("/config")

    # behavior toggles
    debug_logging: bool = False
    sync_on_startup: bool = True
    auto_sync_enabled: bool = True
    auto_sync_interval_minutes: int = Field(15, ge=1)
    change_check_seconds: int = Field(20, ge=1)
    max_upload_mb: int = Field(500, ge=1)

    @property
    def images_dir(self) -> Path:
        return Path(self.media_root) / "images"

    @property
    def videos_dir(self) -> Path:
        return Path(self.media_root) / "videos"

    @property
    def db_path(self) -> Path:
        return Path(self.config_root) / "content-gallery.db"


APP_VERSION = "0.1.0"

settings = Settings()
