"""Application settings, read from the environment and ``.env``."""
from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Literal

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from cmsdash.imaging.types import IngestionConfig

MiB = 1024 * 1024


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    DATA_DIR: Path = Path("data")
    CONTENT_BACKEND: Literal["memory", "sqlite", "http"] = "sqlite"
    DATABASE_URL: str | None = None
    REMOTE_API_URL: str = "http://127.0.0.1:9000/rest/v1"
    REMOTE_API_KEY: SecretStr | None = None
    API_BASE_URL: str = "http://127.0.0.1:8000"
    PUBLIC_MEDIA_URL: str = "http://127.0.0.1:8000/media"
    MEDIA_BUCKET: str = "media"
    LOG_LEVEL: str = "INFO"

    # Upload defaults for the dashboard image fields
    IMAGE_ACCEPT: str = "image/png,image/jpeg,image/webp,.png,.jpg,.jpeg,.webp"
    IMAGE_MAX_SIZE: int = 30 * MiB
    IMAGE_MAX_OUTPUT_SIZE: int = 12 * MiB
    IMAGE_MAX_WIDTH: int = 1400
    IMAGE_OUTPUT_TYPE: Literal["image/jpeg", "image/webp", "image/png"] = "image/jpeg"
    IMAGE_QUALITY: float = 0.82
    IMAGE_QUALITY_FLOOR: float = 0.5
    IMAGE_WIDTH_FLOOR: int = 480
    IMAGE_QUALITY_STEP: float = 0.08
    IMAGE_WIDTH_SHRINK_FACTOR: float = 0.85
    IMAGE_ON_SIZE_TARGET_UNMET: Literal["fail", "acceptBestEffort"] = "fail"
    IMAGE_SNIFF_CONTENT: bool = False

    @property
    def data_dir(self) -> Path:
        return self.DATA_DIR

    @property
    def database_url(self) -> str:
        return self.DATABASE_URL or f"sqlite:///{self.DATA_DIR / 'cms.db'}"

    @property
    def media_dir(self) -> Path:
        return self.DATA_DIR / self.MEDIA_BUCKET

    def image_config(self, **overrides) -> "IngestionConfig":
        """Build the pipeline config from settings; keyword overrides win.

        Floors left at their defaults are not passed on, so they follow a
        lowered ceiling.
        """
        from cmsdash.imaging.types import IngestionConfig

        values = {
            "accept": self.IMAGE_ACCEPT,
            "max_size": self.IMAGE_MAX_SIZE,
            "max_output_size": self.IMAGE_MAX_OUTPUT_SIZE,
            "max_width": self.IMAGE_MAX_WIDTH,
            "output_type": self.IMAGE_OUTPUT_TYPE,
            "quality": self.IMAGE_QUALITY,
            "quality_step": self.IMAGE_QUALITY_STEP,
            "width_shrink_factor": self.IMAGE_WIDTH_SHRINK_FACTOR,
            "on_size_target_unmet": self.IMAGE_ON_SIZE_TARGET_UNMET,
            "sniff_content": self.IMAGE_SNIFF_CONTENT,
        }
        if "IMAGE_QUALITY_FLOOR" in self.model_fields_set:
            values["quality_floor"] = self.IMAGE_QUALITY_FLOOR
        if "IMAGE_WIDTH_FLOOR" in self.model_fields_set:
            values["width_floor"] = self.IMAGE_WIDTH_FLOOR
        values.update(overrides)
        return IngestionConfig(**values)


settings = Settings()
