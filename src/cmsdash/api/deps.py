"""FastAPI dependencies. Tests replace these via ``app.dependency_overrides``."""
from __future__ import annotations
from functools import lru_cache
from cmsdash.config import settings
from cmsdash.infra.media_store import LocalMediaStore, MediaStore
from cmsdash.infra.repository import ContentRepository, build_repository


@lru_cache(maxsize=1)
def get_repository() -> ContentRepository:
    """One repository per process, chosen by ``CONTENT_BACKEND``."""
    return build_repository(settings)


@lru_cache(maxsize=1)
def get_media_store() -> MediaStore:
    return LocalMediaStore(settings.media_dir, settings.PUBLIC_MEDIA_URL)
