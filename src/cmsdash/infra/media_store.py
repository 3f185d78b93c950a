"""Where uploaded images end up once the API has received them.

Paths are deterministic (``team/team_photo.jpg``, ``players/<id>.jpg``) so
each update overwrites the previous file instead of accumulating copies.
"""
from __future__ import annotations

import logging
import mimetypes
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath

from cmsdash.domain.exceptions import InvalidPayloadError
from cmsdash.imaging.transport import extension_for, parse_data_url

logger = logging.getLogger(__name__)

ALLOWED_MEDIA_TYPES = {"image/jpeg", "image/png", "image/webp"}


def _clean_path(path: str) -> str:
    parts = PurePosixPath(path.strip("/")).parts
    if not parts or any(p in ("..", ".") for p in parts):
        raise InvalidPayloadError(f"Invalid media path {path!r}")
    return "/".join(parts)


class MediaStore(ABC):
    def __init__(self, public_url: str) -> None:
        self.public_url = public_url.rstrip("/")

    def url_for(self, path: str) -> str:
        return f"{self.public_url}/{_clean_path(path)}"

    @abstractmethod
    def put(self, path: str, data: bytes, content_type: str) -> str:
        """Store ``data`` at ``path`` (replacing any previous file); return its public URL."""

    @abstractmethod
    def get(self, path: str) -> tuple[bytes, str] | None:
        """Return (data, content type) or None."""


class InMemoryMediaStore(MediaStore):
    def __init__(self, public_url: str = "memory://media") -> None:
        super().__init__(public_url)
        self._objects: dict[str, tuple[bytes, str]] = {}

    def put(self, path: str, data: bytes, content_type: str) -> str:
        key = _clean_path(path)
        self._objects[key] = (bytes(data), content_type)
        return self.url_for(key)

    def get(self, path: str) -> tuple[bytes, str] | None:
        return self._objects.get(_clean_path(path))


class LocalMediaStore(MediaStore):
    """Files under ``root``; served back by the API's ``/media`` route."""

    def __init__(self, root: str | Path, public_url: str) -> None:
        super().__init__(public_url)
        self.root = Path(root)

    def _resolve(self, path: str) -> Path:
        return self.root / _clean_path(path)

    def put(self, path: str, data: bytes, content_type: str) -> str:
        target = self._resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        logger.info("stored %d bytes at %s", len(data), target)
        return self.url_for(path)

    def get(self, path: str) -> tuple[bytes, str] | None:
        target = self._resolve(path)
        if not target.is_file():
            return None
        content_type, _ = mimetypes.guess_type(target.name)
        return target.read_bytes(), content_type or "application/octet-stream"


def store_data_url(store: MediaStore, folder: str, name: str, data_url: str) -> str:
    """Decode an image data URL and store it as ``<folder>/<name>.<ext>``."""
    try:
        parsed = parse_data_url(data_url)
    except ValueError as exc:
        raise InvalidPayloadError(str(exc)) from exc
    if parsed.mime_type not in ALLOWED_MEDIA_TYPES:
        raise InvalidPayloadError(f"Unsupported media type {parsed.mime_type}")
    path = f"{folder}/{name}.{extension_for(parsed.mime_type)}"
    return store.put(path, parsed.data, parsed.mime_type)
