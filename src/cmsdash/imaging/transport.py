"""Data URLs: the text-safe form images travel in through JSON payloads."""
from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass

from cmsdash.domain.exceptions import TransportEncodeFailed
from cmsdash.imaging.types import EncodedBlob

_DATA_URL = re.compile(r"^data:([^;,]+);base64,(.+)$", re.DOTALL)

_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


@dataclass(frozen=True, slots=True)
class DataUrl:
    mime_type: str
    data: bytes


def to_data_url(blob: EncodedBlob) -> str:
    try:
        payload = base64.b64encode(bytes(blob.data)).decode("ascii")
    except (TypeError, ValueError) as exc:
        raise TransportEncodeFailed(str(exc)) from exc
    return f"data:{blob.mime_type};base64,{payload}"


def is_data_url(value: object) -> bool:
    return isinstance(value, str) and value.startswith("data:")


def parse_data_url(value: str) -> DataUrl:
    """Reverse of ``to_data_url``. Raises ``ValueError`` on malformed input."""
    match = _DATA_URL.match(value or "")
    if match is None:
        raise ValueError("Invalid image dataUrl")
    try:
        data = base64.b64decode(match.group(2), validate=True)
    except binascii.Error as exc:
        raise ValueError(f"Invalid base64 payload: {exc}") from exc
    return DataUrl(mime_type=match.group(1).strip().lower(), data=data)


def extension_for(mime_type: str) -> str:
    return _EXTENSIONS.get(mime_type.lower(), "bin")
