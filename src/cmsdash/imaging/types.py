"""Value types for the image ingestion pipeline.

``IngestionConfig`` is a frozen pydantic model so that option names used by
the dashboard forms (``maxSize``, ``maxProcessedSize``, ...) validate into
the same object as the snake_case settings. The remaining types are plain
dataclasses that live for one pipeline invocation only.
"""
from __future__ import annotations

import asyncio
import mimetypes
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from cmsdash.domain.exceptions import IngestionError, InvalidPayloadError

if TYPE_CHECKING:
    from PIL import Image

OutputType = Literal["image/jpeg", "image/webp", "image/png"]
SizePolicy = Literal["fail", "acceptBestEffort"]

DEFAULT_ACCEPT = "image/png,image/jpeg,image/webp,.png,.jpg,.jpeg,.webp"


def _alias(*names: str) -> AliasChoices:
    return AliasChoices(*names)


def _given(model: type[BaseModel], data: dict, field_name: str) -> bool:
    return any(n in data for n in model.model_fields[field_name].validation_alias.choices)


class IngestionConfig(BaseModel):
    """Resolved once per form; read-only while a file is processed."""

    model_config = ConfigDict(frozen=True)

    accept: str = Field(DEFAULT_ACCEPT, validation_alias=_alias("accept"))
    max_size: int = Field(30 * 1024 * 1024, gt=0, validation_alias=_alias("max_size", "maxSize"))
    max_output_size: int = Field(
        12 * 1024 * 1024,
        gt=0,
        validation_alias=_alias("max_output_size", "maxOutputSize", "maxProcessedSize"),
    )
    max_width: int = Field(1400, ge=1, validation_alias=_alias("max_width", "maxWidth"))
    output_type: OutputType = Field("image/jpeg", validation_alias=_alias("output_type", "outputType"))
    quality: float = Field(0.82, gt=0, le=1, validation_alias=_alias("quality"))
    quality_floor: float = Field(0.5, gt=0, le=1, validation_alias=_alias("quality_floor", "qualityFloor"))
    width_floor: int = Field(480, ge=1, validation_alias=_alias("width_floor", "widthFloor"))
    quality_step: float = Field(0.08, gt=0, validation_alias=_alias("quality_step", "qualityStep"))
    width_shrink_factor: float = Field(
        0.85, gt=0, lt=1, validation_alias=_alias("width_shrink_factor", "widthShrinkFactor")
    )
    on_size_target_unmet: SizePolicy = Field(
        "fail", validation_alias=_alias("on_size_target_unmet", "onSizeTargetUnmet")
    )
    sniff_content: bool = Field(False, validation_alias=_alias("sniff_content", "sniffContent"))

    @field_validator("accept", mode="before")
    @classmethod
    def join_rules(cls, v: Any) -> Any:
        if isinstance(v, (list, tuple, set, frozenset)):
            return ",".join(str(rule) for rule in v)
        return v

    @field_validator("output_type", mode="before")
    @classmethod
    def lower_output_type(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v

    @model_validator(mode="before")
    @classmethod
    def floors_follow_ceilings(cls, data: Any) -> Any:
        """A floor the caller did not set drops to a ceiling lowered below it."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for floor, ceiling in (("width_floor", "max_width"), ("quality_floor", "quality")):
            if _given(cls, data, floor):
                continue
            names = cls.model_fields[ceiling].validation_alias.choices
            value = next((data[n] for n in names if n in data), None)
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                data[floor] = min(cls.model_fields[floor].default, value)
        return data

    @model_validator(mode="after")
    def floors_within_ceilings(self) -> "IngestionConfig":
        if self.width_floor > self.max_width:
            raise ValueError("width_floor must not exceed max_width")
        if self.quality_floor > self.quality:
            raise ValueError("quality_floor must not exceed quality")
        return self


@dataclass(frozen=True, slots=True)
class SourceFile:
    """The caller's file. The pipeline only reads it."""

    data: bytes
    mime_type: str = ""
    filename: str = ""
    byte_length: int | None = None

    def __post_init__(self) -> None:
        if self.byte_length is None:
            object.__setattr__(self, "byte_length", len(self.data))

    @classmethod
    def from_path(cls, path: str | Path, mime_type: str | None = None) -> "SourceFile":
        p = Path(path)
        data = p.read_bytes()
        guessed, _ = mimetypes.guess_type(p.name)
        return cls(data=data, mime_type=mime_type or guessed or "", filename=p.name)

    @classmethod
    def from_upload(cls, upload: Any) -> "SourceFile":
        """Wrap an uploaded-file object (Streamlit ``UploadedFile`` and alike)."""
        if hasattr(upload, "getvalue"):
            data = upload.getvalue()
        else:
            data = upload.read()
        mime = getattr(upload, "type", None) or getattr(upload, "content_type", None) or ""
        name = getattr(upload, "name", None) or getattr(upload, "filename", None) or ""
        return cls(data=bytes(data), mime_type=mime, filename=name)


async def read_source(obj: Any) -> SourceFile:
    """Read ``obj`` to completion and return it as a ``SourceFile``.

    Accepts a ``SourceFile``, raw bytes, a filesystem path, or any uploaded
    file object. Read errors surface as ``InvalidPayloadError``.
    """
    if isinstance(obj, SourceFile):
        return obj
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return SourceFile(data=bytes(obj))
    try:
        if isinstance(obj, (str, Path)):
            return await asyncio.to_thread(SourceFile.from_path, obj)
        return await asyncio.to_thread(SourceFile.from_upload, obj)
    except (OSError, AttributeError, TypeError) as exc:
        raise InvalidPayloadError(f"Failed to read file: {exc}") from exc


@dataclass(slots=True)
class DecodedSurface:
    """Decoded pixels. Reused for every re-render of one invocation."""

    image: "Image.Image"
    width: int
    height: int
    decoder: str = ""


@dataclass(frozen=True, slots=True)
class EncodedBlob:
    data: bytes
    mime_type: str
    width: int
    height: int
    quality: float | None = None

    @property
    def size(self) -> int:
        return len(self.data)


class PipelineState(str, Enum):
    IDLE = "Idle"
    VALIDATING = "Validating"
    DECODING = "Decoding"
    RENDERING = "Rendering"
    SHRINK_LOOP = "ShrinkLoop"
    ENCODING = "Encoding"
    DONE = "Done"
    FAILED = "Failed"


@dataclass(slots=True)
class IngestionResult:
    """Terminal value of one invocation: a data URL or a typed failure."""

    ok: bool
    state: PipelineState
    data_url: str | None = None
    error: IngestionError | None = None
    warning: IngestionError | None = None
    blob: EncodedBlob | None = None
    iterations: int = 0
    transitions: list[PipelineState] = field(default_factory=list)

    @classmethod
    def succeeded(cls, data_url: str, blob: EncodedBlob, **kwargs: Any) -> "IngestionResult":
        return cls(ok=True, state=PipelineState.DONE, data_url=data_url, blob=blob, **kwargs)

    @classmethod
    def failed(cls, error: IngestionError, **kwargs: Any) -> "IngestionResult":
        return cls(ok=False, state=PipelineState.FAILED, error=error, **kwargs)

    @property
    def message(self) -> str:
        if self.error is not None:
            return self.error.message
        if self.warning is not None:
            return self.warning.message
        return ""
