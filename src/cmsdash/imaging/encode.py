"""Render a decoded surface at a given size and encode it."""
from __future__ import annotations

from io import BytesIO
from typing import Protocol, runtime_checkable

from PIL import Image

from cmsdash.domain.exceptions import EncodeFailed
from cmsdash.imaging.types import DecodedSurface, EncodedBlob

_PIL_FORMATS = {
    "image/jpeg": "JPEG",
    "image/webp": "WEBP",
    "image/png": "PNG",
}
_LOSSY = {"image/jpeg", "image/webp"}
# Modes Pillow's PNG writer accepts as-is.
_PNG_MODES = {"1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA"}


def is_lossy(output_type: str) -> bool:
    return output_type in _LOSSY


@runtime_checkable
class Encoder(Protocol):
    def encode(
        self,
        surface: DecodedSurface,
        width: int,
        height: int,
        output_type: str,
        quality: float | None,
    ) -> bytes:
        """Return the encoded bytes for ``surface`` drawn at width x height."""
        ...


def _flatten_alpha(img: Image.Image) -> Image.Image:
    """JPEG has no alpha channel: composite onto white."""
    if img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info):
        rgba = img.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.split()[3])
        return background
    return img.convert("RGB") if img.mode != "RGB" else img


def _to_rgb(img: Image.Image) -> Image.Image:
    """CMYK, YCbCr, LAB and friends: convert to RGB, or RGBA when there is alpha."""
    has_alpha = "A" in img.getbands() or "transparency" in img.info
    return img.convert("RGBA" if has_alpha else "RGB")


class PillowEncoder:
    resample = Image.Resampling.LANCZOS

    def encode(
        self,
        surface: DecodedSurface,
        width: int,
        height: int,
        output_type: str,
        quality: float | None,
    ) -> bytes:
        fmt = _PIL_FORMATS.get(output_type)
        if fmt is None:
            raise ValueError(f"unsupported output type {output_type!r}")
        if width <= 0 or height <= 0:
            raise ValueError(f"cannot render a {width}x{height} image")

        img = surface.image
        if (width, height) != img.size:
            img = img.resize((width, height), self.resample)

        out = BytesIO()
        if fmt == "PNG":
            if img.mode not in _PNG_MODES:
                img = _to_rgb(img)
            img.save(out, format=fmt, optimize=True)
        else:
            if fmt == "JPEG":
                img = _flatten_alpha(img)
            elif img.mode not in ("RGB", "RGBA"):
                img = _to_rgb(img)
            q = min(100, max(1, round((quality or 1.0) * 100)))
            img.save(out, format=fmt, quality=q, optimize=True)
        return out.getvalue()


def render(
    surface: DecodedSurface,
    width: int,
    height: int,
    output_type: str,
    quality: float,
    encoder: Encoder,
) -> EncodedBlob:
    """One encode attempt. Any encoder failure is an ``EncodeFailed``."""
    effective_quality = quality if is_lossy(output_type) else None
    try:
        data = encoder.encode(surface, width, height, output_type, effective_quality)
    except Exception as exc:
        raise EncodeFailed(str(exc) or exc.__class__.__name__) from exc
    if not data:
        raise EncodeFailed("encoder produced no data")
    return EncodedBlob(
        data=data,
        mime_type=output_type,
        width=width,
        height=height,
        quality=effective_quality,
    )
