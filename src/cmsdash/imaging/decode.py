"""Decode strategies, tried in order until one yields a surface."""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from io import BytesIO

import cv2
import numpy as np
from PIL import Image, ImageOps

from cmsdash.domain.exceptions import DecodeFailed
from cmsdash.imaging.types import DecodedSurface

logger = logging.getLogger(__name__)


class DecodeStrategy(ABC):
    name: str = "decoder"

    @abstractmethod
    def decode(self, data: bytes) -> DecodedSurface:
        """Return a surface, or raise any exception to hand over to the next strategy."""


class PillowDecoder(DecodeStrategy):
    name = "pillow"

    def decode(self, data: bytes) -> DecodedSurface:
        img = Image.open(BytesIO(data))
        img.load()
        img = ImageOps.exif_transpose(img)
        return DecodedSurface(image=img, width=img.width, height=img.height, decoder=self.name)


class OpenCVDecoder(DecodeStrategy):
    """Second tier: libjpeg/libpng/libwebp as bundled with OpenCV."""

    name = "opencv"

    def decode(self, data: bytes) -> DecodedSurface:
        buf = np.frombuffer(data, dtype=np.uint8)
        arr = cv2.imdecode(buf, cv2.IMREAD_UNCHANGED)
        if arr is None:
            raise ValueError("cv2.imdecode returned no image")

        if arr.dtype != np.uint8:
            arr = cv2.convertScaleAbs(arr, alpha=255.0 / max(float(arr.max()), 1.0))
        if arr.ndim == 2:
            img = Image.fromarray(arr)
        elif arr.shape[2] == 4:
            img = Image.fromarray(cv2.cvtColor(arr, cv2.COLOR_BGRA2RGBA))
        else:
            img = Image.fromarray(cv2.cvtColor(arr, cv2.COLOR_BGR2RGB))
        return DecodedSurface(image=img, width=img.width, height=img.height, decoder=self.name)


DEFAULT_DECODERS: tuple[DecodeStrategy, ...] = (PillowDecoder(), OpenCVDecoder())


def decode_with_fallback(data: bytes, strategies: Sequence[DecodeStrategy] = DEFAULT_DECODERS) -> DecodedSurface:
    """Try each strategy in order. Raises ``DecodeFailed`` only when all fail."""
    reasons: list[str] = []
    for strategy in strategies:
        try:
            surface = strategy.decode(data)
        except Exception as exc:
            logger.debug("decoder %s failed: %s", strategy.name, exc)
            reasons.append(f"{strategy.name}: {exc}")
            continue
        if surface.width <= 0 or surface.height <= 0:
            reasons.append(f"{strategy.name}: empty image ({surface.width}x{surface.height})")
            continue
        return surface
    raise DecodeFailed(reasons)
