"""Image ingestion pipeline.

    Idle -> Validating -> Decoding -> Rendering -> ShrinkLoop -> Encoding -> Done
                 |            |            |            |            |
                 +------------+------------+------------+------------+--> Failed

Stages run strictly one after another. Decoding and encoding are CPU-bound
and run in a worker thread so the event loop stays responsive; the surface
decoded once is reused by every re-render of the shrink loop.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Any

from cmsdash.domain.exceptions import (
    DecodeFailed,
    IngestionError,
    InvalidPayloadError,
    SizeTargetUnmet,
)
from cmsdash.imaging.decode import DEFAULT_DECODERS, DecodeStrategy, decode_with_fallback
from cmsdash.imaging.encode import Encoder, PillowEncoder, render
from cmsdash.imaging.resize import target_size
from cmsdash.imaging.shrink import shrink_to_fit
from cmsdash.imaging.transport import to_data_url
from cmsdash.imaging.types import (
    DecodedSurface,
    EncodedBlob,
    IngestionConfig,
    IngestionResult,
    PipelineState,
    SourceFile,
    read_source,
)
from cmsdash.imaging.validation import check_content, check_original_size, check_type

logger = logging.getLogger(__name__)


class ImageIngestionPipeline:
    """Turns one user-selected file into a data URL or a typed failure."""

    def __init__(
        self,
        config: IngestionConfig,
        decoders: Sequence[DecodeStrategy] = DEFAULT_DECODERS,
        encoder: Encoder | None = None,
    ) -> None:
        self.config = config
        self._decoders = tuple(decoders)
        self._encoder = encoder or PillowEncoder()

    async def ingest(self, file: SourceFile | Any) -> IngestionResult:
        cfg = self.config
        transitions = [PipelineState.IDLE]
        iterations = 0

        def enter(state: PipelineState) -> None:
            logger.debug("%s -> %s", transitions[-1].value, state.value)
            transitions.append(state)

        try:
            try:
                source = await read_source(file)
            except InvalidPayloadError as exc:
                raise DecodeFailed([exc.message]) from exc

            enter(PipelineState.VALIDATING)
            check_type(source, cfg)
            check_original_size(source, cfg)
            if cfg.sniff_content:
                check_content(source, cfg)

            enter(PipelineState.DECODING)
            surface = await asyncio.to_thread(decode_with_fallback, source.data, self._decoders)
            logger.debug("decoded %s via %s: %dx%d", source.filename, surface.decoder, surface.width, surface.height)

            enter(PipelineState.RENDERING)
            width, quality = cfg.max_width, cfg.quality
            first = await self._render(surface, width, quality)

            enter(PipelineState.SHRINK_LOOP)

            async def rerender(w: int, q: float) -> EncodedBlob:
                return await self._render(surface, w, q)

            outcome = await shrink_to_fit(surface, first, rerender, cfg, width=width, quality=quality)
            iterations = outcome.iterations
            warning = None
            if not outcome.fits:
                unmet = SizeTargetUnmet(outcome.blob.size, cfg.max_output_size)
                if cfg.on_size_target_unmet == "fail":
                    raise unmet
                logger.warning("accepting oversized image (%d bytes > %d)", outcome.blob.size, cfg.max_output_size)
                warning = unmet

            enter(PipelineState.ENCODING)
            data_url = to_data_url(outcome.blob)
        except IngestionError as exc:
            transitions.append(PipelineState.FAILED)
            logger.warning("image ingestion failed at %s: %s", transitions[-2].value, exc.kind)
            return IngestionResult.failed(exc, iterations=iterations, transitions=transitions)

        transitions.append(PipelineState.DONE)
        blob = outcome.blob
        logger.info(
            "image ready: %dx%d %s q=%s %d bytes after %d shrink iteration(s)",
            blob.width, blob.height, blob.mime_type, blob.quality, blob.size, iterations,
        )
        return IngestionResult.succeeded(
            data_url, blob, warning=warning, iterations=iterations, transitions=transitions,
        )

    async def _render(self, surface: DecodedSurface, width: int, quality: float) -> EncodedBlob:
        w, h = target_size(surface.width, surface.height, width)
        return await asyncio.to_thread(
            render, surface, w, h, self.config.output_type, quality, self._encoder,
        )


async def ingest_file(file: SourceFile | Any, config: IngestionConfig, **kwargs: Any) -> IngestionResult:
    return await ImageIngestionPipeline(config, **kwargs).ingest(file)


def ingest_sync(file: SourceFile | Any, config: IngestionConfig, **kwargs: Any) -> IngestionResult:
    """Blocking wrapper for scripts and the CLI."""
    return asyncio.run(ingest_file(file, config, **kwargs))
