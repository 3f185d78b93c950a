"""Adaptive shrink loop.

Policy, one step at a time: lower quality by ``quality_step`` until the
quality floor (lossy formats only), then narrow the width by
``width_shrink_factor`` until the width floor, then stop. Every step strictly
lowers one of the two parameters, so the loop always terminates.
"""
from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from cmsdash.imaging.encode import is_lossy
from cmsdash.imaging.types import DecodedSurface, EncodedBlob, IngestionConfig

logger = logging.getLogger(__name__)

Render = Callable[[int, float], Awaitable[EncodedBlob]]


@dataclass(slots=True)
class ShrinkOutcome:
    blob: EncodedBlob
    iterations: int
    fits: bool
    # (width, quality, size) per encode attempt, first render included
    attempts: list[tuple[int, float | None, int]] = field(default_factory=list)


def next_parameters(
    width: int, quality: float, config: IngestionConfig, lossy: bool
) -> tuple[int, float] | None:
    """Return the next (width, quality) to try, or None when both floors are reached."""
    if lossy and quality > config.quality_floor:
        lowered = round(quality - config.quality_step, 4)
        if lowered >= quality:
            # a step below the rounding precision
            lowered = quality - config.quality_step
        return width, max(config.quality_floor, lowered)
    if width > config.width_floor:
        narrowed = min(width - 1, round(width * config.width_shrink_factor))
        return max(config.width_floor, narrowed), quality
    return None


async def shrink_to_fit(
    surface: DecodedSurface,
    first: EncodedBlob,
    render: Render,
    config: IngestionConfig,
    *,
    width: int,
    quality: float,
) -> ShrinkOutcome:
    """Re-render ``surface`` until the blob fits ``max_output_size`` or floors run out.

    ``first`` is the blob already rendered at (width, quality).
    """
    lossy = is_lossy(config.output_type)
    blob = first
    attempts = [(blob.width, blob.quality, blob.size)]
    iterations = 0

    while blob.size > config.max_output_size:
        # Narrowing above the source width would not change the output.
        step = next_parameters(min(width, surface.width), quality, config, lossy)
        if step is None:
            logger.debug("shrink floors reached at width=%s quality=%s", width, quality)
            break
        width, quality = step
        blob = await render(width, quality)
        iterations += 1
        attempts.append((blob.width, blob.quality, blob.size))
        logger.debug(
            "shrink iteration %d: width=%d quality=%s size=%d",
            iterations, blob.width, blob.quality, blob.size,
        )

    return ShrinkOutcome(
        blob=blob,
        iterations=iterations,
        fits=blob.size <= config.max_output_size,
        attempts=attempts,
    )
