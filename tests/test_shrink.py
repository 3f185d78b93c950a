"""Adaptive shrink loop: step order, floors and termination."""
import asyncio

import pytest
from PIL import Image

from cmsdash.imaging.shrink import next_parameters, shrink_to_fit
from cmsdash.imaging.types import DecodedSurface, EncodedBlob, IngestionConfig


def _surface(width=4000, height=3000):
    return DecodedSurface(image=Image.new("RGB", (4, 3)), width=width, height=height)


def _renderer(size_for, calls=None):
    async def render(width, quality):
        if calls is not None:
            calls.append((width, quality))
        return EncodedBlob(data=b"\x00" * size_for(width, quality), mime_type="image/jpeg",
                           width=width, height=width * 3 // 4, quality=quality)
    return render


def _first(config, size):
    return EncodedBlob(data=b"\x00" * size, mime_type=config.output_type, width=config.max_width,
                       height=config.max_width * 3 // 4, quality=config.quality)


def test_next_parameters_lowers_quality_first():
    config = IngestionConfig()
    width, quality = next_parameters(1400, 0.82, config, lossy=True)
    assert width == 1400
    assert quality == 0.74


def test_next_parameters_rounds_quality_steps():
    config = IngestionConfig(quality=0.9, quality_floor=0.1, quality_step=0.1)
    quality, seen = 0.9, []
    while quality > config.quality_floor:
        _, quality = next_parameters(1400, quality, config, lossy=True)
        seen.append(quality)
    assert seen == [0.8, 0.7, 0.6, 0.5, 0.4, 0.3, 0.2, 0.1]


def test_next_parameters_step_below_rounding_still_lowers_quality():
    config = IngestionConfig(quality=0.8, quality_floor=0.5, quality_step=0.00001)
    _, quality = next_parameters(1400, 0.8, config, lossy=True)
    assert quality < 0.8


def test_next_parameters_clamps_quality_to_floor():
    config = IngestionConfig(quality=0.55, quality_floor=0.5)
    assert next_parameters(1400, 0.55, config, lossy=True) == (1400, 0.5)


def test_next_parameters_narrows_width_after_quality_floor():
    config = IngestionConfig()
    assert next_parameters(1400, 0.5, config, lossy=True) == (1190, 0.5)


def test_next_parameters_png_only_narrows_width():
    config = IngestionConfig(output_type="image/png")
    assert next_parameters(1400, 0.82, config, lossy=False) == (1190, 0.82)


def test_next_parameters_stops_at_both_floors():
    config = IngestionConfig()
    assert next_parameters(480, 0.5, config, lossy=True) is None


def test_next_parameters_always_decreases_small_widths():
    # 0.99 * 10 rounds back to 10; the step must still move
    config = IngestionConfig(max_width=10, width_floor=1, width_shrink_factor=0.99)
    assert next_parameters(10, 0.5, config, lossy=False) == (9, 0.5)


def test_loop_skips_when_first_render_fits():
    config = IngestionConfig(max_output_size=1000)
    calls = []
    outcome = asyncio.run(shrink_to_fit(
        _surface(), _first(config, 900), _renderer(lambda w, q: 1, calls), config,
        width=1400, quality=0.82,
    ))
    assert outcome.fits
    assert outcome.iterations == 0
    assert calls == []


def test_loop_stops_as_soon_as_blob_fits():
    config = IngestionConfig(max_output_size=1_000)
    calls = []
    # fits once quality drops to 0.66 or below
    outcome = asyncio.run(shrink_to_fit(
        _surface(), _first(config, 2_000), _renderer(lambda w, q: 900 if q < 0.7 else 2_000, calls),
        config, width=1400, quality=0.82,
    ))
    assert outcome.fits
    assert outcome.iterations == 2
    assert [w for w, _ in calls] == [1400, 1400]
    assert outcome.blob.quality == 0.66


def test_loop_terminates_at_floors_when_target_unreachable():
    config = IngestionConfig(max_output_size=10)
    calls = []
    outcome = asyncio.run(shrink_to_fit(
        _surface(), _first(config, 1_000), _renderer(lambda w, q: 1_000, calls), config,
        width=1400, quality=0.82,
    ))
    assert not outcome.fits
    assert outcome.iterations == len(calls) > 0
    final_w, final_q = calls[-1]
    assert final_w == config.width_floor
    assert final_q == config.quality_floor
    for w, q in calls:
        assert w >= config.width_floor
        assert q >= config.quality_floor


def test_every_iteration_strictly_shrinks_one_parameter():
    config = IngestionConfig(max_output_size=10)
    calls = [(1400, 0.82)]
    asyncio.run(shrink_to_fit(
        _surface(), _first(config, 1_000), _renderer(lambda w, q: 1_000, calls), config,
        width=1400, quality=0.82,
    ))
    for (w0, q0), (w1, q1) in zip(calls, calls[1:]):
        assert (w1 < w0 and q1 == q0) or (q1 < q0 and w1 == w0)


@pytest.mark.parametrize("step,factor", [(0.01, 0.99), (0.3, 0.1), (0.08, 0.5)])
def test_loop_terminates_for_any_positive_step_and_factor(step, factor):
    config = IngestionConfig(max_output_size=1, quality_step=step, width_shrink_factor=factor)
    outcome = asyncio.run(shrink_to_fit(
        _surface(), _first(config, 10), _renderer(lambda w, q: 10), config,
        width=1400, quality=0.82,
    ))
    assert not outcome.fits
    assert outcome.blob.width == config.width_floor


def test_png_loop_never_touches_quality():
    config = IngestionConfig(output_type="image/png", max_output_size=10)
    calls = []
    asyncio.run(shrink_to_fit(
        _surface(), _first(config, 1_000), _renderer(lambda w, q: 1_000, calls), config,
        width=1400, quality=0.82,
    ))
    assert {q for _, q in calls} == {0.82}
    assert calls[0][0] == 1190


def test_narrowing_starts_from_source_width_when_smaller():
    config = IngestionConfig(quality_floor=0.82, max_output_size=10)
    calls = []
    asyncio.run(shrink_to_fit(
        _surface(width=1000, height=750), _first(config, 1_000), _renderer(lambda w, q: 1_000, calls),
        config, width=1400, quality=0.82,
    ))
    assert calls[0][0] == 850
