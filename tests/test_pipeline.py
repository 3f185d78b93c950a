"""End-to-end pipeline behaviour, including the reference scenarios."""
import asyncio

import pytest

from cmsdash.domain.exceptions import (
    DecodeFailed,
    EncodeFailed,
    OriginalTooLarge,
    SizeTargetUnmet,
    UnsupportedType,
)
from cmsdash.imaging.pipeline import ImageIngestionPipeline, ingest_sync
from cmsdash.imaging.transport import parse_data_url
from cmsdash.imaging.types import IngestionConfig, PipelineState, SourceFile

MiB = 1024 * 1024
S = PipelineState


def _run(pipeline, source):
    return asyncio.run(pipeline.ingest(source))


def test_scenario_small_png_single_pass(png_source):
    config = IngestionConfig(max_width=1400, max_output_size=int(1.5 * MiB))
    result = _run(ImageIngestionPipeline(config), png_source)

    assert result.ok
    assert result.iterations == 0
    assert (result.blob.width, result.blob.height) == (200, 200)
    assert result.transitions == [
        S.IDLE, S.VALIDATING, S.DECODING, S.RENDERING, S.SHRINK_LOOP, S.ENCODING, S.DONE,
    ]
    assert result.data_url.startswith("data:image/jpeg;base64,")


def test_scenario_large_jpeg_resized_then_quality_reduced(spy_decoder, sized_encoder):
    # ~1.72MB at q=0.82, ~1.55MB at q=0.74, both at 1400px
    encoder = sized_encoder(lambda w, q: int(w * q * 1500))
    config = IngestionConfig(
        max_size=30 * MiB, max_width=1400, quality=0.82, max_output_size=int(1.5 * MiB),
    )
    source = SourceFile(data=b"\xff\xd8\xff", mime_type="image/jpeg", filename="stadium.jpg",
                        byte_length=20 * MiB)
    result = _run(ImageIngestionPipeline(config, decoders=[spy_decoder], encoder=encoder), source)

    assert result.ok
    assert encoder.calls[0] == (1400, 1050, 0.82)
    assert result.blob.width == 1400
    assert result.iterations >= 1
    assert result.blob.quality >= 0.5
    assert result.blob.size <= 1.5 * MiB


def test_scenario_pdf_rejected_before_decode(spy_decoder):
    config = IngestionConfig(accept="image/png,image/jpeg")
    source = SourceFile(data=b"%PDF-1.4", mime_type="application/pdf", filename="roster.pdf")
    result = _run(ImageIngestionPipeline(config, decoders=[spy_decoder]), source)

    assert not result.ok
    assert isinstance(result.error, UnsupportedType)
    assert spy_decoder.calls == 0
    assert result.transitions == [S.IDLE, S.VALIDATING, S.FAILED]


def test_scenario_oversized_original_rejected_before_decode(spy_decoder):
    config = IngestionConfig(max_size=30 * MiB)
    source = SourceFile(data=b"\xff\xd8\xff", mime_type="image/jpeg", filename="raw.jpg",
                        byte_length=40 * MiB)
    result = _run(ImageIngestionPipeline(config, decoders=[spy_decoder]), source)

    assert isinstance(result.error, OriginalTooLarge)
    assert spy_decoder.calls == 0
    assert "Max allowed: 30.0MB" in result.message
    assert "Selected: 40.0MB" in result.message


def test_unreachable_target_fails_by_default(spy_decoder, sized_encoder):
    config = IngestionConfig(max_output_size=1_000)
    pipeline = ImageIngestionPipeline(config, decoders=[spy_decoder],
                                      encoder=sized_encoder(lambda w, q: 2_000))
    result = _run(pipeline, SourceFile(data=b"x", mime_type="image/jpeg", filename="a.jpg"))

    assert not result.ok
    assert isinstance(result.error, SizeTargetUnmet)
    assert result.state is S.FAILED
    assert result.transitions[-2:] == [S.SHRINK_LOOP, S.FAILED]
    assert result.data_url is None
    assert result.iterations > 0
    assert "still too large after processing" in result.message


def test_unreachable_target_best_effort_succeeds_with_warning(spy_decoder, sized_encoder):
    config = IngestionConfig(max_output_size=1_000, on_size_target_unmet="acceptBestEffort")
    pipeline = ImageIngestionPipeline(config, decoders=[spy_decoder],
                                      encoder=sized_encoder(lambda w, q: 2_000))
    result = _run(pipeline, SourceFile(data=b"x", mime_type="image/jpeg", filename="a.jpg"))

    assert result.ok
    assert isinstance(result.warning, SizeTargetUnmet)
    assert result.blob.width == config.width_floor
    assert result.blob.quality == config.quality_floor
    assert len(parse_data_url(result.data_url).data) == 2_000


def test_undecodable_bytes_fail_with_decode_failed():
    config = IngestionConfig()
    result = _run(ImageIngestionPipeline(config),
                  SourceFile(data=b"garbage", mime_type="image/png", filename="x.png"))
    assert isinstance(result.error, DecodeFailed)
    assert result.transitions[-2:] == [S.DECODING, S.FAILED]


def test_encoder_failure_is_reported(spy_decoder):
    class Failing:
        def encode(self, *args):
            raise OSError("encoder unavailable")

    pipeline = ImageIngestionPipeline(IngestionConfig(), decoders=[spy_decoder], encoder=Failing())
    result = _run(pipeline, SourceFile(data=b"x", mime_type="image/jpeg", filename="a.jpg"))
    assert isinstance(result.error, EncodeFailed)
    assert "encoder unavailable" in result.message
    assert result.transitions[-2:] == [S.RENDERING, S.FAILED]


def test_unreadable_path_is_decode_failure(tmp_path):
    result = ingest_sync(tmp_path / "missing.png", IngestionConfig())
    assert isinstance(result.error, DecodeFailed)
    assert result.transitions == [S.IDLE, S.FAILED]


def test_ingest_from_path(tmp_path, make_image):
    path = tmp_path / "crest.png"
    path.write_bytes(make_image(2000, 1000))
    result = ingest_sync(path, IngestionConfig(output_type="image/webp"))
    assert result.ok
    assert (result.blob.width, result.blob.height) == (1400, 700)
    assert result.data_url.startswith("data:image/webp;base64,")


def test_sniff_stage_runs_only_when_enabled(make_image, spy_decoder):
    source = SourceFile(data=make_image(8, 8, "PNG"), mime_type="image/jpeg", filename="liar.jpg")
    lenient = _run(ImageIngestionPipeline(IngestionConfig(), decoders=[spy_decoder]), source)
    strict = _run(ImageIngestionPipeline(IngestionConfig(sniff_content=True), decoders=[spy_decoder]), source)
    assert lenient.ok
    assert isinstance(strict.error, UnsupportedType)
    assert spy_decoder.calls == 1


def test_caller_source_is_not_modified(png_source):
    before = (png_source.data, png_source.mime_type, png_source.filename)
    _run(ImageIngestionPipeline(IngestionConfig()), png_source)
    assert (png_source.data, png_source.mime_type, png_source.filename) == before


@pytest.mark.parametrize("kwargs", [
    {"maxSize": 1024, "maxProcessedSize": 2048, "outputType": "IMAGE/WEBP"},
    {"max_size": 1024, "max_output_size": 2048, "output_type": "image/webp"},
])
def test_config_accepts_form_and_settings_names(kwargs):
    config = IngestionConfig(**kwargs)
    assert (config.max_size, config.max_output_size, config.output_type) == (1024, 2048, "image/webp")


def test_config_joins_accept_list():
    assert IngestionConfig(accept=["image/png", ".png"]).accept == "image/png,.png"


def test_config_rejects_floor_above_ceiling():
    with pytest.raises(ValueError):
        IngestionConfig(max_width=400, width_floor=480)


@pytest.mark.parametrize("kwargs,floors", [
    ({"quality": 0.4}, (480, 0.4)),
    ({"maxWidth": 300}, (300, 0.5)),
    ({"max_width": 300, "quality": 0.3}, (300, 0.3)),
    ({"maxWidth": 2000, "quality": 0.9}, (480, 0.5)),
])
def test_config_unset_floors_follow_lowered_ceilings(kwargs, floors):
    config = IngestionConfig(**kwargs)
    assert (config.width_floor, config.quality_floor) == floors


def test_config_explicit_floor_above_ceiling_still_rejected():
    with pytest.raises(ValueError):
        IngestionConfig(quality=0.4, qualityFloor=0.6)
    assert IngestionConfig(maxWidth=300, widthFloor=200).width_floor == 200


def test_cmyk_jpeg_ingests_as_png(make_image):
    source = SourceFile(
        data=make_image(64, 48, "JPEG", mode="CMYK", color=(0, 80, 160, 10)),
        mime_type="image/jpeg",
        filename="print.jpg",
    )
    result = _run(ImageIngestionPipeline(IngestionConfig(output_type="image/png")), source)

    assert result.ok, result.error
    assert parse_data_url(result.data_url).mime_type == "image/png"
