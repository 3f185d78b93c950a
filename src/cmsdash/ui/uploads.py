"""Image field for dashboard forms.

``handle_upload`` runs the ingestion pipeline for one picked file and hands
the data URL to ``on_change``; ``image_uploader`` wraps it in Streamlit
widgets (picker, preview, remove button, limits caption).
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

import streamlit as st

from cmsdash.config import settings
from cmsdash.domain.exceptions import bytes_to_mb
from cmsdash.imaging.gate import ResultGate
from cmsdash.imaging.pipeline import ImageIngestionPipeline
from cmsdash.imaging.transport import is_data_url, parse_data_url
from cmsdash.imaging.types import IngestionConfig, IngestionResult, SourceFile
from cmsdash.imaging.validation import parse_accept
from cmsdash.ui.state import get_gate, rotate_uploader_key, uploader_key

logger = logging.getLogger(__name__)

_MIME_EXTENSIONS = {
    "image/png": ["png"],
    "image/jpeg": ["jpg", "jpeg"],
    "image/webp": ["webp"],
}


def uploader_types(accept: str) -> list[str] | None:
    """Extensions for the file picker; None lets the picker offer everything."""
    exts: list[str] = []
    for rule in parse_accept(accept):
        if rule.endswith("/*"):
            return None
        for ext in [rule[1:]] if rule.startswith(".") else _MIME_EXTENSIONS.get(rule, []):
            if ext not in exts:
                exts.append(ext)
    return exts or None


def limits_caption(config: IngestionConfig) -> str:
    quality = "" if config.output_type == "image/png" else f", q={config.quality}"
    return (
        f"Allowed: {config.accept}  \n"
        f"Max original size: {bytes_to_mb(config.max_size)}MB  \n"
        f"Max processed size: {bytes_to_mb(config.max_output_size)}MB  \n"
        f"Auto resize: max {config.max_width}px, export: {config.output_type}{quality}"
    )


def handle_upload(
    upload: Any,
    config: IngestionConfig,
    gate: ResultGate,
    on_change: Callable[[str | None], None],
    notify: Callable[[str], None],
    *,
    warn: Callable[[str], None] | None = None,
    pipeline: ImageIngestionPipeline | None = None,
) -> IngestionResult:
    """Process one picked file. The caller's value only changes on success."""
    token = gate.begin()
    source = upload if isinstance(upload, SourceFile) else SourceFile.from_upload(upload)
    pipeline = pipeline or ImageIngestionPipeline(config)
    result = asyncio.run(pipeline.ingest(source))

    if not gate.is_current(token):
        logger.debug("discarding result for %s: superseded", source.filename)
        return result
    if result.ok:
        if result.warning is not None and warn is not None:
            warn(result.warning.message)
        gate.deliver(token, result.data_url, on_change)
    else:
        notify(f"{result.error.kind}: {result.message}")
    return result


def _preview(value: str) -> Any:
    if is_data_url(value):
        try:
            return parse_data_url(value).data
        except ValueError:
            return None
    return value


def image_uploader(
    label: str,
    *,
    key: str,
    value: str | None,
    on_change: Callable[[str | None], None],
    config: IngestionConfig | None = None,
    placeholder: str = "Drop an image here or click to upload",
) -> None:
    config = config or settings.image_config()
    gate = get_gate(key)

    if value:
        preview = _preview(value)
        if preview is not None:
            st.image(preview, caption=label)
        if st.button("Remove", key=f"remove::{key}", type="secondary"):
            gate.invalidate()
            on_change(None)
            st.rerun()
        return

    upload = st.file_uploader(
        label,
        type=uploader_types(config.accept),
        key=uploader_key(key),
        help=placeholder,
    )
    st.caption(limits_caption(config))
    if upload is None:
        return

    with st.spinner("Processing image..."):
        result = handle_upload(upload, config, gate, on_change, notify=st.error, warn=st.warning)
    rotate_uploader_key(key)
    if result.ok:
        st.rerun()
