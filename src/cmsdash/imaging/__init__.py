"""Client-side image ingestion: validate, decode, resize, compress, data-URL encode."""

from cmsdash.imaging.gate import ResultGate
from cmsdash.imaging.pipeline import ImageIngestionPipeline, ingest_file, ingest_sync
from cmsdash.imaging.transport import parse_data_url, to_data_url
from cmsdash.imaging.types import (
    EncodedBlob,
    IngestionConfig,
    IngestionResult,
    PipelineState,
    SourceFile,
)

__all__ = [
    "EncodedBlob",
    "ImageIngestionPipeline",
    "IngestionConfig",
    "IngestionResult",
    "PipelineState",
    "ResultGate",
    "SourceFile",
    "ingest_file",
    "ingest_sync",
    "parse_data_url",
    "to_data_url",
]
