"""Pre-decode checks: allow-list, original size, and the optional byte sniff.

The allow-list trusts the declared MIME type and filename. Content sniffing
is a separate stage that only runs when ``sniff_content`` is enabled.
"""
from __future__ import annotations

from collections.abc import Iterable

from cmsdash.domain.exceptions import OriginalTooLarge, UnsupportedType
from cmsdash.imaging.types import IngestionConfig, SourceFile

# (offset, signature, mime)
_SIGNATURES: tuple[tuple[int, bytes, str], ...] = (
    (0, b"\xff\xd8\xff", "image/jpeg"),
    (0, b"\x89PNG\r\n\x1a\n", "image/png"),
    (0, b"GIF87a", "image/gif"),
    (0, b"GIF89a", "image/gif"),
    (0, b"BM", "image/bmp"),
)


def parse_accept(accept: str | Iterable[str]) -> list[str]:
    """Split an accept string (``"image/png,.jpg"``) into lowercase rules."""
    parts = accept.split(",") if isinstance(accept, str) else accept
    return [p.strip().lower() for p in parts if p and p.strip()]


def is_accepted(source: SourceFile, rules: Iterable[str]) -> bool:
    rules = list(rules)
    mime = (source.mime_type or "").lower()
    name = (source.filename or "").lower()

    category = mime.split("/", 1)[0] if "/" in mime else ""
    if category and f"{category}/*" in rules:
        return True

    for rule in rules:
        if rule.startswith("."):
            if name.endswith(rule):
                return True
        elif rule == mime:
            return True
    return False


def check_type(source: SourceFile, config: IngestionConfig) -> None:
    if not is_accepted(source, parse_accept(config.accept)):
        raise UnsupportedType(config.accept, source.mime_type or source.filename)


def check_original_size(source: SourceFile, config: IngestionConfig) -> None:
    if source.byte_length > config.max_size:
        raise OriginalTooLarge(source.byte_length, config.max_size)


def sniff_mime(data: bytes) -> str | None:
    """Identify an image container from its leading bytes."""
    if len(data) >= 12 and data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    for offset, signature, mime in _SIGNATURES:
        if data[offset:offset + len(signature)] == signature:
            return mime
    return None


def check_content(source: SourceFile, config: IngestionConfig) -> None:
    """Reject files whose bytes are not the image type they claim to be.

    The sniffed type must itself pass the allow-list, and must equal the
    declared MIME type whenever one was given.
    """
    detected = sniff_mime(source.data)
    if detected is None:
        raise UnsupportedType(config.accept, f"{source.mime_type or source.filename} (unrecognised content)")
    declared = (source.mime_type or "").lower()
    if declared and declared != detected:
        raise UnsupportedType(config.accept, f"{declared} (content is {detected})")
    probe = SourceFile(data=b"", mime_type=detected, filename="", byte_length=0)
    rules = [r for r in parse_accept(config.accept) if not r.startswith(".")]
    if rules and not is_accepted(probe, rules):
        raise UnsupportedType(config.accept, detected)
