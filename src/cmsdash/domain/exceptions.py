class CMSError(Exception):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(CMSError):
    """Requested resource does not exist."""


class ConflictError(CMSError):
    """Operation conflicts with existing state."""


class InvalidPayloadError(CMSError):
    """Request body or uploaded content could not be used as given."""


class UpstreamError(CMSError):
    """A backing service (hosted database, storage) answered with an error."""

    def __init__(self, status_code: int, detail: str) -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"[{status_code}] {detail}")


def bytes_to_mb(size: int) -> float:
    """Bytes → MB rounded to one decimal, as shown to users."""
    return round(size / 1_048_576 * 10) / 10


# ---------------------------------------------------------------------------
# Image ingestion failures. All are terminal for one pipeline invocation.
# ---------------------------------------------------------------------------


class IngestionError(CMSError):
    kind = "IngestionError"


class UnsupportedType(IngestionError):
    kind = "UnsupportedType"

    def __init__(self, allowed: str, rejected: str) -> None:
        self.allowed = allowed
        self.rejected = rejected
        super().__init__(f"Invalid file type.\nAllowed: {allowed}\nSelected: {rejected}")


class OriginalTooLarge(IngestionError):
    kind = "OriginalTooLarge"

    def __init__(self, actual: int, limit: int) -> None:
        self.actual = actual
        self.limit = limit
        super().__init__(
            f"File is too large.\nMax allowed: {bytes_to_mb(limit)}MB\n"
            f"Selected: {bytes_to_mb(actual)}MB"
        )


class DecodeFailed(IngestionError):
    kind = "DecodeFailed"

    def __init__(self, reasons: list[str]) -> None:
        self.reasons = list(reasons)
        detail = "; ".join(self.reasons) or "no decoder available"
        super().__init__(f"Could not read the image: {detail}")


class EncodeFailed(IngestionError):
    kind = "EncodeFailed"

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Failed to compress image: {reason}")


class SizeTargetUnmet(IngestionError):
    kind = "SizeTargetUnmet"

    def __init__(self, actual: int, limit: int) -> None:
        self.actual = actual
        self.limit = limit
        super().__init__(
            "Image is still too large after processing.\n"
            f"Processed: {bytes_to_mb(actual)}MB\n"
            f"Max processed: {bytes_to_mb(limit)}MB\n\n"
            "Try:\n- Use a smaller image\n- Reduce max width (e.g. 1000)\n"
            "- Reduce quality (e.g. 0.7)\n- Use WEBP output"
        )


class TransportEncodeFailed(IngestionError):
    kind = "TransportEncodeFailed"

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Failed to read processed image: {reason}")
