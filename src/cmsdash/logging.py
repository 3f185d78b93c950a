"""Package logger.

Every record carries a short per-process run id so UI and API log lines from
one session can be told apart.
"""
import logging
import sys
import uuid

_RUN_ID = uuid.uuid4().hex[:8]

logger = logging.getLogger("cmsdash")


class _RunIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = _RUN_ID
        return True


class _StderrHandler(logging.StreamHandler):
    """Writes to whatever ``sys.stderr`` is at emit time."""

    @property
    def stream(self):
        return sys.stderr

    @stream.setter
    def stream(self, _value):
        pass


def get_run_id() -> str:
    return _RUN_ID


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Attach a stderr handler to the package logger (idempotent)."""
    if not any(getattr(h, "_cmsdash", False) for h in logger.handlers):
        handler = _StderrHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s [%(run_id)s] %(name)s: %(message)s")
        )
        handler.addFilter(_RunIdFilter())
        handler._cmsdash = True
        logger.addHandler(handler)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    return logger
