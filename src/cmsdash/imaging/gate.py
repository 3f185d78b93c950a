"""Latest-wins delivery for pipeline results.

A form field may start a new upload before the previous one finished; only
the result of the most recent invocation is handed to the caller.
"""
from __future__ import annotations

import itertools
import logging
from collections.abc import Callable
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ResultGate:
    def __init__(self) -> None:
        self._counter = itertools.count(1)
        self._current = 0

    def begin(self) -> int:
        """Register a new invocation; earlier tokens become stale."""
        self._current = next(self._counter)
        return self._current

    def is_current(self, token: int) -> bool:
        return token == self._current

    def invalidate(self) -> None:
        """Drop whatever is in flight (e.g. the field was cleared or unmounted)."""
        self._current = next(self._counter)

    def deliver(self, token: int, result: T, callback: Callable[[T], None]) -> bool:
        if not self.is_current(token):
            logger.debug("dropping stale result for token %s (current %s)", token, self._current)
            return False
        callback(result)
        return True
