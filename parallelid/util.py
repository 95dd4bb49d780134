"""
Utility functions for ParallelID.

Provides time sources and base64 helpers shared by the registry,
the signing helpers and the command line.
"""

import base64
import time
from typing import Optional


def now_epoch() -> int:
    """Get current Unix timestamp as integer."""
    return int(time.time())


class ManualClock:
    """
    Clock whose current time is set explicitly by the caller.

    Registries accept any zero-argument callable returning Unix seconds;
    this one lets hosts (and tests) decide what "now" is.
    """

    def __init__(self, start: Optional[int] = None):
        self._now = now_epoch() if start is None else int(start)

    def __call__(self) -> int:
        return self._now

    def set(self, timestamp: int) -> None:
        self._now = int(timestamp)

    def advance(self, seconds: int) -> int:
        """Move time forward and return the new current time."""
        if seconds < 0:
            raise ValueError("Clock cannot move backwards")
        self._now += int(seconds)
        return self._now


def b64e(b: bytes) -> str:
    """Base64 encode bytes to string."""
    return base64.b64encode(b).decode('ascii')


def b64d(s: str) -> bytes:
    """Base64 decode string to bytes."""
    return base64.b64decode(s.encode('ascii'), validate=True)
