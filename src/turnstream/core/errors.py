"""Custom exception types raised while processing agent streams."""

from __future__ import annotations


class StreamError(RuntimeError):
    """Raised when the upstream agent reports a fatal ``error`` event."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class StreamTimeoutError(StreamError):
    """Raised when a stream stalls past its absolute or idle deadline."""
