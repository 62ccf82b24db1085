"""Async processing loop, hooks and helpers for agent event streams."""

from .hooks import StreamEventHooks, invoke_hook
from .loop import process_stream
from .segments import FinalSegment, SegmentingHooks
from .state import StreamAccumulator, StreamResult, StreamState
from .timeout import (
    IdleTimeout,
    process_with_idle_timeout,
    stream_timeout_message,
    with_timeout,
)

__all__ = [
    "FinalSegment",
    "IdleTimeout",
    "SegmentingHooks",
    "StreamAccumulator",
    "StreamEventHooks",
    "StreamResult",
    "StreamState",
    "invoke_hook",
    "process_stream",
    "process_with_idle_timeout",
    "stream_timeout_message",
    "with_timeout",
]
