"""Test harness utilities for stream processing."""

from .stream_harness import HOOK_NAMES, CallLog, TrackingSource, event_stream

__all__ = [
    "HOOK_NAMES",
    "CallLog",
    "TrackingSource",
    "event_stream",
]
