"""Core event schema, cancellation tokens and errors for turnstream."""

from __future__ import annotations

from .cancellation import AbortController, AbortSignal
from .errors import StreamError, StreamTimeoutError
from .events import EventType, StreamEvent, event_type_of, parse_event

__all__ = [
    "AbortController",
    "AbortSignal",
    "EventType",
    "StreamError",
    "StreamEvent",
    "StreamTimeoutError",
    "event_type_of",
    "parse_event",
]
