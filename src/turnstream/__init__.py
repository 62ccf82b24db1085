"""Fold asynchronous agent event streams into deterministic results.

The package exposes :func:`process_stream`, which consumes the events emitted
by an AI-agent run (session lifecycle, incremental text, tool activity,
thinking traces, final result, completion and errors), accumulates the
assistant output and dispatches optional hooks in strict event order. Helpers
for idle timeouts, cancellation and tool-aware message segmentation build on
top of it.
"""

from __future__ import annotations

from .config import StreamProcessorConfig
from .core.cancellation import AbortController, AbortSignal
from .core.errors import StreamError, StreamTimeoutError
from .runtime.hooks import StreamEventHooks
from .runtime.loop import process_stream
from .runtime.state import StreamResult

__all__ = [
    "AbortController",
    "AbortSignal",
    "StreamError",
    "StreamEventHooks",
    "StreamProcessorConfig",
    "StreamResult",
    "StreamTimeoutError",
    "process_stream",
]

__version__ = "0.1.0"
