"""Configuration for a single stream processing run."""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Callable, Optional
from uuid import uuid4

from .core.cancellation import AbortSignal

ActivityListener = Callable[[str], Any]


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


@dataclass(slots=True, frozen=True)
class StreamProcessorConfig:
    """Bookkeeping and behaviour switches for :func:`process_stream`.

    Attributes
    ----------
    session_id:
        Identifier of the chat session the run belongs to.
    message_id:
        Pre-generated identifier of the assistant message being produced, so
        every consumer refers to the same response.
    created_at:
        Pre-generated timestamp of that assistant message.
    capture_result_text:
        Fold the textual payload of ``result`` events into the accumulated
        content. Result text usually carries sub-agent output.
    abort_signal:
        Polled once per event; when it reports ``aborted`` the run stops.
    on_stream_activity:
        Called with the event type for every event consumed, before the event
        is handled. Used to reset idle timeouts.
    close_source:
        Close the event source (``aclose``/``close``) when processing ends.
        By default the source is left to its owner.
    """

    session_id: str
    message_id: str
    created_at: datetime = field(default_factory=_utcnow)
    capture_result_text: bool = True
    abort_signal: Optional[AbortSignal] = None
    on_stream_activity: Optional[ActivityListener] = None
    close_source: bool = False

    @classmethod
    def create(
        cls,
        session_id: str,
        *,
        message_id: str | None = None,
        **overrides: Any,
    ) -> "StreamProcessorConfig":
        """Build a config, generating ``message_id`` when it is not supplied."""

        normalized = session_id.strip()
        if not normalized:
            raise ValueError("session id must not be empty")

        return cls(
            session_id=normalized,
            message_id=message_id or f"msg-{uuid4().hex}",
            **overrides,
        )

    def with_activity_listener(self, listener: ActivityListener) -> "StreamProcessorConfig":
        """Return a copy that also notifies ``listener`` on stream activity.

        The existing ``on_stream_activity`` callback, if any, runs first.
        """

        existing = self.on_stream_activity
        if existing is None:
            return replace(self, on_stream_activity=listener)

        async def _chained(event_type: str) -> None:
            for callback in (existing, listener):
                result = callback(event_type)
                if inspect.isawaitable(result):
                    await result

        return replace(self, on_stream_activity=_chained)


__all__ = ["ActivityListener", "StreamProcessorConfig"]
