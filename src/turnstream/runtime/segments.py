"""Split a run's accumulated output into separate assistant messages.

When an agent calls a tool between two bursts of text, presenting everything
as one message places the tool after the whole response. :class:`SegmentingHooks`
instead finalizes the text streamed so far as soon as new content follows a
tool call, and continues in a fresh message, so tool activity lands between
the segments.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional
from uuid import uuid4

from turnstream.config import StreamProcessorConfig
from turnstream.core.events import ToolUseData
from turnstream.io.interfaces import SegmentSink
from turnstream.io.schema import MessageSegment

from .hooks import StreamEventHooks


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


def _new_message_id() -> str:
    return f"msg-{uuid4().hex}"


@dataclass(slots=True, frozen=True)
class FinalSegment:
    """Where the last segment of a run lives inside the accumulated content."""

    message_id: str
    start_offset: int
    created_at: datetime
    was_split: bool


class SegmentingHooks:
    """Stateful hook set writing :class:`MessageSegment` updates to a sink."""

    def __init__(
        self,
        sink: SegmentSink,
        *,
        session_id: str,
        message_id: str,
        created_at: Optional[datetime] = None,
        id_factory: Callable[[], str] = _new_message_id,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._sink = sink
        self._session_id = session_id
        self._id_factory = id_factory
        self._clock = clock

        self._message_id = message_id
        self._created_at = created_at or clock()
        self._start_offset = 0
        self._emitted_length = 0
        self._pending_split = False
        self._was_split = False
        self._tool_segments: dict[str, str] = {}

    @classmethod
    def from_config(
        cls,
        sink: SegmentSink,
        config: StreamProcessorConfig,
        *,
        id_factory: Callable[[], str] = _new_message_id,
        clock: Callable[[], datetime] = _utcnow,
    ) -> SegmentingHooks:
        """Start segmenting from the message announced in ``config``."""

        return cls(
            sink,
            session_id=config.session_id,
            message_id=config.message_id,
            created_at=config.created_at,
            id_factory=id_factory,
            clock=clock,
        )

    @property
    def tool_segments(self) -> dict[str, str]:
        """Map of tool-use id to the id of the segment it followed."""

        return dict(self._tool_segments)

    def as_hooks(self) -> StreamEventHooks:
        return StreamEventHooks(
            on_tool_use=self.on_tool_use,
            on_streaming_emit=self.on_streaming_emit,
            on_final_content=self.on_final_content,
        )

    def final_segment(self) -> FinalSegment:
        return FinalSegment(
            message_id=self._message_id,
            start_offset=self._start_offset,
            created_at=self._created_at,
            was_split=self._was_split,
        )

    def on_tool_use(self, data: ToolUseData) -> None:
        if data.tool_use_id:
            self._tool_segments[data.tool_use_id] = self._message_id
        self._pending_split = True

    def on_streaming_emit(self, accumulated: str) -> None:
        if self._pending_split and len(accumulated) > self._emitted_length:
            previous = accumulated[self._start_offset : self._emitted_length].strip()
            if previous:
                self._write(previous, streaming=False)

            self._message_id = self._id_factory()
            self._created_at = self._clock()
            self._start_offset = self._emitted_length
            self._pending_split = False
            self._was_split = True

        content = accumulated[self._start_offset :].lstrip()
        if content or self._start_offset == 0:
            self._write(content, streaming=True)

        self._emitted_length = len(accumulated)

    def on_final_content(self, content: str) -> None:
        text = content[self._start_offset :].strip()
        if text or self._start_offset == 0:
            self._write(text, streaming=False)
        self._sink.flush()

    def _write(self, content: str, *, streaming: bool) -> None:
        self._sink.write(
            MessageSegment(
                message_id=self._message_id,
                session_id=self._session_id,
                content=content,
                created_at=self._created_at,
                streaming=streaming,
            )
        )


__all__ = ["FinalSegment", "SegmentingHooks"]
