"""Accumulator state and merge rules for a single processing run."""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Any, Optional


class StreamState(str, Enum):
    """Lifecycle of one :func:`process_stream` invocation."""

    STREAMING = "streaming"
    COMPLETED = "completed"
    ABORTED = "aborted"
    ERRORED = "errored"

    @property
    def terminal(self) -> bool:
        return self is not StreamState.STREAMING


def append_message(accumulated: str, content: str) -> str:
    """Append a message chunk, joining prose chunks with a single space.

    No separator is inserted when the accumulator is empty or already ends
    with a newline.
    """

    if not accumulated:
        return content
    if accumulated.endswith("\n"):
        return accumulated + content
    return f"{accumulated} {content}"


def merge_result_text(accumulated: str, text: str) -> str:
    """Fold result text in as its own block, at most once.

    Result text usually repeats or extends what was already streamed, so it is
    skipped when the accumulator already contains it verbatim.
    """

    if text in accumulated:
        return accumulated
    if not accumulated:
        return text
    if accumulated.endswith("\n"):
        return accumulated + text
    return f"{accumulated}\n{text}"


@dataclass(slots=True, frozen=True)
class StreamResult:
    """Summary returned once a stream completes or is aborted."""

    content: str
    was_aborted: bool
    claude_session_id: Optional[str] = None
    cost: Optional[float] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True, frozen=True)
class StreamAccumulator:
    """Immutable fold value threaded through the processing loop."""

    content: str = ""
    claude_session_id: Optional[str] = None
    cost: Optional[float] = None

    def with_message(self, content: str) -> StreamAccumulator:
        return replace(self, content=append_message(self.content, content))

    def with_result_text(self, text: str) -> StreamAccumulator:
        merged = merge_result_text(self.content, text)
        if merged == self.content:
            return self
        return replace(self, content=merged)

    def with_session_id(self, claude_session_id: str) -> StreamAccumulator:
        # The first announced session wins.
        if self.claude_session_id or not claude_session_id:
            return self
        return replace(self, claude_session_id=claude_session_id)

    def with_cost(self, cost: Optional[float]) -> StreamAccumulator:
        if cost is None:
            return self
        return replace(self, cost=cost)

    def to_result(self, *, was_aborted: bool) -> StreamResult:
        return StreamResult(
            content=self.content,
            was_aborted=was_aborted,
            claude_session_id=self.claude_session_id,
            cost=self.cost,
        )


__all__ = [
    "StreamAccumulator",
    "StreamResult",
    "StreamState",
    "append_message",
    "merge_result_text",
]
