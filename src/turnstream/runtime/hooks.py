"""Optional callbacks fired while a stream is processed."""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Optional

from turnstream.core.events import (
    ResultData,
    SessionInitData,
    ToolProgressData,
    ToolResultData,
    ToolUseData,
)

Hook = Callable[..., Any]


@dataclass(slots=True)
class StreamEventHooks:
    """Independently optional hooks, each either sync or async.

    Async hooks are awaited before the next event is pulled from the source,
    so a slow consumer throttles the stream.
    """

    on_session_init: Optional[Callable[[SessionInitData], Any]] = None
    on_tool_use: Optional[Callable[[ToolUseData], Any]] = None
    on_tool_progress: Optional[Callable[[ToolProgressData], Any]] = None
    on_tool_result: Optional[Callable[[ToolResultData], Any]] = None
    on_thinking: Optional[Callable[[str], Any]] = None
    on_result: Optional[Callable[[ResultData], Any]] = None
    on_complete: Optional[Callable[[], Any]] = None
    on_error: Optional[Callable[[str], Any]] = None
    on_message_chunk: Optional[Callable[[str, str], Any]] = None
    on_streaming_emit: Optional[Callable[[str], Any]] = None
    on_final_content: Optional[Callable[[str], Any]] = None


async def invoke_hook(hook: Optional[Hook], *args: Any) -> None:
    """Call ``hook`` when present, awaiting its result if it is awaitable."""

    if hook is None:
        return
    result = hook(*args)
    if inspect.isawaitable(result):
        await result


__all__ = ["Hook", "StreamEventHooks", "invoke_hook"]
