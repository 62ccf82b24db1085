"""Async processing loop folding agent stream events into a single result."""

from __future__ import annotations

import inspect
import logging
from collections.abc import AsyncIterable
from typing import Any

from turnstream.config import StreamProcessorConfig
from turnstream.core.errors import StreamError
from turnstream.core.events import (
    CompleteEvent,
    ErrorEvent,
    MessageEvent,
    ResultData,
    ResultEvent,
    SessionInitEvent,
    StreamEvent,
    ThinkingEvent,
    ToolProgressEvent,
    ToolResultEvent,
    ToolUseData,
    ToolUseEvent,
    event_type_of,
    parse_event,
)

from .hooks import StreamEventHooks, invoke_hook
from .state import StreamAccumulator, StreamResult, StreamState


LOGGER = logging.getLogger(__name__)

UNKNOWN_ERROR = "Unknown error"


async def process_stream(
    events: AsyncIterable[Any],
    config: StreamProcessorConfig,
    hooks: StreamEventHooks | None = None,
) -> StreamResult:
    """Consume ``events`` and return the accumulated :class:`StreamResult`.

    Hooks fire in event order and each one is awaited before the next event is
    requested. The run ends when the source is exhausted, a ``complete`` event
    arrives, or ``config.abort_signal`` reports ``aborted`` when the next event
    is pulled. An ``error`` event raises :class:`StreamError` after
    ``on_error`` has observed the message; no result is produced in that case.
    Exceptions raised by hooks propagate unchanged.
    """

    hooks = hooks or StreamEventHooks()
    try:
        accumulator, state = await _consume(events, config, hooks)
    except StreamError as exc:
        LOGGER.info("stream session=%s errored: %s", config.session_id, exc)
        raise
    except Exception:
        LOGGER.debug("stream session=%s interrupted", config.session_id, exc_info=True)
        raise
    finally:
        if config.close_source:
            await _close_source(events)

    if state is StreamState.ABORTED:
        LOGGER.info(
            "stream session=%s aborted content_length=%s",
            config.session_id,
            len(accumulator.content),
        )
        return accumulator.to_result(was_aborted=True)

    if accumulator.content:
        await invoke_hook(hooks.on_final_content, accumulator.content)

    LOGGER.info(
        "stream session=%s completed content_length=%s cost=%s",
        config.session_id,
        len(accumulator.content),
        accumulator.cost,
    )
    return accumulator.to_result(was_aborted=False)


async def _consume(
    events: AsyncIterable[Any],
    config: StreamProcessorConfig,
    hooks: StreamEventHooks,
) -> tuple[StreamAccumulator, StreamState]:
    accumulator = StreamAccumulator()
    state = StreamState.STREAMING

    async for raw in events:
        if config.abort_signal is not None and config.abort_signal.aborted:
            return accumulator, StreamState.ABORTED

        event_type = event_type_of(raw)
        await invoke_hook(config.on_stream_activity, event_type)

        event = parse_event(raw)
        if event is None:
            continue

        LOGGER.debug("stream session=%s event=%s", config.session_id, event_type)
        accumulator, state = await _handle_event(event, accumulator, config, hooks)
        if state.terminal:
            break

    return accumulator, state


async def _handle_event(
    event: StreamEvent,
    accumulator: StreamAccumulator,
    config: StreamProcessorConfig,
    hooks: StreamEventHooks,
) -> tuple[StreamAccumulator, StreamState]:
    if isinstance(event, MessageEvent):
        accumulator = await _handle_message(event, accumulator, hooks)
    elif isinstance(event, ResultEvent):
        accumulator = await _handle_result(event, accumulator, config, hooks)
    elif isinstance(event, SessionInitEvent):
        accumulator = await _handle_session_init(event, accumulator, hooks)
    elif isinstance(event, ToolUseEvent):
        await _handle_tool_use(event, hooks)
    elif isinstance(event, ToolProgressEvent):
        await invoke_hook(hooks.on_tool_progress, event.data)
    elif isinstance(event, ToolResultEvent):
        await invoke_hook(hooks.on_tool_result, event.data)
    elif isinstance(event, ThinkingEvent):
        if event.data.content:
            await invoke_hook(hooks.on_thinking, event.data.content)
    elif isinstance(event, CompleteEvent):
        await invoke_hook(hooks.on_complete)
        return accumulator, StreamState.COMPLETED
    elif isinstance(event, ErrorEvent):
        message = event.content or UNKNOWN_ERROR
        await invoke_hook(hooks.on_error, message)
        raise StreamError(message)
    else:  # pragma: no cover - defensive branch for future event types
        LOGGER.debug("Unhandled event type: %s", type(event).__name__)

    return accumulator, StreamState.STREAMING


async def _handle_message(
    event: MessageEvent,
    accumulator: StreamAccumulator,
    hooks: StreamEventHooks,
) -> StreamAccumulator:
    if not event.content:
        return accumulator

    accumulator = accumulator.with_message(event.content)
    await invoke_hook(hooks.on_message_chunk, event.content, accumulator.content)
    await invoke_hook(hooks.on_streaming_emit, accumulator.content)
    return accumulator


async def _handle_result(
    event: ResultEvent,
    accumulator: StreamAccumulator,
    config: StreamProcessorConfig,
    hooks: StreamEventHooks,
) -> StreamAccumulator:
    data = event.data
    if config.capture_result_text and isinstance(data.result, str) and data.result:
        merged = accumulator.with_result_text(data.result)
        if merged.content != accumulator.content:
            accumulator = merged
            await invoke_hook(hooks.on_streaming_emit, accumulator.content)

    cost = data.cost if data.cost is not None else event.total_cost_usd
    accumulator = accumulator.with_cost(cost)

    # The hook sees the raw event values, not the merged outcome.
    await invoke_hook(hooks.on_result, ResultData(cost=data.cost, result=data.result))
    return accumulator


async def _handle_session_init(
    event: SessionInitEvent,
    accumulator: StreamAccumulator,
    hooks: StreamEventHooks,
) -> StreamAccumulator:
    claude_session_id = event.data.claude_session_id
    if not claude_session_id:
        return accumulator

    accumulator = accumulator.with_session_id(claude_session_id)
    await invoke_hook(hooks.on_session_init, event.data)
    return accumulator


async def _handle_tool_use(event: ToolUseEvent, hooks: StreamEventHooks) -> None:
    data = event.data
    if not (data.tool_use_id and data.tool_name):
        LOGGER.debug("Dropping tool_use event without id or name")
        return

    await invoke_hook(
        hooks.on_tool_use,
        ToolUseData(
            tool_use_id=data.tool_use_id,
            tool_name=data.tool_name,
            input=data.input,
            parent_tool_use_id=data.parent_tool_use_id,
        ),
    )


async def _close_source(events: Any) -> None:
    for closer_name in ("aclose", "close"):
        closer = getattr(events, closer_name, None)
        if closer is None or not callable(closer):
            continue
        result = closer()
        if inspect.isawaitable(result):
            await result
        return


__all__ = ["UNKNOWN_ERROR", "process_stream"]
