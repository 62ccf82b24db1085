"""Canonical stream event schema emitted by an agent run.

Upstream events are untrusted: any nested payload may be missing, ``null`` or
partially populated. The models below therefore make every payload field
optional and leave the decision about which fields are *required* to the
processor. Raw events are plain mappings keyed by ``type``; payload keys use the
upstream camelCase spelling, although snake_case is accepted as well.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    ValidationError,
    ValidatorFunctionWrapHandler,
    WrapValidator,
)
from pydantic.alias_generators import to_camel

LOGGER = logging.getLogger(__name__)


class EventType(str, Enum):
    """Discriminator tags understood by the stream processor."""

    SESSION_INIT = "session_init"
    MESSAGE = "message"
    TOOL_USE = "tool_use"
    TOOL_PROGRESS = "tool_progress"
    TOOL_RESULT = "tool_result"
    THINKING = "thinking"
    RESULT = "result"
    COMPLETE = "complete"
    ERROR = "error"


def _text_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _payload_or_empty(value: Any) -> Any:
    return {} if value is None else value


def _none_if_invalid(value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
    try:
        return handler(value)
    except ValidationError:
        return None


# Non-string text is treated as absent rather than failing the whole event.
Text = Annotated[Optional[str], BeforeValidator(_text_or_none)]
# Optional scalars that fail coercion are dropped so the rest of the event survives.
Identifier = Annotated[Optional[str], WrapValidator(_none_if_invalid)]
Number = Annotated[Optional[float], WrapValidator(_none_if_invalid)]


class _Payload(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class SessionInitData(_Payload):
    """Upstream session identity announced at the start of a run."""

    claude_session_id: Text = None


class ToolUseData(_Payload):
    """A tool invocation announced by the agent."""

    tool_use_id: Identifier = None
    tool_name: Identifier = None
    input: Any = None
    parent_tool_use_id: Identifier = None


class ToolProgressData(_Payload):
    """Heartbeat for a tool that is still running."""

    tool_use_id: Identifier = None
    tool_name: Identifier = None
    elapsed_seconds: Number = None


class ToolResultData(_Payload):
    """Output produced by a completed tool invocation."""

    tool_use_id: Identifier = None
    output: Any = None
    error: Text = None
    timestamp: Number = None


class ThinkingData(_Payload):
    content: Text = None


class ResultData(_Payload):
    """Final run summary. ``result`` may carry sub-agent output."""

    cost: Number = None
    result: Any = None


class _Event(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class SessionInitEvent(_Event):
    type: Literal["session_init"] = "session_init"
    data: Annotated[SessionInitData, BeforeValidator(_payload_or_empty)] = SessionInitData()


class MessageEvent(_Event):
    """Incremental assistant text."""

    type: Literal["message"] = "message"
    content: Text = None


class ToolUseEvent(_Event):
    type: Literal["tool_use"] = "tool_use"
    data: Annotated[ToolUseData, BeforeValidator(_payload_or_empty)] = ToolUseData()


class ToolProgressEvent(_Event):
    type: Literal["tool_progress"] = "tool_progress"
    data: Annotated[ToolProgressData, BeforeValidator(_payload_or_empty)] = ToolProgressData()


class ToolResultEvent(_Event):
    type: Literal["tool_result"] = "tool_result"
    data: Annotated[ToolResultData, BeforeValidator(_payload_or_empty)] = ToolResultData()


class ThinkingEvent(_Event):
    """A fragment of the agent's reasoning trace."""

    type: Literal["thinking"] = "thinking"
    data: Annotated[ThinkingData, BeforeValidator(_payload_or_empty)] = ThinkingData()


class ResultEvent(_Event):
    """Terminal result carrying cost and, optionally, result text."""

    type: Literal["result"] = "result"
    data: Annotated[ResultData, BeforeValidator(_payload_or_empty)] = ResultData()
    total_cost_usd: Number = None


class CompleteEvent(_Event):
    type: Literal["complete"] = "complete"


class ErrorEvent(_Event):
    """Fatal upstream failure."""

    type: Literal["error"] = "error"
    content: Text = None


StreamEvent = Union[
    SessionInitEvent,
    MessageEvent,
    ToolUseEvent,
    ToolProgressEvent,
    ToolResultEvent,
    ThinkingEvent,
    ResultEvent,
    CompleteEvent,
    ErrorEvent,
]

_EVENT_MODELS: dict[str, type[_Event]] = {
    EventType.SESSION_INIT.value: SessionInitEvent,
    EventType.MESSAGE.value: MessageEvent,
    EventType.TOOL_USE.value: ToolUseEvent,
    EventType.TOOL_PROGRESS.value: ToolProgressEvent,
    EventType.TOOL_RESULT.value: ToolResultEvent,
    EventType.THINKING.value: ThinkingEvent,
    EventType.RESULT.value: ResultEvent,
    EventType.COMPLETE.value: CompleteEvent,
    EventType.ERROR.value: ErrorEvent,
}

UNKNOWN_EVENT_TYPE = "unknown"


def event_type_of(raw: Any) -> str:
    """Return the ``type`` tag of a raw or parsed event without validating it."""

    if isinstance(raw, Mapping):
        tag = raw.get("type")
    else:
        tag = getattr(raw, "type", None)

    if isinstance(tag, Enum):
        tag = tag.value
    if isinstance(tag, str) and tag:
        return tag
    return UNKNOWN_EVENT_TYPE


def parse_event(raw: Any) -> StreamEvent | None:
    """Normalize ``raw`` into a :data:`StreamEvent`.

    Returns ``None`` when the event cannot be understood: an unknown ``type``
    tag, a payload of the wrong shape, or an object that is not mapping-like.
    Parsed model instances are returned unchanged.
    """

    if isinstance(raw, _Event):
        return raw  # type: ignore[return-value]

    mapping = _coerce_mapping(raw)
    if mapping is None:
        LOGGER.warning("Dropping stream event of unsupported type %s", type(raw).__name__)
        return None

    tag = event_type_of(mapping)
    model = _EVENT_MODELS.get(tag)
    if model is None:
        LOGGER.debug("Ignoring unrecognised stream event type %r", tag)
        return None

    try:
        return model.model_validate({**mapping, "type": tag})  # type: ignore[return-value]
    except ValidationError as exc:
        LOGGER.warning(
            "Dropping malformed %s event (%s validation errors)",
            tag,
            exc.error_count(),
        )
        return None


def _coerce_mapping(item: Any) -> Mapping[str, Any] | None:
    if isinstance(item, Mapping):
        return item

    if hasattr(item, "model_dump"):
        result = item.model_dump()
        if isinstance(result, Mapping):
            return result

    return None


__all__ = [
    "CompleteEvent",
    "ErrorEvent",
    "EventType",
    "MessageEvent",
    "ResultData",
    "ResultEvent",
    "SessionInitData",
    "SessionInitEvent",
    "StreamEvent",
    "ThinkingData",
    "ThinkingEvent",
    "ToolProgressData",
    "ToolProgressEvent",
    "ToolResultData",
    "ToolResultEvent",
    "ToolUseData",
    "ToolUseEvent",
    "event_type_of",
    "parse_event",
]
