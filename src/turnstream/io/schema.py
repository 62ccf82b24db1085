"""Schemas for assistant output carved out of a processed stream."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class MessageSegment(BaseModel):
    """One assistant message emitted while, or after, a stream is processed.

    A run's output is split into several segments when the agent uses tools
    between bursts of text, so that tool activity sits between messages.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    message_id: str = Field(..., description="Identifier of the assistant message.")
    session_id: str = Field(..., description="Chat session the message belongs to.")
    content: str = Field(..., description="Text of this segment only.")
    created_at: datetime = Field(..., description="Timestamp at which the segment started.")
    streaming: bool = Field(..., description="False once the segment is final.")
    role: Literal["assistant"] = Field(default="assistant", description="Author role.")


__all__ = ["MessageSegment"]
