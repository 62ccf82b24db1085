"""Abstract interfaces for stream output sinks."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .schema import MessageSegment


class SegmentSink(ABC):
    """Destination for :class:`MessageSegment` updates."""

    @abstractmethod
    def write(self, segment: MessageSegment) -> None:
        """Publish a new or updated segment."""

    @abstractmethod
    def flush(self) -> None:
        """Ensure all buffered segments are visible to consumers."""


__all__ = ["SegmentSink"]
