"""Output schemas and sinks for processed streams."""

from .interfaces import SegmentSink
from .schema import MessageSegment

__all__ = [
    "MessageSegment",
    "SegmentSink",
]
