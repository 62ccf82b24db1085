"""Concrete sink and source implementations."""

from .jsonl import JsonlSegmentSink, MemorySegmentSink, iter_jsonl_events

__all__ = [
    "JsonlSegmentSink",
    "MemorySegmentSink",
    "iter_jsonl_events",
]
