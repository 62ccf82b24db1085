"""Newline-delimited JSON adapters for recorded streams and segment output."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Any

from ..interfaces import SegmentSink
from ..schema import MessageSegment


LOGGER = logging.getLogger(__name__)


def _ensure_directory(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


async def iter_jsonl_events(path: Path | str) -> AsyncIterator[dict[str, Any]]:
    """Yield each JSON object of a recorded stream, one per line.

    Blank lines are ignored. Lines that do not decode to a JSON object are
    logged and skipped, matching how the processor treats malformed events.
    """

    source = Path(path)
    with source.open("r", encoding="utf-8") as handle:
        for line_number, line in enumerate(handle, start=1):
            text = line.strip()
            if not text:
                continue
            try:
                payload = json.loads(text)
            except json.JSONDecodeError as exc:
                LOGGER.warning("Skipping undecodable line %s in %s: %s", line_number, source, exc.msg)
                continue
            if not isinstance(payload, dict):
                LOGGER.warning("Skipping non-object line %s in %s", line_number, source)
                continue

            await asyncio.sleep(0)
            yield payload


class JsonlSegmentSink(SegmentSink):
    """Write segments to a JSONL file, one object per write.

    The file is truncated when the sink is created, so each run starts from an
    empty file. Every write is appended and closed immediately.
    """

    def __init__(self, path: Path | str):
        self._path = Path(path)
        _ensure_directory(self._path.parent)
        self._path.write_text("", encoding="utf-8")

    @property
    def path(self) -> Path:
        return self._path

    def write(self, segment: MessageSegment) -> None:
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(segment.model_dump_json())
            handle.write("\n")

    def flush(self) -> None:
        return None


class MemorySegmentSink(SegmentSink):
    """Keep segments in memory for tests and embedding applications."""

    def __init__(self) -> None:
        self._segments: list[MessageSegment] = []

    @property
    def segments(self) -> tuple[MessageSegment, ...]:
        """Every segment update in write order."""

        return tuple(self._segments)

    @property
    def finalized(self) -> tuple[MessageSegment, ...]:
        """Segments written with ``streaming=False``."""

        return tuple(segment for segment in self._segments if not segment.streaming)

    def write(self, segment: MessageSegment) -> None:
        self._segments.append(segment)

    def flush(self) -> None:
        return None

    def __len__(self) -> int:
        return len(self._segments)


__all__ = [
    "JsonlSegmentSink",
    "MemorySegmentSink",
    "iter_jsonl_events",
]
