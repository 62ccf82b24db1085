from __future__ import annotations

import asyncio

import turnstream
from turnstream import StreamEventHooks, StreamProcessorConfig, process_stream


def test_top_level_exports() -> None:
    for name in turnstream.__all__:
        assert hasattr(turnstream, name), name
    assert turnstream.__version__ == "0.1.0"


def test_readme_example_round_trip() -> None:
    emitted: list[str] = []

    async def events():
        yield {"type": "session_init", "data": {"claudeSessionId": "claude-123"}}
        yield {"type": "message", "content": "Hello"}
        yield {"type": "message", "content": "World"}
        yield {"type": "result", "data": {"cost": 0.002}}
        yield {"type": "complete"}

    config = StreamProcessorConfig.create("session-1")
    hooks = StreamEventHooks(on_streaming_emit=emitted.append)
    result = asyncio.run(process_stream(events(), config, hooks))

    assert result.content == "Hello World"
    assert result.claude_session_id == "claude-123"
    assert result.cost == 0.002
    assert emitted == ["Hello", "Hello World"]
