from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
for entry in (SRC, ROOT):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))

from turnstream import StreamProcessorConfig  # noqa: E402


@pytest.fixture
def base_config() -> StreamProcessorConfig:
    """Processor config shared by most streaming tests."""

    return StreamProcessorConfig(session_id="test-session", message_id="test-message")
