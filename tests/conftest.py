"""Shared fixtures for httpscript tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent))

from fixtures.clock import FakeClock
from httpscript.sink import BufferedSink


@pytest.fixture
def fake_clock() -> FakeClock:
    """A clock whose sleeps return immediately."""
    return FakeClock()


@pytest.fixture
def sink() -> BufferedSink:
    """An in-memory response sink."""
    return BufferedSink()
