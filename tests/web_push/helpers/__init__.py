"""Test helpers for web_push unit tests."""

from __future__ import annotations

from .mocks import FixedRandom, RecordingTransport, failing_random

__all__ = [
    "FixedRandom",
    "RecordingTransport",
    "failing_random",
]
