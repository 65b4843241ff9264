"""Shared pytest configuration and fixtures for the capture scheduler tests."""

import random
import sys
from pathlib import Path
from typing import List, Optional

import numpy as np
import pytest

# Ensure the project root is in the path for imports
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from capture_scheduler import CaptureEvent, CaptureScheduler  # noqa: E402
from frame_source import Frame  # noqa: E402


# =============================================================================
# Test doubles
# =============================================================================

class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, start_ms: int = 0) -> None:
        self.now_ms = start_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, ms: int) -> None:
        self.now_ms += ms


class StaticFrameSource:
    def __init__(self, frame: Optional[Frame]) -> None:
        self.frame = frame
        self.reads = 0

    def current_frame(self) -> Optional[Frame]:
        self.reads += 1
        return self.frame


class FixedScorer:
    def __init__(self, value: float) -> None:
        self.value = value
        self.calls = 0

    def score(self, frame, category) -> float:
        self.calls += 1
        return self.value


class RecordingCaptureSink:
    def __init__(self) -> None:
        self.events: List[CaptureEvent] = []

    def on_capture_requested(self, event: CaptureEvent) -> None:
        self.events.append(event)


class RecordingHintSink:
    def __init__(self) -> None:
        self.texts: List[str] = []

    def on_hint_changed(self, text: str) -> None:
        self.texts.append(text)


def run_for(scheduler: CaptureScheduler, clock: FakeClock, duration_ms: int, step_ms: int = 50) -> None:
    """Advance the clock in steps, polling after each one."""
    elapsed = 0
    while elapsed < duration_ms:
        clock.advance(step_ms)
        elapsed += step_ms
        scheduler.poll()


# =============================================================================
# Shared Fixtures
# =============================================================================

@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def frame() -> Frame:
    pixels = np.full((48, 64, 3), 128, dtype=np.uint8)
    return Frame.from_array(pixels)


@pytest.fixture
def frame_source(frame) -> StaticFrameSource:
    return StaticFrameSource(frame)


@pytest.fixture
def scorer() -> FixedScorer:
    return FixedScorer(0.9)


@pytest.fixture
def capture_sink() -> RecordingCaptureSink:
    return RecordingCaptureSink()


@pytest.fixture
def hint_sink() -> RecordingHintSink:
    return RecordingHintSink()


@pytest.fixture
def scheduler(frame_source, scorer, capture_sink, hint_sink, clock) -> CaptureScheduler:
    return CaptureScheduler(
        frame_source,
        scorer,
        capture_sink,
        hint_sink,
        clock=clock,
        rng=random.Random(7),
    )
