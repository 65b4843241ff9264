"""Capture-decision scheduler.

Samples frames at the cadence of the current subject profile, scores them and
fires automatic captures, with a cool-down after each one. A separate hint
channel rotates coaching tips and shows feedback after manual shots.

All timers are deadlines checked by :meth:`CaptureScheduler.poll`, which the
owning loop calls as often as it likes. There is one slot for the capture
timer (sampling or cool-down, never both) and one each for hint rotation and
the feedback window, so re-arming a timer always replaces the previous one.
"""

from __future__ import annotations

import enum
import logging
import random
import time
from dataclasses import dataclass, replace
from typing import Callable, Optional, Protocol

from composition import CompositionScorer
from frame_source import Frame, FrameSource
from subject_profiles import (
    COMBINED_MODE_MESSAGE,
    FEEDBACK_MESSAGES,
    SubjectCategory,
    SubjectProfile,
    profile_for,
)

logger = logging.getLogger(__name__)


class CaptureMode(enum.Enum):
    MANUAL = "manual"
    AUTO = "auto"
    COMBINED = "combined"


AUTOMATIC_MODES = frozenset({CaptureMode.AUTO, CaptureMode.COMBINED})


class SchedulerPhase(enum.Enum):
    IDLE = "idle"
    SAMPLING = "sampling"
    DEBOUNCING = "debouncing"


class CaptureTrigger(enum.Enum):
    AUTO = "auto"
    MANUAL = "manual"


@dataclass(frozen=True)
class CaptureEvent:
    frame: Frame
    trigger: CaptureTrigger
    timestamp_ms: int
    score: Optional[float] = None


class CaptureSink(Protocol):
    def on_capture_requested(self, event: CaptureEvent) -> None:
        ...


class HintSink(Protocol):
    def on_hint_changed(self, text: str) -> None:
        ...


@dataclass
class SchedulerConfig:
    debounce_ms: int = 2000
    feedback_ms: int = 3000


@dataclass(frozen=True)
class Timer:
    """A single armed deadline. ``period_ms`` is set for repeating timers."""

    purpose: SchedulerPhase
    due_ms: int
    period_ms: Optional[int] = None


@dataclass(frozen=True)
class SchedulerState:
    current_mode: CaptureMode
    current_subject: SubjectCategory
    is_sampling: bool
    is_debouncing: bool
    active_timer: Optional[Timer]


def monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


class CaptureScheduler:
    """Owns the sampling/cool-down state machine and the hint rotation."""

    def __init__(
        self,
        frame_source: FrameSource,
        scorer: CompositionScorer,
        capture_sink: CaptureSink,
        hint_sink: Optional[HintSink] = None,
        *,
        config: Optional[SchedulerConfig] = None,
        clock: Callable[[], int] = monotonic_ms,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.frame_source = frame_source
        self.scorer = scorer
        self.capture_sink = capture_sink
        self.hint_sink = hint_sink
        self.config = config or SchedulerConfig()
        self._clock = clock
        self._rng = rng or random.Random()

        self._mode = CaptureMode.MANUAL
        self._subject = SubjectCategory.LANDSCAPE
        self._session_active = False
        self._capture_timer: Optional[Timer] = None
        self._hint_due_ms: Optional[int] = None
        self._feedback_due_ms: Optional[int] = None
        self._hint: Optional[str] = None
        self._last_score: Optional[float] = None

    # Read-only views ---------------------------------------------------

    @property
    def phase(self) -> SchedulerPhase:
        if self._capture_timer is None:
            return SchedulerPhase.IDLE
        return self._capture_timer.purpose

    @property
    def state(self) -> SchedulerState:
        phase = self.phase
        return SchedulerState(
            current_mode=self._mode,
            current_subject=self._subject,
            is_sampling=phase is SchedulerPhase.SAMPLING,
            is_debouncing=phase is SchedulerPhase.DEBOUNCING,
            active_timer=self._capture_timer,
        )

    @property
    def session_active(self) -> bool:
        return self._session_active

    @property
    def profile(self) -> SubjectProfile:
        return profile_for(self._subject)

    @property
    def current_hint(self) -> Optional[str]:
        return self._hint

    @property
    def last_score(self) -> Optional[float]:
        return self._last_score

    @property
    def showing_feedback(self) -> bool:
        return self._feedback_due_ms is not None

    # Session lifecycle -------------------------------------------------

    def start_session(self, mode: CaptureMode, category: SubjectCategory) -> None:
        if self._session_active:
            self.stop_session()

        self._mode = mode
        self._subject = category
        self._session_active = True
        logger.info("Session started: mode=%s subject=%s", mode.value, category.value)

        if mode in AUTOMATIC_MODES:
            self._arm_sampling()
        self._refresh_hint_display()

    def stop_session(self) -> None:
        was_active = self._session_active
        self._session_active = False
        self._cancel_capture_timer()
        self._hint_due_ms = None
        self._feedback_due_ms = None
        self._last_score = None
        if was_active:
            logger.info("Session stopped")

    # Operator inputs ---------------------------------------------------

    def set_subject(self, category: SubjectCategory) -> None:
        self._subject = category
        logger.info(
            "Subject set to %s (%s)", category.value, profile_for(category).camera_settings
        )
        if not self._session_active:
            return

        if self.phase is SchedulerPhase.SAMPLING:
            self._arm_sampling()
        if self._hint_due_ms is not None:
            self._rotate_hint()

    def set_mode(self, mode: CaptureMode) -> None:
        previous = self._mode
        self._mode = mode
        if not self._session_active:
            return

        if mode is CaptureMode.MANUAL:
            self._cancel_capture_timer()
        elif self.phase is SchedulerPhase.IDLE:
            self._arm_sampling()

        if mode is not previous:
            logger.info("Capture mode %s -> %s", previous.value, mode.value)
            self._refresh_hint_display()

    def manual_capture_requested(self) -> Optional[CaptureEvent]:
        if not self._session_active:
            return None

        frame = self.frame_source.current_frame()
        if frame is None:
            logger.debug("Manual capture skipped: no frame available")
            return None

        event = CaptureEvent(frame=frame, trigger=CaptureTrigger.MANUAL, timestamp_ms=self._clock())
        if self._mode is CaptureMode.MANUAL:
            self._show_feedback()
        logger.info("Manual capture emitted")
        self.capture_sink.on_capture_requested(event)
        return event

    # Timer dispatch ----------------------------------------------------

    def poll(self) -> None:
        """Fire every timer whose deadline has passed."""

        if not self._session_active:
            return

        now = self._clock()

        timer = self._capture_timer
        if timer is not None and now >= timer.due_ms:
            if timer.purpose is SchedulerPhase.SAMPLING:
                # Re-arm from now so a late poll never bursts
                self._capture_timer = replace(timer, due_ms=now + timer.period_ms)
                self._evaluate(now)
            else:
                self._cool_down_expired()

        if self._feedback_due_ms is not None and now >= self._feedback_due_ms:
            self._feedback_due_ms = None
            self._refresh_hint_display()
        elif self._hint_due_ms is not None and now >= self._hint_due_ms:
            self._rotate_hint()

    # Capture state machine ---------------------------------------------

    def _evaluate(self, now: int) -> None:
        frame = self.frame_source.current_frame()
        if frame is None:
            logger.debug("Sampling tick skipped: no frame available")
            return

        score = self.scorer.score(frame, self._subject)
        self._last_score = score
        threshold = profile_for(self._subject).score_threshold
        if score < threshold:
            return

        event = CaptureEvent(frame=frame, trigger=CaptureTrigger.AUTO, timestamp_ms=now, score=score)
        # Cool-down is armed before the sink runs; the sink may raise or stop the session
        self._capture_timer = Timer(SchedulerPhase.DEBOUNCING, now + self.config.debounce_ms)
        logger.info("Auto capture at score %.2f (threshold %.2f)", score, threshold)
        logger.debug("Cooling down for %d ms", self.config.debounce_ms)
        self.capture_sink.on_capture_requested(event)

    def _cool_down_expired(self) -> None:
        self._capture_timer = None
        if self._mode in AUTOMATIC_MODES:
            self._arm_sampling()
        else:
            logger.debug("Cool-down over, mode is manual; staying idle")

    def _arm_sampling(self) -> None:
        interval = profile_for(self._subject).sampling_interval_ms
        self._capture_timer = Timer(SchedulerPhase.SAMPLING, self._clock() + interval, interval)
        logger.debug("Sampling every %d ms", interval)

    def _cancel_capture_timer(self) -> None:
        self._capture_timer = None

    # Hint channel ------------------------------------------------------

    def _refresh_hint_display(self) -> None:
        if self._feedback_due_ms is not None:
            return

        if self._mode is CaptureMode.COMBINED:
            self._hint_due_ms = None
            self._display(COMBINED_MODE_MESSAGE)
        else:
            self._rotate_hint()

    def _rotate_hint(self) -> None:
        profile = profile_for(self._subject)
        self._hint_due_ms = self._clock() + profile.hint_rotation_ms
        self._display(self._rng.choice(profile.hints))

    def _show_feedback(self) -> None:
        self._hint_due_ms = None
        self._feedback_due_ms = self._clock() + self.config.feedback_ms
        self._display(self._rng.choice(FEEDBACK_MESSAGES))

    def _display(self, text: str) -> None:
        self._hint = text
        if self.hint_sink is not None:
            self.hint_sink.on_hint_changed(text)
