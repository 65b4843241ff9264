"""Composition scoring against golden-ratio guides."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional, Protocol, Tuple

import cv2
import numpy as np

from frame_source import Frame
from subject_profiles import SubjectCategory

GOLDEN_RATIO = 0.618

FRAMING_WEIGHT = 0.4
EXPOSURE_WEIGHT = 0.3
SUBJECT_WEIGHT = 0.3

# Haar cascade detection window
MIN_FACE_FRAME_PX = 24
# Eyes sit this far down a frontal face box
EYE_LINE_RATIO = 0.4

_face_cascade = cv2.CascadeClassifier(cv2.data.haarcascades + "haarcascade_frontalface_default.xml")

# BGR channel order
_LUMA_WEIGHTS = np.array([0.114, 0.587, 0.299], dtype=np.float32)


@dataclass
class GuideLines:
    frame_size: Tuple[int, int]
    verticals: Tuple[int, int]
    horizontals: Tuple[int, int]

    @property
    def points(self) -> Tuple[Tuple[int, int], ...]:
        return tuple((x, y) for y in self.horizontals for x in self.verticals)


def golden_ratio_lines(width: int, height: int) -> GuideLines:
    return GuideLines(
        frame_size=(width, height),
        verticals=(int(width * (1 - GOLDEN_RATIO)), int(width * GOLDEN_RATIO)),
        horizontals=(int(height * (1 - GOLDEN_RATIO)), int(height * GOLDEN_RATIO)),
    )


class CompositionScorer(Protocol):
    def score(self, frame: Frame, category: SubjectCategory) -> float:
        ...


class HeuristicScorer:
    """Approximate composition quality from framing, exposure and subject cues.

    The framing factor rewards frames whose gradient mass centres on a
    golden-ratio intersection, the exposure factor rewards a mid-grey mean.
    People frames add a face-position term and landscapes a horizon term.
    ``jitter`` adds bounded random noise to mimic an unstable detector.
    """

    def __init__(self, jitter: float = 0.0, rng: Optional[random.Random] = None) -> None:
        self.jitter = max(0.0, jitter)
        self._rng = rng or random.Random()

    def score(self, frame: Frame, category: SubjectCategory) -> float:
        gray = _luminance(frame.pixels)
        if gray.size == 0:
            return 0.0

        height, width = gray.shape
        lines = golden_ratio_lines(width, height)

        score = FRAMING_WEIGHT * framing_factor(gray, lines)
        score += EXPOSURE_WEIGHT * exposure_factor(gray)

        if category is SubjectCategory.PEOPLE:
            score += SUBJECT_WEIGHT * estimate_face_position(gray, lines)
        elif category is SubjectCategory.LANDSCAPE:
            score += SUBJECT_WEIGHT * estimate_horizon_position(gray, lines)

        if self.jitter:
            score += self._rng.uniform(0.0, self.jitter)

        return min(1.0, max(0.0, score))


def framing_factor(gray: np.ndarray, lines: GuideLines) -> float:
    height, width = gray.shape
    if height < 2 or width < 2:
        return 0.0

    grad_y, grad_x = np.gradient(gray)
    magnitude = np.hypot(grad_x, grad_y)
    total = float(magnitude.sum())
    if total <= 1e-6:
        return 0.0

    cx = float((magnitude.sum(axis=0) * np.arange(width)).sum()) / total
    cy = float((magnitude.sum(axis=1) * np.arange(height)).sum()) / total

    nearest = min(np.hypot(cx - px, cy - py) for px, py in lines.points)
    # Corner-to-nearest-point distance is the worst case
    reach = (1 - GOLDEN_RATIO) * np.hypot(width, height)
    return _closeness(nearest, reach)


def exposure_factor(gray: np.ndarray) -> float:
    mean = float(gray.mean())
    return float(np.clip(1.0 - 2.0 * abs(mean - 0.5), 0.0, 1.0))


def estimate_face_position(gray: np.ndarray, lines: GuideLines) -> float:
    if min(gray.shape) < MIN_FACE_FRAME_PX:
        return 0.0

    eye_line = find_eye_line(_to_uint8(gray))
    if eye_line is None:
        return 0.0

    height = lines.frame_size[1]
    return _closeness(abs(eye_line - lines.horizontals[0]), (1 - GOLDEN_RATIO) * height)


def find_eye_line(gray: np.ndarray) -> Optional[float]:
    """Row of the eyes on the largest frontal face in a uint8 grayscale frame."""

    faces = _face_cascade.detectMultiScale(cv2.equalizeHist(gray), scaleFactor=1.1, minNeighbors=5)
    if len(faces) == 0:
        return None

    _, y, _, h = max(faces, key=lambda rect: rect[2] * rect[3])
    return float(y + h * EYE_LINE_RATIO)


def estimate_horizon_position(gray: np.ndarray, lines: GuideLines) -> float:
    height = gray.shape[0]
    if height < 3:
        return 0.0

    row_means = gray.mean(axis=1)
    steps = np.abs(np.diff(row_means))
    if float(steps.max()) <= 1e-3:
        return 0.0

    horizon = float(np.argmax(steps)) + 0.5
    return _closeness(abs(horizon - lines.horizontals[1]), (1 - GOLDEN_RATIO) * height)


def _closeness(distance: float, reach: float) -> float:
    if reach <= 0:
        return 0.0
    return float(1.0 - min(1.0, distance / reach))


def _luminance(pixels: np.ndarray) -> np.ndarray:
    """Normalised [0, 1] luminance without touching the input buffer."""

    values = pixels.astype(np.float32)
    if np.issubdtype(pixels.dtype, np.integer):
        values /= 255.0

    if values.ndim == 3:
        if values.shape[2] >= 3:
            values = values[..., :3] @ _LUMA_WEIGHTS
        else:
            values = values[..., 0]

    return np.clip(values, 0.0, 1.0)


def _to_uint8(gray: np.ndarray) -> np.ndarray:
    return np.ascontiguousarray((gray * 255.0).round().astype(np.uint8))
