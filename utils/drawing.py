"""Helper functions for drawing composition guides and status overlays."""

from __future__ import annotations

from typing import Dict, Optional, Tuple

import cv2
import numpy as np

from capture_scheduler import SchedulerPhase
from composition import GuideLines


def draw_golden_ratio_grid(
    frame: np.ndarray,
    lines: GuideLines,
    *,
    color: Tuple[int, int, int] = (0, 215, 255),
) -> np.ndarray:
    """Draw the golden-ratio guide lines and their intersections."""

    output = frame.copy()
    width, height = lines.frame_size

    for x in lines.verticals:
        cv2.line(output, (x, 0), (x, height), color, 1, cv2.LINE_AA)
    for y in lines.horizontals:
        cv2.line(output, (0, y), (width, y), color, 1, cv2.LINE_AA)
    for point in lines.points:
        cv2.circle(output, point, 4, color, -1, cv2.LINE_AA)

    return output


def draw_hint(frame: np.ndarray, text: Optional[str]) -> np.ndarray:
    """Write the current hint along the bottom edge."""

    output = frame.copy()
    if not text:
        return output

    height = output.shape[0]
    cv2.putText(
        output,
        text,
        (20, height - 20),
        cv2.FONT_HERSHEY_SIMPLEX,
        0.7,
        (255, 255, 255),
        2,
        cv2.LINE_AA,
    )
    return output


# BGR banner colours per scheduler phase; stopped sessions use grey
PHASE_COLORS: Dict[Optional[SchedulerPhase], Tuple[int, int, int]] = {
    SchedulerPhase.IDLE: (48, 63, 159),
    SchedulerPhase.SAMPLING: (46, 125, 50),
    SchedulerPhase.DEBOUNCING: (0, 140, 230),
    None: (90, 90, 90),
}


def draw_status_banner(
    frame: np.ndarray,
    text: str,
    phase: Optional[SchedulerPhase],
    *,
    alpha: float = 0.6,
) -> np.ndarray:
    """Top-left banner tinted by the scheduler phase (``None`` when stopped)."""

    output = frame.copy()
    padding = 12
    text_size, _ = cv2.getTextSize(text, cv2.FONT_HERSHEY_SIMPLEX, 0.8, 2)
    right = text_size[0] + padding * 2
    bottom = text_size[1] + padding * 2

    tinted = output.copy()
    cv2.rectangle(tinted, (0, 0), (right, bottom), PHASE_COLORS[phase], -1)
    output = cv2.addWeighted(tinted, alpha, output, 1 - alpha, 0)
    cv2.putText(
        output,
        text,
        (padding, padding + text_size[1]),
        cv2.FONT_HERSHEY_SIMPLEX,
        0.8,
        (255, 255, 255),
        2,
        cv2.LINE_AA,
    )
    return output


def draw_score_meter(
    frame: np.ndarray,
    score: float,
    threshold: float,
    center: Tuple[int, int] | None = None,
    radius: int = 45,
) -> np.ndarray:
    """Draw a circular gauge of the latest composition score.

    The arc turns green once the score reaches the capture threshold.
    """

    score = float(np.clip(score, 0.0, 1.0))
    output = frame.copy()
    height, width = output.shape[:2]
    if center is None:
        center = (width - radius - 20, radius + 20)

    base_color = (80, 80, 80)
    score_color = (0, 200, 0) if score >= threshold else (0, 200, 255)

    cv2.circle(output, center, radius, base_color, 4)

    if score > 0:
        start_angle = -90
        end_angle = start_angle + int(score * 360)
        cv2.ellipse(
            output,
            center,
            (radius, radius),
            0,
            start_angle,
            end_angle,
            score_color,
            6,
            lineType=cv2.LINE_AA,
        )

    label = f"{int(score * 100):d}%"
    text_size, _ = cv2.getTextSize(label, cv2.FONT_HERSHEY_SIMPLEX, 0.6, 2)
    text_origin = (
        center[0] - text_size[0] // 2,
        center[1] + text_size[1] // 2,
    )
    cv2.putText(output, label, text_origin, cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 255), 2)

    return output


def draw_capture_thumbnail(
    frame: np.ndarray,
    capture: np.ndarray,
    scale: float = 0.2,
    margin: int = 20,
) -> np.ndarray:
    """Inset a shrunken copy of the last capture in the bottom-right corner."""

    output = frame.copy()
    height, width = output.shape[:2]
    thumb_width = max(1, int(width * scale))
    thumb_height = max(1, int(height * scale))
    if thumb_width + margin > width or thumb_height + margin > height:
        return output

    thumb = cv2.resize(capture, (thumb_width, thumb_height), interpolation=cv2.INTER_AREA)
    if thumb.ndim == 2:
        thumb = cv2.cvtColor(thumb, cv2.COLOR_GRAY2BGR)

    x2 = width - margin
    y2 = height - margin
    x1 = x2 - thumb_width
    y1 = y2 - thumb_height
    output[y1:y2, x1:x2] = thumb[..., :3]
    cv2.rectangle(output, (x1, y1), (x2 - 1, y2 - 1), (255, 255, 255), 1)
    return output
