"""Capture sink that persists frames handed over by the scheduler."""

from __future__ import annotations

import logging
import time
from collections import Counter
from pathlib import Path
from typing import Optional

import cv2
import numpy as np

from capture_scheduler import CaptureEvent, CaptureTrigger

logger = logging.getLogger(__name__)

JPEG_QUALITY = 90


class CameraController:
    """Writes captured frames to disk and keeps the latest one for preview."""

    def __init__(self, output_dir: Path | str = "captures") -> None:
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.capture_counts: Counter[CaptureTrigger] = Counter()
        self._last_frame: Optional[np.ndarray] = None
        self._last_saved_path: Optional[Path] = None

    @property
    def last_saved_path(self) -> Optional[Path]:
        return self._last_saved_path

    def on_capture_requested(self, event: CaptureEvent) -> None:
        path = self._save_frame(event.frame.pixels, time.time())
        self._last_frame = event.frame.pixels.copy()
        self._last_saved_path = path
        self.capture_counts[event.trigger] += 1
        logger.info("Saved %s capture to %s", event.trigger.value, path.name)

    def peek_last_capture(self) -> Optional[np.ndarray]:
        if self._last_frame is None:
            return None
        return self._last_frame.copy()

    # Internal helpers -------------------------------------------------

    def _save_frame(self, frame: np.ndarray, timestamp: float) -> Path:
        timestamp_ms = int(timestamp * 1000)
        path = self.output_dir / f"smart_camera_{timestamp_ms}.jpg"
        # Same-millisecond captures get a counter suffix
        suffix = 1
        while path.exists():
            path = self.output_dir / f"smart_camera_{timestamp_ms}_{suffix}.jpg"
            suffix += 1

        success = cv2.imwrite(str(path), frame, [cv2.IMWRITE_JPEG_QUALITY, JPEG_QUALITY])
        if not success:
            raise RuntimeError("Failed to save photo")
        return path
