"""Frame access for the capture scheduler."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

import cv2
import numpy as np

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Frame:
    """Pixel buffer with its dimensions."""

    pixels: np.ndarray
    width: int
    height: int

    @classmethod
    def from_array(cls, pixels: np.ndarray) -> "Frame":
        height, width = pixels.shape[:2]
        return cls(pixels=pixels, width=width, height=height)


class FrameSource(Protocol):
    def current_frame(self) -> Optional[Frame]:
        ...


class VideoCaptureSource:
    """Wraps ``cv2.VideoCapture`` and serves the most recent frame."""

    def __init__(self, camera_index: int = 0, width: int = 1280, height: int = 720) -> None:
        self.camera_index = camera_index
        self.requested_size = (width, height)
        self._cap: Optional[cv2.VideoCapture] = None
        self._latest: Optional[np.ndarray] = None

    @property
    def is_open(self) -> bool:
        return self._cap is not None

    def open(self) -> None:
        if self._cap is not None:
            return

        cap = cv2.VideoCapture(self.camera_index)
        if not cap.isOpened():
            cap.release()
            raise RuntimeError("Unable to open webcam")

        width, height = self.requested_size
        cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
        self._cap = cap
        logger.info("Camera %d opened", self.camera_index)

    def read(self) -> Optional[np.ndarray]:
        """Grab the next frame from the device and remember it."""

        if self._cap is None:
            return None

        success, frame = self._cap.read()
        if not success or frame is None:
            self._latest = None
            return None

        self._latest = frame
        return frame

    def current_frame(self) -> Optional[Frame]:
        if self._latest is None or self._latest.size == 0:
            return None
        return Frame.from_array(self._latest.copy())

    def close(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            logger.info("Camera %d released", self.camera_index)
        self._latest = None
