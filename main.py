"""Entry point for the composition-aware smart camera.

Usage:
    pip install -e .
    python main.py --mode combined --subject people

Keys:
    c        capture now
    m        cycle capture mode (manual -> auto -> combined)
    1-4      subject: landscape, people, animal, object
    s        stop / restart the session
    q        quit
"""

from __future__ import annotations

import argparse
import logging
from typing import Dict, List, Optional

import cv2

from camera_controller import CameraController
from capture_scheduler import CaptureMode, CaptureScheduler, SchedulerConfig
from composition import HeuristicScorer, golden_ratio_lines
from frame_source import VideoCaptureSource
from subject_profiles import SubjectCategory
from utils.drawing import (
    draw_capture_thumbnail,
    draw_golden_ratio_grid,
    draw_hint,
    draw_status_banner,
    draw_score_meter,
)

WINDOW_NAME = "Smart Composition Camera"

MODE_ORDER: List[CaptureMode] = [CaptureMode.MANUAL, CaptureMode.AUTO, CaptureMode.COMBINED]

SUBJECT_KEYS: Dict[int, SubjectCategory] = {
    ord("1"): SubjectCategory.LANDSCAPE,
    ord("2"): SubjectCategory.PEOPLE,
    ord("3"): SubjectCategory.ANIMAL,
    ord("4"): SubjectCategory.OBJECT,
}


class HintPrinter:
    """Mirrors hint changes to stdout."""

    def on_hint_changed(self, text: str) -> None:
        print(f"[HINT] {text}")


def next_mode(mode: CaptureMode) -> CaptureMode:
    return MODE_ORDER[(MODE_ORDER.index(mode) + 1) % len(MODE_ORDER)]


def banner_text(scheduler: CaptureScheduler) -> str:
    state = scheduler.state
    if not scheduler.session_active:
        return "Session stopped"
    return (
        f"{state.current_mode.value.title()} | {state.current_subject.value.title()}"
        f" | {scheduler.phase.value}"
    )


def run(
    camera_index: int = 0,
    mode: CaptureMode = CaptureMode.MANUAL,
    subject: SubjectCategory = SubjectCategory.LANDSCAPE,
    output_dir: str = "captures",
    jitter: float = 0.0,
) -> None:
    source = VideoCaptureSource(camera_index)
    source.open()

    controller = CameraController(output_dir)
    scheduler = CaptureScheduler(
        source,
        HeuristicScorer(jitter=jitter),
        controller,
        HintPrinter(),
        config=SchedulerConfig(),
    )
    scheduler.start_session(mode, subject)
    print(f"[ACTION] Session started in {mode.value} mode for {subject.value}")

    try:
        while True:
            frame = source.read()
            if frame is None:
                break

            scheduler.poll()

            height, width = frame.shape[:2]
            display_frame = draw_golden_ratio_grid(frame, golden_ratio_lines(width, height))
            phase = scheduler.phase if scheduler.session_active else None
            display_frame = draw_status_banner(display_frame, banner_text(scheduler), phase)
            display_frame = draw_hint(display_frame, scheduler.current_hint)

            score: Optional[float] = scheduler.last_score
            if score is not None:
                display_frame = draw_score_meter(
                    display_frame, score, scheduler.profile.score_threshold
                )

            last_capture = controller.peek_last_capture()
            if last_capture is not None:
                display_frame = draw_capture_thumbnail(display_frame, last_capture)

            cv2.imshow(WINDOW_NAME, display_frame)

            key = cv2.waitKey(1) & 0xFF
            if key == ord("q"):
                break
            if key == ord("c"):
                if scheduler.manual_capture_requested() is not None:
                    print(f"[ACTION] Saved capture to {controller.last_saved_path.name}")
            elif key == ord("m"):
                new_mode = next_mode(scheduler.state.current_mode)
                scheduler.set_mode(new_mode)
                print(f"[ACTION] Capture mode: {new_mode.value}")
            elif key in SUBJECT_KEYS:
                scheduler.set_subject(SUBJECT_KEYS[key])
                print(f"[ACTION] Subject: {SUBJECT_KEYS[key].value}")
            elif key == ord("s"):
                if scheduler.session_active:
                    scheduler.stop_session()
                    print("[ACTION] Session stopped")
                else:
                    state = scheduler.state
                    scheduler.start_session(state.current_mode, state.current_subject)
                    print("[ACTION] Session restarted")
    finally:
        scheduler.stop_session()
        source.close()
        cv2.destroyAllWindows()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Composition-aware smart camera")
    parser.add_argument("--camera", type=int, default=0, help="Webcam index.")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in CaptureMode],
        default=CaptureMode.MANUAL.value,
        help="Capture mode to start in.",
    )
    parser.add_argument(
        "--subject",
        choices=[s.value for s in SubjectCategory],
        default=SubjectCategory.LANDSCAPE.value,
        help="Subject category driving sampling rate and thresholds.",
    )
    parser.add_argument("--output-dir", default="captures", help="Where captures are saved.")
    parser.add_argument(
        "--jitter",
        type=float,
        default=0.0,
        help="Random noise added to composition scores (0 disables).",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    run(
        camera_index=args.camera,
        mode=CaptureMode(args.mode),
        subject=SubjectCategory(args.subject),
        output_dir=args.output_dir,
        jitter=args.jitter,
    )


if __name__ == "__main__":
    main()
