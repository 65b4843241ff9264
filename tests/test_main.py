from unittest import mock

from capture_scheduler import CaptureMode, CaptureScheduler
from conftest import FixedScorer, RecordingCaptureSink, StaticFrameSource
from main import banner_text, main, next_mode, parse_args
from subject_profiles import SubjectCategory


def test_parse_args_defaults():
    args = parse_args([])
    assert args.mode == "manual"
    assert args.subject == "landscape"
    assert args.camera == 0
    assert args.jitter == 0.0


def test_main_passes_enums_to_run():
    with mock.patch("main.run") as run_mock, mock.patch("main.logging.basicConfig"):
        main(["--mode", "combined", "--subject", "animal", "--camera", "1", "--output-dir", "out"])

    run_mock.assert_called_once_with(
        camera_index=1,
        mode=CaptureMode.COMBINED,
        subject=SubjectCategory.ANIMAL,
        output_dir="out",
        jitter=0.0,
    )


def test_mode_cycle_wraps():
    assert next_mode(CaptureMode.MANUAL) is CaptureMode.AUTO
    assert next_mode(CaptureMode.AUTO) is CaptureMode.COMBINED
    assert next_mode(CaptureMode.COMBINED) is CaptureMode.MANUAL


def test_banner_reflects_session(frame, clock):
    scheduler = CaptureScheduler(StaticFrameSource(frame), FixedScorer(0.0), RecordingCaptureSink(), clock=clock)
    assert banner_text(scheduler) == "Session stopped"

    scheduler.start_session(CaptureMode.AUTO, SubjectCategory.PEOPLE)
    assert banner_text(scheduler) == "Auto | People | sampling"
