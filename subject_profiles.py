"""Per-subject capture policy: sampling cadence, thresholds and hint pools."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Dict, Tuple


class SubjectCategory(enum.Enum):
    LANDSCAPE = "landscape"
    PEOPLE = "people"
    ANIMAL = "animal"
    OBJECT = "object"


@dataclass(frozen=True)
class SubjectProfile:
    """Static capture settings for one subject category."""

    sampling_interval_ms: int
    score_threshold: float
    hints: Tuple[str, ...]
    hint_rotation_ms: int = 8000
    camera_settings: str = ""


SUBJECT_PROFILES: Dict[SubjectCategory, SubjectProfile] = {
    SubjectCategory.LANDSCAPE: SubjectProfile(
        sampling_interval_ms=1500,
        score_threshold=0.70,
        hints=(
            "Keep the horizon near the lower golden line, not the middle",
            "Use leading lines to add depth",
            "Layer the foreground, middle ground and background",
            "Shoot during golden hour (sunrise or sunset)",
            "Split sky and ground roughly 3:2 or 2:1",
        ),
        camera_settings="large depth of field, wide angle",
    ),
    SubjectCategory.PEOPLE: SubjectProfile(
        sampling_interval_ms=800,
        score_threshold=0.65,
        hints=(
            "Place the eyes near the upper golden line",
            "Keep a catchlight in the eyes",
            "Open the aperture to blur the background",
            "Pick a simple background without distractions",
            "Half-body or three-quarter framing works best",
        ),
        camera_settings="shallow depth of field, background blur",
    ),
    SubjectCategory.ANIMAL: SubjectProfile(
        sampling_interval_ms=500,
        score_threshold=0.50,
        hints=(
            "Stay still and wait for a natural moment",
            "Put the animal's eyes on a golden point",
            "Use continuous focus to track movement",
            "Look for contrast between the animal and background",
            "Be patient and catch natural behaviour",
        ),
        camera_settings="high-speed burst, fast focus",
    ),
    SubjectCategory.OBJECT: SubjectProfile(
        sampling_interval_ms=1500,
        score_threshold=0.60,
        hints=(
            "Light from 45 degrees to bring out texture",
            "Contrast the object's colour with the background",
            "Use a clean background to isolate the subject",
            "Try high, low and eye-level angles",
            "Add props to tell a story",
        ),
        camera_settings="macro, high detail",
    ),
}


FEEDBACK_MESSAGES: Tuple[str, ...] = (
    "Perfect composition!",
    "Great angle!",
    "Golden ratio captured!",
    "Lovely light and framing!",
)

COMBINED_MODE_MESSAGE = (
    "Hints appear for manual shots; auto-capture fires at the best moment"
)


def profile_for(category: SubjectCategory) -> SubjectProfile:
    return SUBJECT_PROFILES[category]
