from dataclasses import dataclass
from typing import Dict, List

from gestures import (
    CatchDetector,
    ClapDetector,
    DodgeDetector,
    DuckDetector,
    GestureDetector,
    GestureKind,
    JumpDetector,
    PunchDetector,
    PushDetector,
    ThrowDetector,
    WaveDetector,
)


@dataclass
class GestureEntry:
    name: str
    detector: GestureDetector
    hint: str

    @property
    def kind(self) -> GestureKind:
        return self.detector.kind


def get_gesture_entries() -> List[GestureEntry]:
    entries: List[GestureEntry] = [
        GestureEntry("Jump", JumpDetector(), "Hop straight up"),
        GestureEntry("Dodge Left", DodgeDetector("left"), "Step to your left"),
        GestureEntry("Dodge Right", DodgeDetector("right"), "Step to your right"),
        GestureEntry("Push", PushDetector(), "Shove both hands forward"),
        GestureEntry("Catch", CatchDetector(), "Both hands together above your shoulders"),
        GestureEntry("Throw", ThrowDetector(), "Swing one arm fast"),
    ]

    # Only used by the fixed combo chains.
    entries += [
        GestureEntry("Duck", DuckDetector(), "Drop your head down"),
        GestureEntry("Wave", WaveDetector(), "Hand up high, wave side to side"),
        GestureEntry("Clap", ClapDetector(), "Bring your hands together in front"),
        GestureEntry("Punch", PunchDetector(), "Jab with one fist, keep the other still"),
    ]
    return entries


def get_gesture_detectors() -> Dict[GestureKind, GestureDetector]:
    return {entry.kind: entry.detector for entry in get_gesture_entries()}
