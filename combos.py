from dataclasses import dataclass
from typing import Dict, List, Tuple

from errors import MissionDataError
from gestures import GestureKind
from mission_store import MissionSet
from mission_timeline import MissionEntry

# Driving-clock seconds between consecutive combo steps.
COMBO_STEP_GAP = 1.0

PROMPTS = {
    GestureKind.JUMP: "Jump!",
    GestureKind.DODGE_LEFT: "Dodge left!",
    GestureKind.DODGE_RIGHT: "Dodge right!",
    GestureKind.PUSH: "Push!",
    GestureKind.CATCH: "Catch it!",
    GestureKind.THROW: "Throw!",
    GestureKind.DUCK: "Duck!",
    GestureKind.WAVE: "Wave!",
    GestureKind.CLAP: "Clap!",
    GestureKind.PUNCH: "Punch!",
}


@dataclass(frozen=True)
class ComboSequence:
    name: str
    gestures: Tuple[GestureKind, ...]
    time_limit: float


COMBO_SEQUENCES: List[ComboSequence] = [
    ComboSequence(
        "Street Fighter",
        (GestureKind.DODGE_LEFT, GestureKind.PUNCH, GestureKind.DUCK, GestureKind.PUNCH, GestureKind.JUMP),
        3.0,
    ),
    ComboSequence(
        "Ninja Reflexes",
        (GestureKind.DUCK, GestureKind.DODGE_RIGHT, GestureKind.THROW, GestureKind.DODGE_LEFT, GestureKind.JUMP),
        2.5,
    ),
    ComboSequence(
        "Dance Party",
        (
            GestureKind.WAVE,
            GestureKind.CLAP,
            GestureKind.JUMP,
            GestureKind.DODGE_LEFT,
            GestureKind.DODGE_RIGHT,
            GestureKind.CLAP,
        ),
        2.5,
    ),
    ComboSequence(
        "Goalkeeper",
        (
            GestureKind.CATCH,
            GestureKind.DODGE_LEFT,
            GestureKind.CATCH,
            GestureKind.DODGE_RIGHT,
            GestureKind.CATCH,
            GestureKind.JUMP,
        ),
        2.5,
    ),
    ComboSequence(
        "Survival",
        (
            GestureKind.DUCK,
            GestureKind.JUMP,
            GestureKind.DODGE_LEFT,
            GestureKind.DODGE_RIGHT,
            GestureKind.DUCK,
            GestureKind.PUNCH,
            GestureKind.THROW,
            GestureKind.CLAP,
        ),
        2.0,
    ),
]


def combo_mission_set(combo: ComboSequence, gap: float = COMBO_STEP_GAP) -> MissionSet:
    missions = tuple(
        MissionEntry(index * gap, gesture, PROMPTS[gesture], combo.time_limit)
        for index, gesture in enumerate(combo.gestures)
    )
    return MissionSet(video_id="", region_name=combo.name, missions=missions, title=combo.name)


class ComboResolver:
    def __init__(self, combos: List[ComboSequence] = COMBO_SEQUENCES):
        self._combos: Dict[str, ComboSequence] = {c.name.lower(): c for c in combos}

    def names(self) -> List[str]:
        return [c.name for c in self._combos.values()]

    def resolve(self, target_name: str) -> MissionSet:
        combo = self._combos.get(target_name.strip().lower())
        if combo is None:
            raise MissionDataError(f"no combo named {target_name!r}", MissionDataError.NOT_FOUND)
        return combo_mission_set(combo)
