from gestures.base import CORE_GESTURES, EXTENDED_GESTURES, GestureDetector, GestureKind, MissionResult
from gestures.catch import CatchDetector
from gestures.clap import ClapDetector
from gestures.dodge import DodgeDetector
from gestures.duck import DuckDetector
from gestures.jump import JumpDetector
from gestures.punch import PunchDetector
from gestures.push import PushDetector
from gestures.throw import ThrowDetector
from gestures.wave import WaveDetector

__all__ = [
    "GestureKind",
    "GestureDetector",
    "MissionResult",
    "CORE_GESTURES",
    "EXTENDED_GESTURES",
    "JumpDetector",
    "DodgeDetector",
    "PushDetector",
    "CatchDetector",
    "ThrowDetector",
    "DuckDetector",
    "WaveDetector",
    "ClapDetector",
    "PunchDetector",
]
