import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Set, Tuple, Union

from errors import MissionDataError
from gestures import GestureKind

logger = logging.getLogger(__name__)

DEFAULT_TIME_LIMIT = 3.0
GENERATED_TIME_LIMIT_RANGE = (2.0, 4.0)


def normalize_gesture(kind: Union[GestureKind, str], direction: Optional[str] = None) -> GestureKind:
    """Map any accepted upstream spelling onto a :class:`GestureKind`.

    Some generators emit ``{"missionType": "dodge", "direction": "left"}``
    instead of ``dodge_left``; both collapse to the same kind here.
    """
    if isinstance(kind, GestureKind):
        return kind
    name = str(kind).strip().lower()
    if name == "dodge":
        side = (direction or "").strip().lower()
        if side not in ("left", "right"):
            raise ValueError(f"dodge needs a left/right direction, got {direction!r}")
        return GestureKind(f"dodge_{side}")
    try:
        return GestureKind(name)
    except ValueError:
        raise ValueError(f"unknown gesture kind: {kind!r}") from None


def clamp_time_limit(value: float, limits: Tuple[float, float] = GENERATED_TIME_LIMIT_RANGE) -> float:
    low, high = limits
    return max(low, min(high, float(value)))


@dataclass(frozen=True)
class MissionEntry:
    time_offset: float
    gesture: GestureKind
    prompt: str = ""
    time_limit: float = DEFAULT_TIME_LIMIT
    direction: Optional[str] = None

    def __post_init__(self):
        # Normalized once here; nothing downstream looks at ``direction``.
        object.__setattr__(self, "gesture", normalize_gesture(self.gesture, self.direction))
        object.__setattr__(self, "direction", None)
        object.__setattr__(self, "time_offset", float(self.time_offset))
        object.__setattr__(self, "time_limit", float(self.time_limit))
        if self.time_limit <= 0:
            raise ValueError(f"time limit must be positive, got {self.time_limit}")

    @classmethod
    def from_record(
        cls,
        record: Mapping[str, Any],
        clamp: bool = False,
        limits: Tuple[float, float] = GENERATED_TIME_LIMIT_RANGE,
    ) -> "MissionEntry":
        """Build an entry from an upstream JSON record.

        Accepts the camelCase keys produced by the mission generator
        (``timestamp``, ``missionType``, ``prompt``, ``timeLimit``,
        ``direction``). ``clamp`` pins the time limit into ``limits`` for
        machine-generated data.
        """
        try:
            offset = record["timestamp"]
            kind = record["missionType"]
            time_limit = record.get("timeLimit") or DEFAULT_TIME_LIMIT
            if clamp:
                time_limit = clamp_time_limit(time_limit, limits)
            return cls(
                time_offset=offset,
                gesture=kind,
                prompt=str(record.get("prompt", "")),
                time_limit=time_limit,
                direction=record.get("direction"),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise MissionDataError(f"malformed mission record {dict(record)!r}: {exc}") from exc

    def to_record(self) -> Dict[str, Any]:
        return {
            "timestamp": self.time_offset,
            "missionType": self.gesture.value,
            "prompt": self.prompt,
            "timeLimit": self.time_limit,
        }


class MissionTimeline:
    """Time-ordered missions that each fire at most once.

    The fired set is keyed by offset, so when two entries share an offset
    only the first survives construction.
    """

    def __init__(self, entries: Iterable[MissionEntry], cutoff: Optional[float] = None):
        self.cutoff = cutoff
        kept: List[MissionEntry] = []
        seen: Set[float] = set()
        for entry in sorted(entries, key=lambda e: e.time_offset):
            if cutoff is not None and entry.time_offset >= cutoff:
                logger.info("Dropping mission at %.1fs (cutoff %.1fs)", entry.time_offset, cutoff)
                continue
            if entry.time_offset in seen:
                logger.warning("Dropping duplicate mission offset %.2fs (%s)", entry.time_offset, entry.gesture.value)
                continue
            seen.add(entry.time_offset)
            kept.append(entry)
        self._entries: Tuple[MissionEntry, ...] = tuple(kept)
        self._fired: Set[float] = set()
        self._lock = threading.Lock()

    @property
    def entries(self) -> Tuple[MissionEntry, ...]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[MissionEntry]:
        return iter(self._entries)

    def next_due(self, elapsed_seconds: float) -> Optional[MissionEntry]:
        for entry in self._entries:
            if entry.time_offset > elapsed_seconds:
                return None
            if entry.time_offset not in self._fired:
                return entry
        return None

    def claim_due(self, elapsed_seconds: float) -> Optional[MissionEntry]:
        """Return the next due entry and mark it fired in one step."""
        with self._lock:
            entry = self.next_due(elapsed_seconds)
            if entry is not None:
                self._fired.add(entry.time_offset)
            return entry

    def remaining(self) -> List[MissionEntry]:
        return [e for e in self._entries if e.time_offset not in self._fired]

    def is_exhausted(self) -> bool:
        return not self.remaining()

    def reset(self) -> None:
        with self._lock:
            self._fired.clear()
