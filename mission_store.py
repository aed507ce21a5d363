import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

from errors import MissionDataError
from mission_timeline import GENERATED_TIME_LIMIT_RANGE, MissionEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MissionSet:
    video_id: str
    region_name: str
    missions: Tuple[MissionEntry, ...] = field(default_factory=tuple)
    title: Optional[str] = None

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Any],
        clamp: bool = True,
        limits: Tuple[float, float] = GENERATED_TIME_LIMIT_RANGE,
    ) -> "MissionSet":
        try:
            records = data["missions"]
            video_id = str(data["videoId"])
        except (KeyError, TypeError) as exc:
            raise MissionDataError(f"mission set is missing {exc}") from exc
        if not isinstance(records, list):
            raise MissionDataError("mission set \"missions\" must be a list")
        missions = tuple(MissionEntry.from_record(r, clamp=clamp, limits=limits) for r in records)
        return cls(
            video_id=video_id,
            region_name=str(data.get("regionName", "")),
            missions=missions,
            title=data.get("videoTitle") or data.get("title"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "videoId": self.video_id,
            "regionName": self.region_name,
            "missions": [m.to_record() for m in self.missions],
        }
        if self.title:
            data["videoTitle"] = self.title
        return data

    def renamed(self, region_name: str) -> "MissionSet":
        return MissionSet(self.video_id, region_name, self.missions, self.title)


def cache_key(name: str) -> str:
    return re.sub(r"\s+", "-", name.strip().lower())


class MissionStore:
    """One JSON file per target under ``root``."""

    def __init__(self, root: Path, limits: Tuple[float, float] = GENERATED_TIME_LIMIT_RANGE):
        self.root = Path(root)
        self.limits = limits

    def _path(self, name: str) -> Path:
        return self.root / f"{cache_key(name)}.json"

    def get(self, name: str) -> Optional[MissionSet]:
        path = self._path(name)
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Unreadable mission cache %s: %s", path, exc)
            return None
        return MissionSet.from_dict(data, limits=self.limits)

    def put(self, mission_set: MissionSet) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        path = self._path(mission_set.region_name)
        path.write_text(json.dumps(mission_set.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
        logger.info("Wrote %s", path)
        return path

    def list(self) -> List[str]:
        if not self.root.exists():
            return []
        return sorted(p.stem for p in self.root.glob("*.json"))


class MissionResolver(Protocol):
    def resolve(self, target_name: str) -> MissionSet:
        ...


class CachedMissionResolver:
    """Resolve targets from a :class:`MissionStore`.

    ``aliases`` maps display names (city names in any language, say) onto
    store keys. ``fallback`` is served, renamed, for unknown targets.
    """

    def __init__(
        self,
        store: MissionStore,
        aliases: Optional[Mapping[str, str]] = None,
        fallback: Optional[MissionSet] = None,
    ):
        self.store = store
        self.aliases = dict(aliases or {})
        self.fallback = fallback

    def resolve(self, target_name: str) -> MissionSet:
        key = self.aliases.get(target_name, target_name)
        mission_set = self.store.get(key)
        if mission_set is None and self.fallback is not None:
            logger.info("No cached missions for %s, using fallback", target_name)
            mission_set = self.fallback
        if mission_set is None:
            raise MissionDataError(f"no mission source found for {target_name!r}", MissionDataError.NOT_FOUND)
        if not mission_set.missions:
            raise MissionDataError(f"no missions produced for {target_name!r}", MissionDataError.EMPTY)
        return mission_set.renamed(target_name)


class ChainedResolver:
    """Try each resolver in turn; the last failure wins."""

    def __init__(self, resolvers: Sequence[MissionResolver]):
        if not resolvers:
            raise ValueError("at least one resolver is required")
        self.resolvers = list(resolvers)

    def resolve(self, target_name: str) -> MissionSet:
        error: Optional[MissionDataError] = None
        for resolver in self.resolvers:
            try:
                return resolver.resolve(target_name)
            except MissionDataError as exc:
                error = exc
        raise error
