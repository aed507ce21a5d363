"""Session controller: target selection through mission play to clear.

All state lives on a :class:`GameSession` and changes only inside scheduler
callbacks or explicit actions, on the thread that runs the scheduler.
Mission-data resolution is the one slow operation; it runs on an executor
and the session polls its future, so the result is applied back on the
scheduler thread too.
"""

import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Protocol, Tuple

from config import SessionSettings
from errors import InvalidTransitionError, MissionDataError
from gestures import GestureKind, MissionResult
from mission_runner import MissionRunner
from mission_store import MissionResolver, MissionSet
from mission_timeline import MissionEntry, MissionTimeline
from scheduler import Scheduler

logger = logging.getLogger(__name__)

TIMELINE_TASK = "session.timeline"
LOADING_TASK = "session.loading"
DWELL_TASK = "session.dwell"


class GamePhase(str, Enum):
    IDLE = "idle"
    SELECTED = "selected"
    LOADING = "loading"
    PLAYING = "playing"
    MISSION_ACTIVE = "mission_active"
    MISSION_RESULT = "mission_result"
    CLEARED = "cleared"


class DrivingClock(Protocol):
    def start(self, grace: float = 0.0) -> None:
        ...

    @property
    def in_grace(self) -> bool:
        ...

    def elapsed_seconds(self) -> float:
        ...

    def stop(self) -> None:
        ...


class SessionClock:
    """Stand-in for video playback time.

    For ``grace`` seconds after :meth:`start` the clock is in its grace
    window: it reads 0 and offset zero is not yet reached, which absorbs
    video buffering. After that it counts up until :meth:`stop`, including
    while a mission is on screen.
    """

    def __init__(self, now: Callable[[], float]):
        self._now = now
        self._origin = 0.0
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    @property
    def in_grace(self) -> bool:
        return self._running and self._now() < self._origin

    def start(self, grace: float = 0.0) -> None:
        self._origin = self._now() + grace
        self._running = True

    def elapsed_seconds(self) -> float:
        if not self._running:
            return 0.0
        return max(0.0, self._now() - self._origin)

    def stop(self) -> None:
        self._running = False


@dataclass(frozen=True)
class SessionSnapshot:
    phase: GamePhase
    target: Optional[str]
    video_id: Optional[str]
    title: Optional[str]
    active_entry: Optional[MissionEntry]
    remaining_time: float
    waiting_for_source: bool
    last_result: Optional[MissionResult]
    results: Tuple[MissionResult, ...]
    successes: int
    missions_total: int
    score: int
    cleared_targets: Tuple[str, ...]
    elapsed: float
    error: Optional[str]

    @property
    def loading(self) -> bool:
        return self.phase == GamePhase.LOADING


Observer = Callable[[SessionSnapshot], None]


class GameSession:
    def __init__(
        self,
        runner: MissionRunner,
        resolver: MissionResolver,
        scheduler: Scheduler,
        settings: Optional[SessionSettings] = None,
        clock: Optional[DrivingClock] = None,
        executor: Optional[Executor] = None,
    ):
        self.runner = runner
        self.resolver = resolver
        self.settings = settings or SessionSettings()
        self._scheduler = scheduler
        self.clock = clock or SessionClock(scheduler.now)
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="mission-resolver")
        self._observers: List[Observer] = []

        self.phase = GamePhase.IDLE
        self.score = 0
        self.cleared_targets: List[str] = []
        self.target: Optional[str] = None
        self.mission_set: Optional[MissionSet] = None
        self.timeline: Optional[MissionTimeline] = None
        self.results: List[MissionResult] = []
        self.last_result: Optional[MissionResult] = None
        self.error: Optional[str] = None
        self._active_entry: Optional[MissionEntry] = None
        self._future: Optional[Future] = None

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def snapshot(self) -> SessionSnapshot:
        mission_set = self.mission_set
        return SessionSnapshot(
            phase=self.phase,
            target=self.target,
            video_id=mission_set.video_id if mission_set else None,
            title=mission_set.title if mission_set else None,
            active_entry=self._active_entry or self.runner.active_entry,
            remaining_time=self.runner.remaining,
            waiting_for_source=self.runner.waiting_for_source,
            last_result=self.last_result,
            results=tuple(self.results),
            successes=sum(1 for r in self.results if r.success),
            missions_total=len(self.timeline) if self.timeline else 0,
            score=self.score,
            cleared_targets=tuple(self.cleared_targets),
            elapsed=self.clock.elapsed_seconds(),
            error=self.error,
        )

    def _notify(self) -> None:
        snap = self.snapshot()
        for observer in list(self._observers):
            observer(snap)

    def _set_phase(self, phase: GamePhase) -> None:
        if phase != self.phase:
            logger.info("Phase %s -> %s", self.phase.value, phase.value)
        self.phase = phase
        self._notify()

    def _require(self, action: str, *phases: GamePhase) -> None:
        if self.phase not in phases:
            raise InvalidTransitionError(action, self.phase.value)

    def select_target(self, name: str) -> None:
        self._require("select a target", GamePhase.IDLE, GamePhase.SELECTED)
        self.target = name
        self.error = None
        self._set_phase(GamePhase.SELECTED)

    def confirm(self) -> bool:
        """Start resolving mission data for the selected target."""
        self._require("confirm", GamePhase.SELECTED)
        if self._future is not None:
            logger.warning("Mission data request already outstanding, ignoring confirm")
            return False
        source_error = self.runner.source.error
        if source_error:
            self.error = f"camera unavailable: {source_error}"
            self._notify()
            return False

        # A practice mission started while SELECTED must not outlive it.
        self.runner.cancel()
        self.error = None
        target = self.target
        logger.info("Resolving missions for %s", target)
        self._future = self._executor.submit(self.resolver.resolve, target)
        self._scheduler.call_every(LOADING_TASK, self.settings.loading_poll_interval, self._check_loading, delay=0.0)
        self._set_phase(GamePhase.LOADING)
        return True

    def cancel(self) -> None:
        """Abandon whatever is in progress and go back to IDLE."""
        self._reset()

    def acknowledge(self) -> None:
        self._require("acknowledge", GamePhase.CLEARED)
        self._reset()

    def trigger_gesture(self, gesture: GestureKind, time_limit: Optional[float] = None) -> bool:
        """Run one unscored practice mission outside a session."""
        self._require("practice", GamePhase.IDLE, GamePhase.SELECTED, GamePhase.CLEARED)
        limit = time_limit if time_limit is not None else self.settings.default_time_limit
        started = self.runner.start_gesture(gesture, limit, self._on_practice_result)
        self._notify()
        return started

    def close(self) -> None:
        self._reset()
        if self._owns_executor:
            self._executor.shutdown(wait=False)

    def _check_loading(self) -> None:
        future = self._future
        if future is None:
            self._scheduler.cancel(LOADING_TASK)
            return
        if not future.done():
            return
        self._scheduler.cancel(LOADING_TASK)
        self._future = None
        if future.cancelled():
            return
        try:
            mission_set = future.result()
        except MissionDataError as exc:
            logger.warning("Mission data for %s unavailable (%s): %s", self.target, exc.reason, exc)
            self._load_failed(str(exc))
            return
        except Exception as exc:
            logger.exception("Mission resolver failed for %s", self.target)
            self._load_failed(f"upstream error: {exc}")
            return
        self._load(mission_set)

    def _load_failed(self, message: str) -> None:
        self.error = message
        self._set_phase(GamePhase.SELECTED)

    def _load(self, mission_set: MissionSet) -> None:
        source_error = self.runner.source.error
        if source_error:
            self._load_failed(f"camera unavailable: {source_error}")
            return
        timeline = MissionTimeline(mission_set.missions, cutoff=self.settings.cutoff)
        if not len(timeline):
            self._load_failed(f"no playable missions for {self.target!r}")
            return

        self.mission_set = mission_set
        self.timeline = timeline
        self.timeline.reset()
        self.results = []
        self.last_result = None
        logger.info("Loaded %d missions for %s (video %s)", len(timeline), self.target, mission_set.video_id)
        self._play(restart=True)

    def _play(self, restart: bool = False) -> None:
        if restart:
            self.clock.start(self.settings.grace_delay)
        self._scheduler.call_every(TIMELINE_TASK, self.settings.timeline_poll_interval, self._on_timeline_tick)
        self._set_phase(GamePhase.PLAYING)

    def _cutoff_reached(self) -> bool:
        cutoff = self.settings.cutoff
        return cutoff is not None and self.clock.elapsed_seconds() >= cutoff

    def _on_timeline_tick(self) -> None:
        if self.phase != GamePhase.PLAYING or self.clock.in_grace:
            return
        if self._cutoff_reached():
            logger.info("Session cutoff reached")
            self._clear()
            return
        entry = self.timeline.claim_due(self.clock.elapsed_seconds())
        if entry is not None:
            self._start_mission(entry)

    def _start_mission(self, entry: MissionEntry) -> None:
        self._scheduler.cancel(TIMELINE_TASK)
        self._active_entry = entry
        self._set_phase(GamePhase.MISSION_ACTIVE)
        self.runner.start(entry, self._on_mission_result, self._on_source_failed)

    def _on_mission_result(self, result: MissionResult) -> None:
        if self.phase != GamePhase.MISSION_ACTIVE:
            logger.warning("Mission result arrived while %s, dropping", self.phase.value)
            return
        self._active_entry = None
        self.results.append(result)
        self.last_result = result
        if self._cutoff_reached():
            logger.info("Session cutoff passed during mission %s", result.gesture.value)
        self._scheduler.call_later(DWELL_TASK, self.settings.result_dwell, self._after_dwell)
        self._set_phase(GamePhase.MISSION_RESULT)

    def _on_source_failed(self, message: str) -> None:
        if self.phase != GamePhase.MISSION_ACTIVE:
            return
        self._scheduler.cancel_prefix("session.")
        self.clock.stop()
        self._active_entry = None
        self.mission_set = None
        self.timeline = None
        self.error = f"camera unavailable: {message}"
        self._set_phase(GamePhase.SELECTED)

    def _after_dwell(self) -> None:
        if self.phase != GamePhase.MISSION_RESULT:
            return
        if self.timeline.is_exhausted() or self._cutoff_reached():
            self._clear()
        else:
            self._play()

    def _clear(self) -> None:
        self._scheduler.cancel_prefix("session.")
        self.runner.cancel()
        self.clock.stop()
        self._active_entry = None
        target = self.target
        if target is not None and target not in self.cleared_targets:
            self.cleared_targets.append(target)
            self.score += 1
        else:
            logger.info("%s already cleared, score unchanged", target)
        self._set_phase(GamePhase.CLEARED)

    def _on_practice_result(self, result: MissionResult) -> None:
        self.last_result = result
        self._notify()

    def _reset(self) -> None:
        self._scheduler.cancel_prefix("session.")
        self.runner.cancel()
        if self._future is not None:
            # Best effort; a running resolve finishes but is never read.
            self._future.cancel()
            self._future = None
        self.clock.stop()
        self.target = None
        self.mission_set = None
        self.timeline = None
        self.results = []
        self.last_result = None
        self.error = None
        self._active_entry = None
        self._set_phase(GamePhase.IDLE)
