import logging
from enum import Enum
from typing import Callable, Optional

from classifier import DetectionMode, GestureClassifier
from config import RunnerSettings
from errors import SourceNotReadyError, UnknownGestureError
from gestures import GestureKind, MissionResult
from landmark_source import LandmarkSource
from mission_timeline import DEFAULT_TIME_LIMIT, MissionEntry
from pose_types import PoseSample
from scheduler import Scheduler

logger = logging.getLogger(__name__)

ResultCallback = Callable[[MissionResult], None]
ErrorCallback = Callable[[str], None]


class RunnerState(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"
    RESOLVING = "resolving"


class MissionRunner:
    """Runs one mission at a time from baseline capture to result.

    While a mission is active two timed tasks run on the scheduler: a
    countdown that keeps ``remaining`` fresh for display, and a detection
    poll that asks the classifier about the newest sample(s). A third
    one-shot task fires exactly at the time limit. Whichever path resolves
    first wins; every later attempt is a no-op, so a mission produces
    exactly one :class:`MissionResult`.
    """

    def __init__(
        self,
        source: LandmarkSource,
        classifier: GestureClassifier,
        scheduler: Scheduler,
        settings: Optional[RunnerSettings] = None,
        on_tick: Optional[Callable[[float], None]] = None,
        name: str = "runner",
    ):
        self.source = source
        self.classifier = classifier
        self.settings = settings or RunnerSettings()
        self._scheduler = scheduler
        self._on_tick = on_tick
        self._countdown_task = f"{name}.countdown"
        self._poll_task = f"{name}.poll"
        self._deadline_task = f"{name}.deadline"
        self._baseline_task = f"{name}.baseline"

        self.state = RunnerState.IDLE
        self.active_entry: Optional[MissionEntry] = None
        self.baseline: Optional[PoseSample] = None
        self.remaining = 0.0
        self.last_result: Optional[MissionResult] = None
        self._pending: Optional[MissionEntry] = None
        self._on_result: Optional[ResultCallback] = None
        self._on_error: Optional[ErrorCallback] = None
        self._started_at = 0.0

    @property
    def waiting_for_source(self) -> bool:
        return self._pending is not None

    @property
    def busy(self) -> bool:
        return self.state != RunnerState.IDLE or self._pending is not None

    def elapsed(self) -> float:
        if self.state == RunnerState.IDLE:
            return 0.0
        return self._scheduler.now() - self._started_at

    def start(
        self,
        entry: MissionEntry,
        on_result: Optional[ResultCallback] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> bool:
        """Begin ``entry``, tearing down whatever was running before.

        Returns False when no usable sample is available yet; the runner
        then keeps retrying the baseline capture on its poll cadence and
        only goes active once it has one. A source that has failed outright
        will never deliver one, so the runner gives up instead and reports
        the source error through ``on_error``.
        """
        self.cancel()
        self._pending = entry
        self._on_result = on_result
        self._on_error = on_error
        if self._try_activate():
            return True
        if self._abandon_if_failed():
            return False
        logger.info("Landmark source not ready, waiting to capture baseline for %s", entry.gesture.value)
        self._scheduler.call_every(self._baseline_task, self.settings.poll_interval, self._retry_baseline)
        return False

    def start_gesture(
        self,
        gesture: GestureKind,
        time_limit: float = DEFAULT_TIME_LIMIT,
        on_result: Optional[ResultCallback] = None,
    ) -> bool:
        return self.start(MissionEntry(0.0, gesture, "", time_limit), on_result)

    def cancel(self) -> None:
        """Stop everything without emitting a result."""
        was_busy = self.busy
        self._cancel_timers()
        self._pending = None
        self._on_result = None
        self._on_error = None
        self.active_entry = None
        self.baseline = None
        self.remaining = 0.0
        self.state = RunnerState.IDLE
        if was_busy:
            logger.info("Mission cancelled")

    def resolve(self, result: MissionResult) -> bool:
        if self.state != RunnerState.ACTIVE:
            logger.debug("Ignoring resolution while %s", self.state.value)
            return False
        self.state = RunnerState.RESOLVING
        self._cancel_timers()
        if not result.success:
            self.remaining = 0.0
        self.baseline = None
        self.active_entry = None
        self.last_result = result
        callback = self._on_result
        self._on_result = None
        self._on_error = None
        self.state = RunnerState.IDLE
        logger.info(
            "Mission %s resolved: %s (confidence %.2f)",
            result.gesture.value,
            "success" if result.success else "fail",
            result.confidence,
        )
        if callback is not None:
            callback(result)
        return True

    def _cancel_timers(self) -> None:
        for name in (self._countdown_task, self._poll_task, self._deadline_task, self._baseline_task):
            self._scheduler.cancel(name)

    def _require_sample(self) -> PoseSample:
        if not self.source.ready:
            raise SourceNotReadyError("landmark source not ready")
        sample = self.source.get_latest()
        if sample is None or not sample.valid:
            raise SourceNotReadyError("no valid pose in frame")
        return sample

    def _capture_baseline(self) -> Optional[PoseSample]:
        try:
            return self._require_sample()
        except SourceNotReadyError as exc:
            logger.debug("Baseline not captured: %s", exc)
            return None

    def _try_activate(self) -> bool:
        baseline = self._capture_baseline()
        if baseline is None:
            return False
        self._scheduler.cancel(self._baseline_task)
        entry = self._pending
        self._pending = None
        self.active_entry = entry
        self.baseline = baseline
        self.remaining = entry.time_limit
        self._started_at = self._scheduler.now()
        self.state = RunnerState.ACTIVE

        self._scheduler.call_every(self._poll_task, self.settings.poll_interval, self._on_poll)
        self._scheduler.call_every(self._countdown_task, self.settings.countdown_interval, self._on_countdown)
        self._scheduler.call_later(self._deadline_task, entry.time_limit, self._on_deadline)
        logger.info("Mission %s active (%.1fs)", entry.gesture.value, entry.time_limit)
        return True

    def _retry_baseline(self) -> None:
        if self._pending is None:
            self._scheduler.cancel(self._baseline_task)
            return
        if not self._try_activate():
            self._abandon_if_failed()

    def _abandon_if_failed(self) -> bool:
        error = self.source.error
        if not error:
            return False
        logger.error("Landmark source failed, abandoning %s: %s", self._pending.gesture.value, error)
        callback = self._on_error
        self.cancel()
        if callback is not None:
            callback(error)
        return True

    def _on_countdown(self) -> None:
        if self.state != RunnerState.ACTIVE:
            return
        self.remaining = max(0.0, self.active_entry.time_limit - self.elapsed())
        if self._on_tick is not None:
            self._on_tick(self.remaining)

    def _detect(self) -> Optional[MissionResult]:
        entry = self.active_entry
        if self.settings.detection_mode == DetectionMode.WINDOWED:
            frames = [f for f in self.source.get_window() if f.timestamp >= self.baseline.timestamp]
            result = self.classifier.evaluate_window(entry.gesture, frames)
            return result if result.success else None
        hit = self.classifier.evaluate(self.source.get_latest(), self.baseline, entry.gesture)
        if hit:
            return MissionResult(entry.gesture, True, self.settings.hit_confidence)
        return None

    def _poll(self, deadline: bool) -> None:
        if self.state != RunnerState.ACTIVE:
            return
        gesture = self.active_entry.gesture
        try:
            result = self._detect()
        except UnknownGestureError:
            logger.exception("No detector for mission gesture %r", gesture)
            self.resolve(MissionResult.miss(gesture))
            if self.settings.strict:
                raise
            return
        # A hit seen in this tick beats a timeout seen in the same tick.
        if result is not None:
            self.resolve(result)
        elif deadline or self.elapsed() >= self.active_entry.time_limit:
            self.resolve(MissionResult.miss(gesture))

    def _on_poll(self) -> None:
        self._poll(deadline=False)

    def _on_deadline(self) -> None:
        self._poll(deadline=True)
