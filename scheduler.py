import itertools
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class ScheduledTask:
    name: str
    callback: Callable[[], None]
    due: float
    interval: Optional[float] = None
    seq: int = 0
    cancelled: bool = False

    @property
    def repeating(self) -> bool:
        return self.interval is not None


class Scheduler:
    """Named, cancellable timed tasks driven by the caller's loop.

    Nothing runs on its own: the owning loop calls :meth:`run_pending`
    every frame and due callbacks run inline on that thread, ordered by
    due time and then by scheduling order. At most one task exists per
    name; scheduling a name that is already taken cancels the old task
    first.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._tasks: Dict[str, ScheduledTask] = {}
        self._seq = itertools.count()

    def now(self) -> float:
        return self._clock()

    def call_later(self, name: str, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        return self._add(name, callback, self.now() + max(0.0, delay), None)

    def call_every(
        self,
        name: str,
        interval: float,
        callback: Callable[[], None],
        delay: Optional[float] = None,
    ) -> ScheduledTask:
        if interval <= 0:
            raise ValueError("interval must be positive")
        first = interval if delay is None else max(0.0, delay)
        return self._add(name, callback, self.now() + first, interval)

    def _add(self, name: str, callback: Callable[[], None], due: float, interval: Optional[float]) -> ScheduledTask:
        self.cancel(name)
        task = ScheduledTask(name, callback, due, interval, next(self._seq))
        self._tasks[name] = task
        return task

    def cancel(self, name: str) -> bool:
        task = self._tasks.pop(name, None)
        if task is None:
            return False
        task.cancelled = True
        logger.debug("Cancelled task %s", name)
        return True

    def cancel_prefix(self, prefix: str) -> int:
        names = [n for n in self._tasks if n.startswith(prefix)]
        for name in names:
            self.cancel(name)
        return len(names)

    def cancel_all(self) -> None:
        for name in list(self._tasks):
            self.cancel(name)

    def is_scheduled(self, name: str) -> bool:
        return name in self._tasks

    def names(self) -> List[str]:
        return sorted(self._tasks)

    def run_pending(self) -> int:
        now = self.now()
        due = sorted(
            (t for t in self._tasks.values() if t.due <= now),
            key=lambda t: (t.due, t.seq),
        )
        ran = 0
        for task in due:
            # A callback earlier in this pass may have cancelled or replaced it.
            if task.cancelled:
                continue
            if task.repeating:
                task.due += task.interval
                if task.due <= now:
                    task.due = now + task.interval
            else:
                self._tasks.pop(task.name, None)
                task.cancelled = True
            task.callback()
            ran += 1
        return ran
