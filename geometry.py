import math
from typing import Optional, Sequence

import numpy as np

from pose_types import Landmark


def distance_2d(a: Landmark, b: Landmark) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def midpoint_y(a: Landmark, b: Landmark) -> float:
    return (a.y + b.y) / 2.0


def midpoint_x(a: Landmark, b: Landmark) -> float:
    return (a.x + b.x) / 2.0


def compute_velocity(prev_val: float, prev_time: float, curr_val: float, curr_time: float) -> Optional[float]:
    dt = curr_time - prev_time
    if dt <= 1e-6:
        return None
    return (curr_val - prev_val) / dt


def count_direction_reversals(values: Sequence[float], min_step: float = 0.01) -> int:
    """Count sign changes in the motion of a 1D signal.

    Steps smaller than ``min_step`` are treated as jitter and ignored so a
    hand held still does not register as oscillating.
    """
    if len(values) < 3:
        return 0
    steps = np.diff(np.asarray(values, dtype=float))
    steps = steps[np.abs(steps) >= min_step]
    if steps.size < 2:
        return 0
    signs = np.sign(steps)
    return int(np.count_nonzero(signs[1:] != signs[:-1]))
