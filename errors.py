class MotionConquestError(Exception):
    """Base class for all game errors."""


class SourceNotReadyError(MotionConquestError):
    """No pose sample is available yet. Transient; callers retry."""


class SourceUnavailableError(MotionConquestError):
    """Camera or pose model could not be initialised."""


class MissionDataError(MotionConquestError):
    NOT_FOUND = "not_found"
    EMPTY = "empty"
    UPSTREAM = "upstream"

    def __init__(self, message: str, reason: str = UPSTREAM):
        super().__init__(message)
        self.reason = reason


class UnknownGestureError(MotionConquestError, ValueError):
    """A gesture kind reached the classifier with no detector registered."""


class InvalidTransitionError(MotionConquestError):
    def __init__(self, action: str, phase: str):
        super().__init__(f"cannot {action} while {phase}")
        self.action = action
        self.phase = phase
