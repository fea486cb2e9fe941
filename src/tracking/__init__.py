"""Tracking — накопление пути, самопересечения, скорость, валидация захвата."""

from .path_tracker import (
    AddPointResult,
    ClosureFailure,
    ClosureResult,
    PathStateError,
    PathTracker,
    PathTrackerConfig,
    TrackerState,
)
from .self_intersection import SelfIntersectionDetector
from .speed_guard import MovementSpeedGuard, SpeedCheck, SpeedGuardConfig, SpeedStatus
from .validation import (
    TerritoryValidator,
    ValidationConfig,
    ValidationFailure,
    ValidationResult,
)

__all__ = [
    # Path tracker
    "PathTracker",
    "PathTrackerConfig",
    "TrackerState",
    "AddPointResult",
    "ClosureResult",
    "ClosureFailure",
    "PathStateError",
    # Self-intersection
    "SelfIntersectionDetector",
    # Speed
    "MovementSpeedGuard",
    "SpeedGuardConfig",
    "SpeedCheck",
    "SpeedStatus",
    # Validation
    "TerritoryValidator",
    "ValidationConfig",
    "ValidationResult",
    "ValidationFailure",
]
