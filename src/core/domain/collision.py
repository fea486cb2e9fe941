"""
Collision — модели результатов проверки коллизий

WarningLevel монотонен по расстоянию до ближайшей чужой границы:
меньше расстояние → выше уровень. VIOLATION зарезервирован за реально
обнаруженной коллизией, независимо от расстояния.

CollisionResult создаётся заново на каждую проверку и не сохраняется.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional


# =============================================================================
# ENUMS
# =============================================================================


class WarningLevel(IntEnum):
    """Уровень предупреждения (упорядоченный)."""

    SAFE = 0  # > 100 м
    CAUTION = 1  # 50–100 м
    WARNING = 2  # 25–50 м
    DANGER = 3  # < 25 м
    VIOLATION = 4  # коллизия обнаружена

    @property
    def description(self) -> str:
        return self.name.lower()


class CollisionType(str, Enum):
    """Тип коллизии."""

    POINT_IN_TERRITORY = "point_in_territory"
    PATH_CROSSES_TERRITORY = "path_crosses_territory"
    SELF_INTERSECTION = "self_intersection"


class RejectReason(str, Enum):
    """Причина отклонения точки трекером. Путь при отклонении не меняется."""

    TOO_CLOSE = "too_close"
    WOULD_SELF_INTERSECT = "would_self_intersect"
    TOO_FAST = "too_fast"


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class CollisionResult:
    """Результат проверки коллизий для одной точки / ребра / многоугольника."""

    has_collision: bool
    collision_type: Optional[CollisionType]
    nearest_distance_m: Optional[float]
    warning_level: WarningLevel

    # Диагностика
    message: Optional[str] = None
    territory_id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.has_collision != (self.collision_type is not None):
            raise ValueError("collision_type must be set if and only if has_collision is True")
        if self.has_collision and self.warning_level != WarningLevel.VIOLATION:
            raise ValueError("A detected collision must carry WarningLevel.VIOLATION")

    @classmethod
    def safe(cls, nearest_distance_m: Optional[float] = None) -> "CollisionResult":
        """Результат без коллизии и без предупреждения."""
        return cls(
            has_collision=False,
            collision_type=None,
            nearest_distance_m=nearest_distance_m,
            warning_level=WarningLevel.SAFE,
        )

    @classmethod
    def violation(
        cls,
        collision_type: CollisionType,
        message: str,
        territory_id: Optional[str] = None,
        nearest_distance_m: Optional[float] = 0.0,
    ) -> "CollisionResult":
        """Результат с обнаруженной коллизией (расстояние до чужой границы 0)."""
        return cls(
            has_collision=True,
            collision_type=collision_type,
            nearest_distance_m=nearest_distance_m,
            warning_level=WarningLevel.VIOLATION,
            message=message,
            territory_id=territory_id,
        )
