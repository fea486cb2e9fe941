"""
MovementSpeedGuard — контроль скорости перемещения игрока

Захват территории допускается только пешком:
- speed > warning_kmh → WARNING (точка принимается, игрок предупреждён)
- speed > stop_kmh    → STOP (точка отклоняется как TOO_FAST)

Временные метки передаёт вызывающий код (секунды, монотонные).
Без временных меток скорость не проверяется.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from src.core.math.coordinate_math import distance_meters
from src.core.math.geo_point import GeoPoint

# м/с → км/ч
MPS_TO_KMH = 3.6


class SpeedStatus(str, Enum):
    """Статус скорости."""

    NORMAL = "normal"
    WARNING = "warning"
    STOP = "stop"


@dataclass(frozen=True)
class SpeedGuardConfig:
    """Пороги скорости, км/ч."""

    warning_kmh: float = 15.0
    stop_kmh: float = 30.0

    def __post_init__(self) -> None:
        if not (0 < self.warning_kmh < self.stop_kmh):
            raise ValueError(
                f"Thresholds must satisfy 0 < warning_kmh < stop_kmh, "
                f"got {self.warning_kmh}/{self.stop_kmh}"
            )


@dataclass(frozen=True)
class SpeedCheck:
    """Результат проверки скорости."""

    status: SpeedStatus
    speed_kmh: Optional[float]  # None если интервал времени не положителен
    distance_m: float
    elapsed_s: float


class MovementSpeedGuard:
    """Оценка скорости между двумя последовательными фиксациями."""

    def __init__(self, config: SpeedGuardConfig | None = None):
        self.config = config or SpeedGuardConfig()

    def evaluate(
        self,
        previous: GeoPoint,
        previous_ts: float,
        current: GeoPoint,
        current_ts: float,
    ) -> SpeedCheck:
        """
        Скорость на отрезке previous → current.

        Неположительный интервал времени (дубликат фиксации, сбой часов)
        даёт NORMAL без скорости.
        """
        distance = distance_meters(previous, current)
        elapsed = current_ts - previous_ts

        if elapsed <= 0:
            return SpeedCheck(
                status=SpeedStatus.NORMAL, speed_kmh=None, distance_m=distance, elapsed_s=elapsed
            )

        speed_kmh = distance / elapsed * MPS_TO_KMH

        if speed_kmh > self.config.stop_kmh:
            status = SpeedStatus.STOP
        elif speed_kmh > self.config.warning_kmh:
            status = SpeedStatus.WARNING
        else:
            status = SpeedStatus.NORMAL

        return SpeedCheck(status=status, speed_kmh=speed_kmh, distance_m=distance, elapsed_s=elapsed)
