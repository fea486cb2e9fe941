"""
TerritoryValidator — проверка замкнутого многоугольника перед захватом

Порядок проверок (первая неудачная останавливает проверку):
1. Количество вершин >= min_vertices
2. Периметр >= min_total_distance_m
3. Нет самопересечений (полная O(n²) проверка)
4. Площадь >= min_area_m2
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from src.core.domain.territory import ClosedPolygon
from src.core.math.area import AreaCalculator
from src.core.math.coordinate_math import find_self_intersection, path_length_meters
from src.core.math.numerical_safeguards import validate_non_negative

logger = logging.getLogger(__name__)


class ValidationFailure(str, Enum):
    """Причина отказа в захвате."""

    TOO_FEW_POINTS = "too_few_points"
    TOO_SHORT = "too_short"
    SELF_INTERSECTION = "self_intersection"
    TOO_SMALL = "too_small"


@dataclass(frozen=True)
class ValidationConfig:
    """Минимальные требования к территории."""

    min_vertices: int = 10
    min_total_distance_m: float = 50.0
    min_area_m2: float = 100.0

    def __post_init__(self) -> None:
        if self.min_vertices < 3:
            raise ValueError(f"min_vertices must be >= 3, got {self.min_vertices}")
        validate_non_negative(self.min_total_distance_m, "min_total_distance_m")
        validate_non_negative(self.min_area_m2, "min_area_m2")


@dataclass(frozen=True)
class ValidationResult:
    """Результат валидации."""

    is_valid: bool
    failure: Optional[ValidationFailure]
    message: Optional[str]
    total_distance_m: float
    area_m2: Optional[float]  # None если проверка остановилась до расчёта площади


class TerritoryValidator:
    """Валидатор территории-кандидата."""

    def __init__(
        self,
        config: ValidationConfig | None = None,
        area_calculator: AreaCalculator | None = None,
    ):
        self.config = config or ValidationConfig()
        self.area_calculator = area_calculator or AreaCalculator()

    def validate(self, polygon: ClosedPolygon) -> ValidationResult:
        vertices = polygon.vertices
        perimeter = path_length_meters(vertices, closed=True)

        if len(vertices) < self.config.min_vertices:
            return self._fail(
                ValidationFailure.TOO_FEW_POINTS,
                f"Not enough points: {len(vertices)} (need >= {self.config.min_vertices})",
                perimeter,
            )

        if perimeter < self.config.min_total_distance_m:
            return self._fail(
                ValidationFailure.TOO_SHORT,
                f"Path too short: {perimeter:.0f} m (need >= {self.config.min_total_distance_m:.0f} m)",
                perimeter,
            )

        if find_self_intersection(vertices, closed=True) is not None:
            return self._fail(
                ValidationFailure.SELF_INTERSECTION,
                "Path intersects itself",
                perimeter,
            )

        area = self.area_calculator.area_m2(polygon)
        if area < self.config.min_area_m2:
            return self._fail(
                ValidationFailure.TOO_SMALL,
                f"Area too small: {area:.0f} m² (need >= {self.config.min_area_m2:.0f} m²)",
                perimeter,
                area,
            )

        logger.info("Territory validation passed: %d points, %.0f m, %.0f m²", len(vertices), perimeter, area)
        return ValidationResult(
            is_valid=True,
            failure=None,
            message=None,
            total_distance_m=perimeter,
            area_m2=area,
        )

    def _fail(
        self,
        failure: ValidationFailure,
        message: str,
        perimeter: float,
        area: Optional[float] = None,
    ) -> ValidationResult:
        logger.info("Territory validation failed: %s", message)
        return ValidationResult(
            is_valid=False,
            failure=failure,
            message=message,
            total_distance_m=perimeter,
            area_m2=area,
        )
