"""
AreaCalculator — финальная площадь замкнутого многоугольника

Два метода:
- "equirectangular" (default): shoelace в локальной проекции с
  cos-широтным масштабированием (coordinate_math.signed_area)
- "spherical": аппроксимация сферического избытка
  (coordinate_math.spherical_signed_area)

На масштабе сотен метров методы расходятся менее чем на 0.5%.
Площадь используется движком коллизий и передаётся слою хранения
(поле area).
"""

from collections import abc
from enum import Enum
from typing import TYPE_CHECKING, Sequence, Union

from src.core.math.coordinate_math import (
    DegenerateGeometryError,
    signed_area,
    spherical_signed_area,
)
from src.core.math.geo_point import GeoPoint

if TYPE_CHECKING:
    from src.core.domain.territory import ClosedPolygon


class AreaMethod(str, Enum):
    """Метод вычисления площади."""

    EQUIRECTANGULAR = "equirectangular"
    SPHERICAL = "spherical"


class AreaCalculator:
    """Площадь замкнутого многоугольника в м²."""

    def __init__(self, method: Union[AreaMethod, str] = AreaMethod.EQUIRECTANGULAR):
        self.method = AreaMethod(method)

    def area_m2(self, polygon: Union["ClosedPolygon", Sequence[GeoPoint]]) -> float:
        """
        Площадь многоугольника, м² (всегда >= 0).

        Args:
            polygon: ClosedPolygon или последовательность GeoPoint
                (первая вершина не дублируется)

        Raises:
            DegenerateGeometryError: Если вершин меньше 3
        """
        vertices: Sequence[GeoPoint] = (
            polygon if isinstance(polygon, abc.Sequence) else polygon.vertices
        )
        if len(vertices) < 3:
            raise DegenerateGeometryError(
                f"Area requires at least 3 vertices, got {len(vertices)}"
            )

        if self.method == AreaMethod.SPHERICAL:
            return abs(spherical_signed_area(vertices))
        return abs(signed_area(vertices))
