"""
TerritoryCollisionEngine — проверка коллизий с чужими территориями

Порядок проверок для новой точки пути (check):
1. Точка внутри чужой территории → POINT_IN_TERRITORY (VIOLATION)
2. Новое ребро (предыдущая → новая точка) пересекает ребро территории
   → PATH_CROSSES_TERRITORY (VIOLATION)
3. Иначе — ближайшее расстояние до рёбер всех территорий и уровень
   предупреждения по порогам ProximityConfig

Пороги (границы включительно относятся к более строгому уровню):
- d ≤ 25 м  → DANGER
- d ≤ 50 м  → WARNING
- d ≤ 100 м → CAUTION
- d > 100 м → SAFE

Проверка никогда не бросает исключений на данных: пустой список
территорий — валидный вход, результат SAFE без расстояния.
Список территорий — read-only снапшот на время вызова; движок его не хранит.

Фильтрация собственных территорий игрока — ответственность вызывающего кода
(см. foreign_territories).
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

from src.core.domain.collision import CollisionResult, CollisionType, WarningLevel
from src.core.domain.territory import ClosedPolygon, Territory
from src.core.math.coordinate_math import (
    bounding_box,
    point_in_polygon,
    point_to_segment_distance_meters,
    segments_intersect,
)
from src.core.math.geo_point import GeoPoint

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class ProximityConfig:
    """Пороги предупреждений о близости к чужой границе, метры."""

    caution_m: float = 100.0
    warning_m: float = 50.0
    danger_m: float = 25.0

    def __post_init__(self) -> None:
        if not (0 < self.danger_m < self.warning_m < self.caution_m):
            raise ValueError(
                f"Thresholds must satisfy 0 < danger_m < warning_m < caution_m, "
                f"got {self.danger_m}/{self.warning_m}/{self.caution_m}"
            )

    def level_for(self, distance_m: float) -> WarningLevel:
        """
        Уровень предупреждения для расстояния.

        Монотонен: меньше расстояние → не ниже уровень. VIOLATION не возвращается.
        """
        if distance_m <= self.danger_m:
            return WarningLevel.DANGER
        if distance_m <= self.warning_m:
            return WarningLevel.WARNING
        if distance_m <= self.caution_m:
            return WarningLevel.CAUTION
        return WarningLevel.SAFE


# =============================================================================
# ENGINE
# =============================================================================


class TerritoryCollisionEngine:
    """
    Движок коллизий: точка/ребро/многоугольник против снапшота территорий.

    Bounding box каждой территории используется как пре-фильтр для
    проверок вхождения и пересечения; ближайшее расстояние считается
    по всем территориям снапшота.
    """

    def __init__(self, config: ProximityConfig | None = None):
        self.config = config or ProximityConfig()

    def check(
        self,
        point: GeoPoint,
        territories: Iterable[Territory] = (),
        previous: Optional[GeoPoint] = None,
    ) -> CollisionResult:
        """
        Проверка новой точки пути и ребра (previous → point).

        Args:
            point: Новая точка (сырой датум)
            territories: Снапшот чужих территорий
            previous: Предыдущая принятая точка; None для первой точки пути

        Returns:
            CollisionResult

        Raises:
            TypeError: Если point/previous не GeoPoint (например, DisplayPoint)
        """
        _require_geo_point(point, "point")
        if previous is not None:
            _require_geo_point(previous, "previous")

        snapshot = list(territories)
        if not snapshot:
            return CollisionResult.safe()

        # 1. Точка внутри территории
        for territory in snapshot:
            polygon = territory.polygon
            if polygon.bounding_box.contains(point) and point_in_polygon(point, polygon.vertices):
                return self._violation(
                    CollisionType.POINT_IN_TERRITORY,
                    f"Point is inside territory {territory.id}",
                    territory.id,
                )

        # 2. Новое ребро пересекает границу территории
        if previous is not None and previous != point:
            edge_box = bounding_box([previous, point])
            for territory in snapshot:
                if not territory.polygon.bounding_box.intersects(edge_box):
                    continue
                for a, b in territory.polygon.edges():
                    if segments_intersect(previous, point, a, b):
                        return self._violation(
                            CollisionType.PATH_CROSSES_TERRITORY,
                            f"Path crosses the boundary of territory {territory.id}",
                            territory.id,
                        )

        # 3. Близость
        nearest_m: Optional[float] = None
        nearest_id: Optional[str] = None
        for territory in snapshot:
            d = _nearest_distance([point], territory.polygon.edges())
            if d is not None and (nearest_m is None or d < nearest_m):
                nearest_m, nearest_id = d, territory.id

        return self._proximity(nearest_m, nearest_id)

    def check_polygon(
        self,
        polygon: ClosedPolygon,
        territories: Iterable[Territory] = (),
    ) -> CollisionResult:
        """
        Финальная проверка замкнутого многоугольника перед сохранением.

        Коллизия, если:
        - вершина кандидата внутри территории
        - вершина территории внутри кандидата (кандидат охватывает территорию)
        - ребро кандидата пересекает ребро территории

        Returns:
            CollisionResult; без коллизии — ближайшее расстояние между
            вершинами и рёбрами обоих многоугольников
        """
        if not isinstance(polygon, ClosedPolygon):
            raise TypeError(f"Expected ClosedPolygon, got {type(polygon).__name__}")

        snapshot = list(territories)
        if not snapshot:
            return CollisionResult.safe()

        candidate_box = polygon.bounding_box
        candidate_edges = polygon.edges()

        for territory in snapshot:
            other = territory.polygon
            if not other.bounding_box.intersects(candidate_box):
                continue

            for vertex in polygon.vertices:
                if point_in_polygon(vertex, other.vertices):
                    return self._violation(
                        CollisionType.POINT_IN_TERRITORY,
                        f"Polygon vertex is inside territory {territory.id}",
                        territory.id,
                    )

            for vertex in other.vertices:
                if point_in_polygon(vertex, polygon.vertices):
                    return self._violation(
                        CollisionType.POINT_IN_TERRITORY,
                        f"Polygon encloses territory {territory.id}",
                        territory.id,
                    )

            other_edges = other.edges()
            for a1, a2 in candidate_edges:
                for b1, b2 in other_edges:
                    if segments_intersect(a1, a2, b1, b2):
                        return self._violation(
                            CollisionType.PATH_CROSSES_TERRITORY,
                            f"Polygon edge crosses the boundary of territory {territory.id}",
                            territory.id,
                        )

        nearest_m: Optional[float] = None
        nearest_id: Optional[str] = None
        for territory in snapshot:
            other = territory.polygon
            for d in (
                _nearest_distance(polygon.vertices, other.edges()),
                _nearest_distance(other.vertices, candidate_edges),
            ):
                if d is not None and (nearest_m is None or d < nearest_m):
                    nearest_m, nearest_id = d, territory.id

        return self._proximity(nearest_m, nearest_id)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _violation(
        self, collision_type: CollisionType, message: str, territory_id: str
    ) -> CollisionResult:
        logger.warning("Collision detected: %s (%s)", collision_type.value, message)
        return CollisionResult.violation(collision_type, message, territory_id=territory_id)

    def _proximity(self, nearest_m: Optional[float], territory_id: Optional[str]) -> CollisionResult:
        if nearest_m is None:
            return CollisionResult.safe()

        level = self.config.level_for(nearest_m)
        if level >= WarningLevel.DANGER:
            logger.warning("Territory %s is %.1f m away (%s)", territory_id, nearest_m, level.description)
        else:
            logger.debug("Territory %s is %.1f m away (%s)", territory_id, nearest_m, level.description)

        return CollisionResult(
            has_collision=False,
            collision_type=None,
            nearest_distance_m=nearest_m,
            warning_level=level,
            territory_id=territory_id,
        )


# =============================================================================
# INTERNAL
# =============================================================================


def _require_geo_point(value: object, name: str) -> None:
    if not isinstance(value, GeoPoint):
        raise TypeError(f"{name} must be a raw-datum GeoPoint, got {type(value).__name__}")


def _nearest_distance(
    points: Sequence[GeoPoint], edges: Sequence[Tuple[GeoPoint, GeoPoint]]
) -> Optional[float]:
    """Минимальное расстояние от набора точек до набора рёбер, метры."""
    nearest_m: Optional[float] = None
    for point in points:
        for a, b in edges:
            d = point_to_segment_distance_meters(point, a, b)
            if nearest_m is None or d < nearest_m:
                nearest_m = d
    return nearest_m
