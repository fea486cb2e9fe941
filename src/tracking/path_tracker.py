"""
PathTracker — state machine активной попытки захвата территории

State Machine:
- EMPTY → TRACKING (первая принятая точка)
- TRACKING → CLOSED (check_closure, терминальное)
- EMPTY | TRACKING → CANCELLED (cancel, терминальное)

В терминальном состоянии add_point и check_closure бросают PathStateError;
повторный cancel после CANCELLED ничего не делает.

Обработка новой фиксации (add_point):
1. Anti-jitter: ближе min_point_distance_m к последней точке → TOO_CLOSE
2. Скорость (только если переданы временные метки): STOP → TOO_FAST
3. Новое ребро пересекает несмежное ребро пути → WOULD_SELF_INTERSECT
4. Точка добавляется в путь
5. Проверка новой точки и ребра против чужих территорий

Отклонённая точка не меняет путь. Коллизия с территорией — не отклонение:
результат возвращается вызывающему коду, который решает, блокировать ли
дальнейший рост пути.

Все координаты — сырой датум (GeoPoint). DisplayPoint отклоняется с TypeError.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

from src.collision.engine import TerritoryCollisionEngine
from src.core.domain.collision import CollisionResult, CollisionType, RejectReason
from src.core.domain.territory import ClosedPolygon, Territory
from src.core.math.area import AreaCalculator
from src.core.math.coordinate_math import GeometryError, distance_meters
from src.core.math.geo_point import GeoPoint
from src.core.math.numerical_safeguards import validate_positive
from src.tracking.self_intersection import SelfIntersectionDetector
from src.tracking.speed_guard import MovementSpeedGuard, SpeedCheck, SpeedStatus

logger = logging.getLogger(__name__)


# =============================================================================
# EXCEPTIONS
# =============================================================================


class PathStateError(RuntimeError):
    """Операция недопустима в текущем состоянии трекера."""


# =============================================================================
# ENUMS
# =============================================================================


class TrackerState(str, Enum):
    """Состояние трекера."""

    EMPTY = "empty"
    TRACKING = "tracking"
    CLOSED = "closed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (TrackerState.CLOSED, TrackerState.CANCELLED)


class ClosureFailure(str, Enum):
    """Почему путь (ещё) не замкнут."""

    NOT_TRACKING = "not_tracking"  # путь ещё не начат (EMPTY)
    INSUFFICIENT_POINTS = "insufficient_points"
    TOO_FAR_FROM_START = "too_far_from_start"
    SELF_INTERSECTION = "self_intersection"
    DEGENERATE = "degenerate"


# =============================================================================
# CONFIG & RESULTS
# =============================================================================


@dataclass(frozen=True)
class PathTrackerConfig:
    """Параметры трекера, метры."""

    min_point_distance_m: float = 10.0  # Anti-jitter фильтр
    closure_tolerance_m: float = 30.0  # Радиус замыкания вокруг первой точки
    min_closure_points: int = 3

    def __post_init__(self) -> None:
        validate_positive(self.min_point_distance_m, "min_point_distance_m")
        validate_positive(self.closure_tolerance_m, "closure_tolerance_m")
        if self.min_closure_points < 3:
            raise ValueError(f"min_closure_points must be >= 3, got {self.min_closure_points}")


@dataclass(frozen=True)
class AddPointResult:
    """Результат add_point."""

    accepted: bool
    reject_reason: Optional[RejectReason]
    collision: Optional[CollisionResult]  # None для TOO_CLOSE / TOO_FAST
    point_count: int  # Длина пути после вызова
    distance_from_last_m: Optional[float]  # None для первой точки
    speed: Optional[SpeedCheck] = None


@dataclass(frozen=True)
class ClosureResult:
    """Результат check_closure."""

    closed: bool
    polygon: Optional[ClosedPolygon]
    area_m2: Optional[float]
    distance_to_start_m: Optional[float]
    failure: Optional[ClosureFailure] = None


# =============================================================================
# TRACKER
# =============================================================================


class PathTracker:
    """
    Владелец пути одной попытки захвата.

    Единственный писатель пути. Не потокобезопасен: вызовы сериализует
    вызывающий код.
    """

    def __init__(
        self,
        config: PathTrackerConfig | None = None,
        detector: SelfIntersectionDetector | None = None,
        engine: TerritoryCollisionEngine | None = None,
        speed_guard: MovementSpeedGuard | None = None,
        area_calculator: AreaCalculator | None = None,
    ):
        self.config = config or PathTrackerConfig()
        self.detector = detector or SelfIntersectionDetector()
        self.engine = engine or TerritoryCollisionEngine()
        self.speed_guard = speed_guard or MovementSpeedGuard()
        self.area_calculator = area_calculator or AreaCalculator()

        self._state = TrackerState.EMPTY
        self._points: List[GeoPoint] = []
        self._total_distance_m = 0.0
        self._last_timestamp_s: Optional[float] = None
        self._last_collision: Optional[CollisionResult] = None
        self._polygon: Optional[ClosedPolygon] = None

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def state(self) -> TrackerState:
        return self._state

    @property
    def points(self) -> tuple[GeoPoint, ...]:
        return tuple(self._points)

    @property
    def point_count(self) -> int:
        return len(self._points)

    @property
    def total_distance_m(self) -> float:
        """Длина пройденного пути (без замыкающего ребра)."""
        return self._total_distance_m

    @property
    def last_collision(self) -> Optional[CollisionResult]:
        return self._last_collision

    @property
    def polygon(self) -> Optional[ClosedPolygon]:
        """Замкнутый многоугольник после перехода в CLOSED."""
        return self._polygon

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def add_point(
        self,
        raw: GeoPoint,
        territories: Iterable[Territory] = (),
        timestamp_s: Optional[float] = None,
    ) -> AddPointResult:
        """
        Обработка новой фиксации GPS.

        Args:
            raw: Точка в сыром датуме
            territories: Снапшот чужих территорий на момент вызова
            timestamp_s: Время фиксации (секунды) для контроля скорости

        Returns:
            AddPointResult

        Raises:
            TypeError: Если raw не GeoPoint
            PathStateError: Трекер в терминальном состоянии
        """
        if not isinstance(raw, GeoPoint):
            raise TypeError(f"raw must be a raw-datum GeoPoint, got {type(raw).__name__}")
        if self._state.is_terminal:
            raise PathStateError(f"Cannot add points in state {self._state.value}")

        previous = self._points[-1] if self._points else None
        distance_from_last: Optional[float] = None
        speed: Optional[SpeedCheck] = None

        if previous is not None:
            distance_from_last = distance_meters(previous, raw)

            # 1. Anti-jitter
            if distance_from_last < self.config.min_point_distance_m:
                return self._rejected(RejectReason.TOO_CLOSE, None, distance_from_last)

            # 2. Скорость
            if timestamp_s is not None and self._last_timestamp_s is not None:
                speed = self.speed_guard.evaluate(previous, self._last_timestamp_s, raw, timestamp_s)
                if speed.status == SpeedStatus.STOP:
                    logger.warning("Point rejected: moving too fast (%.1f km/h)", speed.speed_kmh)
                    return self._rejected(RejectReason.TOO_FAST, None, distance_from_last, speed)
                if speed.status == SpeedStatus.WARNING:
                    logger.warning("Moving fast: %.1f km/h", speed.speed_kmh)

            # 3. Самопересечение
            crossed = self.detector.check_new_edge(self._points, raw)
            if crossed is not None:
                collision = CollisionResult.violation(
                    CollisionType.SELF_INTERSECTION,
                    f"New edge crosses path edge {crossed}",
                    nearest_distance_m=None,
                )
                self._last_collision = collision
                logger.warning("Point rejected: new edge crosses path edge %d", crossed)
                return self._rejected(RejectReason.WOULD_SELF_INTERSECT, collision, distance_from_last, speed)

        # 4. Добавление
        self._points.append(raw)
        if distance_from_last is not None:
            self._total_distance_m += distance_from_last
        if timestamp_s is not None:
            self._last_timestamp_s = timestamp_s
        if self._state == TrackerState.EMPTY:
            self._state = TrackerState.TRACKING
            logger.info("Path tracking started")

        # 5. Чужие территории
        collision = self.engine.check(raw, territories, previous=previous)
        self._last_collision = collision

        logger.debug(
            "Point accepted: #%d, %.1f m total, level=%s",
            len(self._points),
            self._total_distance_m,
            collision.warning_level.description,
        )
        return AddPointResult(
            accepted=True,
            reject_reason=None,
            collision=collision,
            point_count=len(self._points),
            distance_from_last_m=distance_from_last,
            speed=speed,
        )

    def check_closure(self, raw: GeoPoint) -> ClosureResult:
        """
        Попытка замкнуть путь текущей фиксацией.

        Путь замкнут, если:
        - raw не дальше closure_tolerance_m от первой точки (включительно)
        - принято не менее min_closure_points точек
        - неявное замыкающее ребро (последняя → первая) не пересекает
          несмежные рёбра пути

        Сама фиксация raw в многоугольник не добавляется: вершины — принятые
        точки пути, первая хранится один раз.

        Returns:
            ClosureResult; при успехе трекер переходит в CLOSED

        Raises:
            TypeError: Если raw не GeoPoint
            PathStateError: Трекер в терминальном состоянии
        """
        if not isinstance(raw, GeoPoint):
            raise TypeError(f"raw must be a raw-datum GeoPoint, got {type(raw).__name__}")

        if self._state.is_terminal:
            raise PathStateError(f"Cannot close a path in state {self._state.value}")

        if self._state == TrackerState.EMPTY:
            return ClosureResult(
                closed=False,
                polygon=None,
                area_m2=None,
                distance_to_start_m=None,
                failure=ClosureFailure.NOT_TRACKING,
            )

        distance_to_start = distance_meters(raw, self._points[0])

        if len(self._points) < self.config.min_closure_points:
            return self._not_closed(ClosureFailure.INSUFFICIENT_POINTS, distance_to_start)

        if distance_to_start > self.config.closure_tolerance_m:
            return self._not_closed(ClosureFailure.TOO_FAR_FROM_START, distance_to_start)

        vertices = list(self._points)
        if vertices[-1] == vertices[0]:
            vertices.pop()

        if self.detector.check_closing_edge(vertices) is not None:
            logger.warning("Closure rejected: closing edge crosses the path")
            return self._not_closed(ClosureFailure.SELF_INTERSECTION, distance_to_start)

        try:
            polygon = ClosedPolygon.from_points(vertices, require_simple=False)
            area = self.area_calculator.area_m2(polygon)
        except GeometryError as e:
            logger.warning("Closure rejected: %s", e)
            return self._not_closed(ClosureFailure.DEGENERATE, distance_to_start)

        self._polygon = polygon
        self._state = TrackerState.CLOSED
        logger.info(
            "Path closed: %d vertices, %.0f m walked, area %.0f m²",
            len(polygon),
            self._total_distance_m,
            area,
        )
        return ClosureResult(
            closed=True,
            polygon=polygon,
            area_m2=area,
            distance_to_start_m=distance_to_start,
        )

    def cancel(self) -> None:
        """
        Отмена попытки захвата. Путь отбрасывается.

        Raises:
            PathStateError: Путь уже замкнут
        """
        if self._state == TrackerState.CLOSED:
            raise PathStateError("Cannot cancel a closed path")
        if self._state == TrackerState.CANCELLED:
            return

        logger.info("Path tracking cancelled after %d points", len(self._points))
        self._points.clear()
        self._total_distance_m = 0.0
        self._last_timestamp_s = None
        self._last_collision = None
        self._state = TrackerState.CANCELLED

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _rejected(
        self,
        reason: RejectReason,
        collision: Optional[CollisionResult],
        distance_from_last: Optional[float],
        speed: Optional[SpeedCheck] = None,
    ) -> AddPointResult:
        return AddPointResult(
            accepted=False,
            reject_reason=reason,
            collision=collision,
            point_count=len(self._points),
            distance_from_last_m=distance_from_last,
            speed=speed,
        )

    def _not_closed(self, failure: ClosureFailure, distance_to_start: float) -> ClosureResult:
        return ClosureResult(
            closed=False,
            polygon=None,
            area_m2=None,
            distance_to_start_m=distance_to_start,
            failure=failure,
        )
