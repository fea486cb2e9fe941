"""
SelfIntersectionDetector — инкрементальная проверка самопересечения пути

Инвариант: путь в состоянии TRACKING не содержит пересечений несмежных рёбер.

Новое ребро (последняя точка → новая точка) проверяется против всех рёбер,
кроме непосредственно предшествующего (общая вершина по построению).
Любая общая точка с несмежным ребром, включая проход через вершину,
считается пересечением.
O(n) на точку вместо полной O(n²) перепроверки пути.

Политика: reject-and-continue. Точка, создающая пересечение, отклоняется,
путь не меняется, игрок может пойти в другом направлении.
"""

from typing import Optional, Sequence

from src.core.math.coordinate_math import find_self_intersection, segments_intersect
from src.core.math.geo_point import GeoPoint


class SelfIntersectionDetector:
    """Stateless детектор; путь передаётся вызывающим кодом."""

    def check_new_edge(self, points: Sequence[GeoPoint], new_point: GeoPoint) -> Optional[int]:
        """
        Проверка ребра (points[-1] → new_point).

        Ребро i — отрезок (points[i], points[i + 1]). Проверяются рёбра
        i = 0 .. n-3; ребро n-2 смежно новому. Если new_point совпадает
        с points[0], новое ребро замыкает контур и ребро 0 тоже смежно ему.

        Returns:
            Индекс первого пересечённого ребра или None
        """
        n = len(points)
        if n < 3:
            return None

        last = points[-1]
        start = 1 if new_point == points[0] else 0
        for i in range(start, n - 2):
            if segments_intersect(last, new_point, points[i], points[i + 1]):
                return i
        return None

    def check_closing_edge(self, points: Sequence[GeoPoint]) -> Optional[int]:
        """
        Проверка неявного замыкающего ребра (points[-1] → points[0]).

        Смежные рёбра — первое (общая вершина points[0]) и последнее
        (общая вершина points[-1]); проверяются рёбра 1 .. n-3.

        Returns:
            Индекс первого пересечённого ребра или None
        """
        n = len(points)
        if n < 4:
            return None

        last = points[-1]
        first = points[0]
        for i in range(1, n - 2):
            if segments_intersect(last, first, points[i], points[i + 1]):
                return i
        return None

    def find_any(self, points: Sequence[GeoPoint], closed: bool = False) -> Optional[tuple[int, int]]:
        """Полная O(n²) проверка (финальная валидация, тесты)."""
        return find_self_intersection(points, closed=closed)
