"""
CoordinateMath — геометрические примитивы для сырого датума (WGS-84)

Модуль содержит все численные операции над координатами:
- Расстояние по большому кругу (haversine)
- Пересечение отрезков (ориентационный тест, cross product)
- Точка в многоугольнике (ray casting, правило even-odd)
- Расстояние от точки до отрезка (локальная equirectangular проекция)
- Знаковая площадь многоугольника (shoelace в локальной проекции, м²)

Соглашение об осях: X = longitude, Y = latitude (для ориентационных тестов
в градусах), X = восток, Y = север (для метрических проекций).

ОГРАНИЧЕНИЯ:
1. Многоугольники, пересекающие антимеридиан (±180°) или близкие к полюсам,
   НЕ поддерживаются: check_supported_geometry бросает UnsupportedGeometryError.
   Для отдельных функций результат в этих областях не определён.
2. Локальная проекция точна до долей метра на масштабе нескольких километров,
   чего достаточно для порогов предупреждений 25/50/100 м.
"""

import math
from typing import Final, Optional, Sequence

from src.core.math.geo_point import BoundingBox, GeoPoint
from src.core.math.numerical_safeguards import (
    EPS_CALC,
    EPS_ORIENTATION,
    clamp,
    safe_divide,
    sign_with_tolerance,
)

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Средний радиус Земли (IUGG), метры
EARTH_RADIUS_M: Final[float] = 6_371_008.8

# Метров в одном градусе дуги большого круга
METERS_PER_DEGREE: Final[float] = EARTH_RADIUS_M * math.pi / 180.0

# Полярный предел: выше этой широты cos(lat) → 0 и проекция вырождается
POLAR_LATITUDE_LIMIT: Final[float] = 89.9

# Максимальный охват по долготе; больше означает пересечение антимеридиана
MAX_LONGITUDE_SPAN: Final[float] = 180.0


# =============================================================================
# EXCEPTIONS
# =============================================================================


class GeometryError(ValueError):
    """Базовая ошибка геометрии. Локальна для одного вызова."""


class DegenerateGeometryError(GeometryError):
    """
    Вырожденная геометрия: меньше 3 вершин, ребро нулевой длины,
    самопересечение у многоугольника, который обязан быть простым.
    """


class UnsupportedGeometryError(GeometryError):
    """Геометрия вне поддерживаемой области (антимеридиан, полюса)."""


# =============================================================================
# РАССТОЯНИЯ
# =============================================================================


def distance_meters(a: GeoPoint, b: GeoPoint) -> float:
    """
    Расстояние по большому кругу (haversine), метры.

    Args:
        a: Первая точка
        b: Вторая точка

    Returns:
        Расстояние в метрах (>= 0)
    """
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    dlat = lat2 - lat1
    dlon = math.radians(b.longitude - a.longitude)

    h = math.sin(dlat / 2.0) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2.0) ** 2
    # clamp защищает asin от 1.0000000000000002
    return 2.0 * EARTH_RADIUS_M * math.asin(math.sqrt(clamp(h, 0.0, 1.0)))


def path_length_meters(points: Sequence[GeoPoint], closed: bool = False) -> float:
    """
    Суммарная длина ломаной, метры.

    Args:
        points: Вершины в порядке обхода
        closed: Учитывать замыкающее ребро (последняя → первая)

    Returns:
        Длина в метрах; 0.0 для менее чем 2 точек
    """
    if len(points) < 2:
        return 0.0

    total = sum(distance_meters(points[i], points[i + 1]) for i in range(len(points) - 1))
    if closed and len(points) >= 3:
        total += distance_meters(points[-1], points[0])
    return total


def degrees_for_meters(meters: float, latitude: float) -> tuple[float, float]:
    """
    Приращения (dlat, dlon) в градусах, соответствующие расстоянию в метрах.

    Используется для расширения bounding box на радиус предупреждения.
    """
    dlat = meters / METERS_PER_DEGREE
    cos_lat = max(math.cos(math.radians(latitude)), EPS_CALC)
    dlon = meters / (METERS_PER_DEGREE * cos_lat)
    return dlat, dlon


def offset_point(origin: GeoPoint, north_m: float, east_m: float) -> GeoPoint:
    """
    Точка, смещённая от origin на north_m к северу и east_m к востоку.

    Локальная equirectangular аппроксимация; согласована с
    point_to_segment_distance_meters и signed_area на масштабе километров.
    """
    dlat, _ = degrees_for_meters(north_m, origin.latitude)
    _, dlon = degrees_for_meters(east_m, origin.latitude)
    return GeoPoint(latitude=origin.latitude + dlat, longitude=origin.longitude + dlon)


def _project(point: GeoPoint, ref_lat_rad: float, ref_lon: float, ref_lat: float) -> tuple[float, float]:
    """Локальная equirectangular проекция в метры относительно опорной точки."""
    x = (point.longitude - ref_lon) * METERS_PER_DEGREE * math.cos(ref_lat_rad)
    y = (point.latitude - ref_lat) * METERS_PER_DEGREE
    return x, y


def point_to_segment_distance_meters(point: GeoPoint, a: GeoPoint, b: GeoPoint) -> float:
    """
    Расстояние от точки до отрезка [a, b], метры.

    Отрезок проецируется в локальную плоскость с центром в point
    (cos-широтное масштабирование долготы), затем берётся ортогональная
    проекция, ограниченная концами отрезка.

    Для вырожденного отрезка (a == b) возвращает расстояние до a.
    """
    ref_lat_rad = math.radians(point.latitude)
    ax, ay = _project(a, ref_lat_rad, point.longitude, point.latitude)
    bx, by = _project(b, ref_lat_rad, point.longitude, point.latitude)

    dx = bx - ax
    dy = by - ay

    # Параметр проекции начала координат (point) на прямую ab
    t = safe_divide(-(ax * dx + ay * dy), dx * dx + dy * dy, eps=EPS_CALC, fallback=0.0)
    t = clamp(t, 0.0, 1.0)

    cx = ax + t * dx
    cy = ay + t * dy
    return math.hypot(cx, cy)


# =============================================================================
# ПЕРЕСЕЧЕНИЕ ОТРЕЗКОВ
# =============================================================================


def orientation(a: GeoPoint, b: GeoPoint, c: GeoPoint) -> int:
    """
    Ориентация тройки точек (x = longitude, y = latitude).

    Returns:
        +1 — поворот против часовой стрелки
        -1 — по часовой стрелке
         0 — коллинеарны (в пределах EPS_ORIENTATION)
    """
    cross = (b.longitude - a.longitude) * (c.latitude - a.latitude) - (
        b.latitude - a.latitude
    ) * (c.longitude - a.longitude)
    return sign_with_tolerance(cross, EPS_ORIENTATION)


def _on_segment(p: GeoPoint, a: GeoPoint, b: GeoPoint) -> bool:
    """Точка p, коллинеарная [a, b], лежит в охвате отрезка (границы включительно)."""
    return (
        min(a.longitude, b.longitude) <= p.longitude <= max(a.longitude, b.longitude)
        and min(a.latitude, b.latitude) <= p.latitude <= max(a.latitude, b.latitude)
    )


def segments_intersect(a1: GeoPoint, a2: GeoPoint, b1: GeoPoint, b2: GeoPoint) -> bool:
    """
    Есть ли у отрезков [a1, a2] и [b1, b2] общая точка.

    Ориентационный тест (cross product):
    - собственное пересечение (концы каждого отрезка строго по разные
      стороны другого) → True
    - касание: конец одного отрезка лежит на другом (в том числе через
      вершину и общий конец) → True
    - коллинеарное перекрытие → True

    Общий конец смежных рёбер тоже даёт True, поэтому вызывающий код
    сравнивает только несмежные рёбра.
    """
    d1 = orientation(b1, b2, a1)
    d2 = orientation(b1, b2, a2)
    d3 = orientation(a1, a2, b1)
    d4 = orientation(a1, a2, b2)

    if d1 * d2 < 0 and d3 * d4 < 0:
        return True

    return (
        (d1 == 0 and _on_segment(a1, b1, b2))
        or (d2 == 0 and _on_segment(a2, b1, b2))
        or (d3 == 0 and _on_segment(b1, a1, a2))
        or (d4 == 0 and _on_segment(b2, a1, a2))
    )


def find_self_intersection(
    vertices: Sequence[GeoPoint],
    closed: bool = True,
) -> Optional[tuple[int, int]]:
    """
    Полный O(n²) поиск пересечения несмежных рёбер.

    Ребро i — отрезок (vertices[i], vertices[i + 1]); для closed=True
    добавляется замыкающее ребро (vertices[n-1], vertices[0]) с индексом n-1.

    Args:
        vertices: Вершины в порядке обхода (первая вершина не дублируется)
        closed: Проверять как замкнутый многоугольник

    Returns:
        (i, j) — индексы первой найденной пары пересекающихся рёбер, иначе None
    """
    n = len(vertices)
    edge_count = n if closed else n - 1
    if edge_count < 3:
        return None

    def edge(k: int) -> tuple[GeoPoint, GeoPoint]:
        return vertices[k], vertices[(k + 1) % n]

    for i in range(edge_count):
        a1, a2 = edge(i)
        for j in range(i + 2, edge_count):
            # Первое и замыкающее рёбра смежны через vertices[0]
            if closed and i == 0 and j == edge_count - 1:
                continue
            b1, b2 = edge(j)
            if segments_intersect(a1, a2, b1, b2):
                return i, j

    return None


# =============================================================================
# ТОЧКА В МНОГОУГОЛЬНИКЕ
# =============================================================================


def point_in_polygon(point: GeoPoint, polygon: Sequence[GeoPoint]) -> bool:
    """
    Ray casting (even-odd) по рёбрам многоугольника.

    Многоугольник считается простым; вызывающий код обязан проверить это
    заранее. Точки ровно на границе классифицируются произвольно.

    Args:
        point: Проверяемая точка
        polygon: Вершины (первая не дублируется, замыкание неявное)

    Returns:
        True если точка внутри
    """
    n = len(polygon)
    if n < 3:
        return False

    x = point.longitude
    y = point.latitude
    inside = False

    j = n - 1
    for i in range(n):
        xi, yi = polygon[i].longitude, polygon[i].latitude
        xj, yj = polygon[j].longitude, polygon[j].latitude

        # (yi > y) != (yj > y) гарантирует yj != yi
        if (yi > y) != (yj > y):
            x_cross = (xj - xi) * (y - yi) / (yj - yi) + xi
            if x < x_cross:
                inside = not inside
        j = i

    return inside


# =============================================================================
# ПЛОЩАДЬ
# =============================================================================


def signed_area(polygon: Sequence[GeoPoint]) -> float:
    """
    Знаковая площадь многоугольника, м².

    Shoelace в локальной equirectangular проекции: опорная широта — средняя
    широта вершин (cos-масштабирование долготы), опорная долгота — долгота
    первой вершины. Модуль — площадь на местности; знак показывает порядок
    обхода (+ против часовой стрелки, если смотреть с севера вверх).

    Модуль площади инвариантен к развороту порядка вершин и к циклическому
    сдвигу начальной вершины (опорная широта от них не зависит).

    Raises:
        DegenerateGeometryError: Если вершин меньше 3
    """
    n = len(polygon)
    if n < 3:
        raise DegenerateGeometryError(f"Polygon needs at least 3 vertices, got {n}")

    ref_lat = math.fsum(p.latitude for p in polygon) / n
    ref_lat_rad = math.radians(ref_lat)
    ref_lon = polygon[0].longitude

    projected = [_project(p, ref_lat_rad, ref_lon, ref_lat) for p in polygon]

    terms = []
    for i in range(n):
        x1, y1 = projected[i]
        x2, y2 = projected[(i + 1) % n]
        terms.append(x1 * y2 - x2 * y1)

    return math.fsum(terms) / 2.0


def spherical_signed_area(polygon: Sequence[GeoPoint]) -> float:
    """
    Знаковая площадь на сфере, м² (аппроксимация сферического избытка).

    Формула: A = R² / 2 · Σ (λ2 − λ1) · (2 + sin φ1 + sin φ2)

    Знак противоположен signed_area для того же порядка обхода.

    Raises:
        DegenerateGeometryError: Если вершин меньше 3
    """
    n = len(polygon)
    if n < 3:
        raise DegenerateGeometryError(f"Polygon needs at least 3 vertices, got {n}")

    terms = []
    for i in range(n):
        current = polygon[i]
        following = polygon[(i + 1) % n]
        lat1 = math.radians(current.latitude)
        lat2 = math.radians(following.latitude)
        dlon = math.radians(following.longitude - current.longitude)
        terms.append(dlon * (2.0 + math.sin(lat1) + math.sin(lat2)))

    return math.fsum(terms) * EARTH_RADIUS_M * EARTH_RADIUS_M / 2.0


# =============================================================================
# ОХВАТ И ПОДДЕРЖИВАЕМАЯ ОБЛАСТЬ
# =============================================================================


def bounding_box(points: Sequence[GeoPoint]) -> BoundingBox:
    """
    Bounding box набора точек.

    Raises:
        DegenerateGeometryError: Если набор пуст
    """
    if not points:
        raise DegenerateGeometryError("Cannot compute bounding box of empty point set")

    lats = [p.latitude for p in points]
    lons = [p.longitude for p in points]
    return BoundingBox(min_lat=min(lats), max_lat=max(lats), min_lon=min(lons), max_lon=max(lons))


def check_supported_geometry(points: Sequence[GeoPoint]) -> None:
    """
    Проверка, что геометрия лежит в поддерживаемой области.

    Raises:
        UnsupportedGeometryError: охват по долготе > 180° (антимеридиан)
            или вершина за полярным пределом
    """
    if not points:
        return

    box = bounding_box(points)
    if box.max_lon - box.min_lon > MAX_LONGITUDE_SPAN:
        raise UnsupportedGeometryError(
            f"Longitude span {box.max_lon - box.min_lon:.3f}° exceeds {MAX_LONGITUDE_SPAN}°; "
            f"antimeridian-crossing polygons are not supported"
        )
    if max(abs(box.min_lat), abs(box.max_lat)) >= POLAR_LATITUDE_LIMIT:
        raise UnsupportedGeometryError(
            f"Latitude beyond ±{POLAR_LATITUDE_LIMIT}°; polar polygons are not supported"
        )
