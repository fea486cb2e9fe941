"""
Тесты для CoordinateMath

Проверяет:
1. Расстояния (haversine, длина пути, смещение точки)
2. Пересечение отрезков (собственное, касание, коллинеарное перекрытие)
3. Поиск самопересечений
4. Точку в многоугольнике против эталонной реализации (1000+ случайных многоугольников)
5. Знаковую площадь: инвариантность к развороту и циклическому сдвигу
6. Поддерживаемую область (антимеридиан, полюса)
"""

import math
import random

import pytest

from src.core.math import (
    EARTH_RADIUS_M,
    METERS_PER_DEGREE,
    DegenerateGeometryError,
    GeoPoint,
    UnsupportedGeometryError,
    bounding_box,
    check_supported_geometry,
    degrees_for_meters,
    distance_meters,
    find_self_intersection,
    offset_point,
    orientation,
    path_length_meters,
    point_in_polygon,
    point_to_segment_distance_meters,
    segments_intersect,
    signed_area,
    spherical_signed_area,
)

ORIGIN = GeoPoint(latitude=31.23, longitude=121.47)


def _pt(north_m: float, east_m: float) -> GeoPoint:
    return offset_point(ORIGIN, north_m, east_m)


def _square(side_m: float = 100.0) -> list[GeoPoint]:
    """Квадрат против часовой стрелки: юго-запад → юго-восток → северо-восток → северо-запад."""
    return [_pt(0, 0), _pt(0, side_m), _pt(side_m, side_m), _pt(side_m, 0)]


def _random_star_polygon(rng: random.Random) -> list[GeoPoint]:
    """
    Звёздный многоугольник со случайными углами и радиусами.

    Угловые зазоры между соседними вершинами меньше π, поэтому центр
    внутри и многоугольник простой.
    """
    k = rng.randint(4, 14)
    angles = [2.0 * math.pi * (i + 0.8 * rng.random()) / k for i in range(k)]
    center_n = rng.uniform(-500.0, 500.0)
    center_e = rng.uniform(-500.0, 500.0)
    vertices = []
    for angle in angles:
        radius = rng.uniform(20.0, 400.0)
        vertices.append(_pt(center_n + radius * math.sin(angle), center_e + radius * math.cos(angle)))
    return vertices


def _reference_even_odd(point: GeoPoint, polygon: list[GeoPoint]) -> bool:
    """Эталон: подсчёт пересечений вертикального луча вверх (x = lon, y = lat)."""
    x, y = point.longitude, point.latitude
    crossings = 0
    n = len(polygon)
    for i in range(n):
        x1, y1 = polygon[i].longitude, polygon[i].latitude
        x2, y2 = polygon[(i + 1) % n].longitude, polygon[(i + 1) % n].latitude
        if (x1 <= x < x2) or (x2 <= x < x1):
            y_at = y1 + (y2 - y1) * (x - x1) / (x2 - x1)
            if y_at > y:
                crossings += 1
    return crossings % 2 == 1


# =============================================================================
# РАССТОЯНИЯ
# =============================================================================


class TestDistance:
    """Тесты для distance_meters / path_length_meters / offset_point"""

    def test_one_degree_on_equator(self) -> None:
        """Один градус долготы на экваторе = METERS_PER_DEGREE"""
        d = distance_meters(GeoPoint(0.0, 0.0), GeoPoint(0.0, 1.0))
        assert d == pytest.approx(METERS_PER_DEGREE, rel=1e-12)
        assert METERS_PER_DEGREE == pytest.approx(EARTH_RADIUS_M * math.pi / 180.0)

    def test_zero_and_symmetry(self) -> None:
        a = _pt(0, 0)
        b = _pt(250, -130)
        assert distance_meters(a, a) == 0.0
        assert distance_meters(a, b) == pytest.approx(distance_meters(b, a), rel=1e-12)

    def test_offset_point_matches_haversine(self) -> None:
        """Смещение на N метров даёт расстояние N метров (суб-метровая точность)"""
        assert distance_meters(ORIGIN, _pt(100, 0)) == pytest.approx(100.0, abs=1e-3)
        assert distance_meters(ORIGIN, _pt(0, 100)) == pytest.approx(100.0, abs=1e-3)
        assert distance_meters(ORIGIN, _pt(300, 400)) == pytest.approx(500.0, abs=0.05)

    def test_degrees_for_meters(self) -> None:
        dlat, dlon = degrees_for_meters(100.0, 60.0)
        assert dlat * METERS_PER_DEGREE == pytest.approx(100.0)
        # На 60° градус долготы вдвое короче
        assert dlon == pytest.approx(2.0 * dlat, rel=1e-9)

    def test_path_length_open_and_closed(self) -> None:
        square = _square(100.0)
        assert path_length_meters(square) == pytest.approx(300.0, abs=0.05)
        assert path_length_meters(square, closed=True) == pytest.approx(400.0, abs=0.05)

    def test_path_length_short_paths(self) -> None:
        assert path_length_meters([]) == 0.0
        assert path_length_meters([ORIGIN]) == 0.0
        assert path_length_meters([_pt(0, 0), _pt(10, 0)], closed=True) == pytest.approx(10.0, abs=1e-3)


class TestPointToSegmentDistance:
    """Тесты для point_to_segment_distance_meters"""

    def test_perpendicular_foot_inside_segment(self) -> None:
        d = point_to_segment_distance_meters(_pt(50, 50), _pt(0, 0), _pt(0, 100))
        assert d == pytest.approx(50.0, abs=0.01)

    def test_foot_beyond_endpoint_clamped(self) -> None:
        """Проекция за концом отрезка — расстояние до ближайшего конца"""
        d = point_to_segment_distance_meters(_pt(0, 130), _pt(0, 0), _pt(0, 100))
        assert d == pytest.approx(30.0, abs=0.01)

    def test_degenerate_segment(self) -> None:
        a = _pt(0, 0)
        d = point_to_segment_distance_meters(_pt(40, 0), a, a)
        assert d == pytest.approx(40.0, abs=0.01)

    def test_point_on_segment(self) -> None:
        d = point_to_segment_distance_meters(_pt(0, 50), _pt(0, 0), _pt(0, 100))
        assert d == pytest.approx(0.0, abs=0.01)


# =============================================================================
# ПЕРЕСЕЧЕНИЕ ОТРЕЗКОВ
# =============================================================================


class TestSegmentsIntersect:
    """Тесты для orientation / segments_intersect"""

    def test_orientation_signs(self) -> None:
        a, b = _pt(0, 0), _pt(0, 100)
        assert orientation(a, b, _pt(50, 50)) == 1  # слева (север), против часовой
        assert orientation(a, b, _pt(-50, 50)) == -1
        assert orientation(a, b, _pt(0, 200)) == 0

    def test_proper_crossing(self) -> None:
        assert segments_intersect(_pt(0, 0), _pt(100, 100), _pt(100, 0), _pt(0, 100))

    def test_disjoint_segments(self) -> None:
        assert not segments_intersect(_pt(0, 0), _pt(0, 100), _pt(50, 0), _pt(50, 100))
        assert not segments_intersect(_pt(0, 0), _pt(10, 10), _pt(100, 0), _pt(0, 100))

    def test_shared_endpoint_is_contact(self) -> None:
        """Общий конец — общая точка; смежные рёбра исключает вызывающий код"""
        shared = _pt(100, 100)
        assert segments_intersect(_pt(0, 0), shared, shared, _pt(0, 200))

    def test_t_touch_is_intersection(self) -> None:
        """Конец одного отрезка лежит внутри другого"""
        a1 = GeoPoint(31.23, 121.470)
        a2 = GeoPoint(31.23, 121.472)
        b1 = GeoPoint(31.23, 121.471)
        b2 = GeoPoint(31.231, 121.471)
        assert segments_intersect(a1, a2, b1, b2)
        assert segments_intersect(b1, b2, a1, a2)

    def test_crossing_through_vertex(self) -> None:
        """Отрезок проходит точно через конец другого отрезка"""
        corner = GeoPoint(0.0, 0.0)
        diagonal = (GeoPoint(-0.0005, -0.0005), GeoPoint(0.0015, 0.0015))
        assert segments_intersect(*diagonal, corner, GeoPoint(0.0, 0.001))
        assert segments_intersect(*diagonal, GeoPoint(0.001, 0.0), corner)

    def test_near_miss_at_vertex(self) -> None:
        """Диагональ, сдвинутая на ~1 м к востоку, проходит мимо вершины"""
        corner = GeoPoint(0.0, 0.0)
        a1 = GeoPoint(-0.0005, -0.00049)
        a2 = GeoPoint(0.0015, 0.00151)
        assert not segments_intersect(a1, a2, corner, GeoPoint(0.001, 0.0))

    def test_collinear_overlap_is_intersection(self) -> None:
        a1 = GeoPoint(31.23, 121.470)
        a2 = GeoPoint(31.23, 121.472)
        b1 = GeoPoint(31.23, 121.471)
        b2 = GeoPoint(31.23, 121.473)
        assert segments_intersect(a1, a2, b1, b2)
        assert segments_intersect(b1, b2, a1, a2)

    def test_collinear_touching_endpoints_is_contact(self) -> None:
        a1 = GeoPoint(31.23, 121.470)
        a2 = GeoPoint(31.23, 121.471)
        b1 = GeoPoint(31.23, 121.471)
        b2 = GeoPoint(31.23, 121.472)
        assert segments_intersect(a1, a2, b1, b2)

    def test_collinear_disjoint(self) -> None:
        a1 = GeoPoint(31.23, 121.470)
        a2 = GeoPoint(31.23, 121.471)
        b1 = GeoPoint(31.23, 121.472)
        b2 = GeoPoint(31.23, 121.473)
        assert not segments_intersect(a1, a2, b1, b2)


class TestFindSelfIntersection:
    """Тесты для find_self_intersection"""

    def test_square_is_simple(self) -> None:
        assert find_self_intersection(_square(), closed=True) is None

    def test_bowtie_detected(self) -> None:
        """Восьмёрка: диагонали пересекаются"""
        bowtie = [_pt(0, 0), _pt(100, 100), _pt(100, 0), _pt(0, 100)]
        assert find_self_intersection(bowtie, closed=True) == (0, 2)

    def test_touch_of_non_adjacent_edge_detected(self) -> None:
        """Путь возвращается на ребро 0 и касается его: это самопересечение"""
        path = [_pt(0, 0), _pt(0, 100), _pt(100, 100), _pt(100, 50), _pt(0, 50)]
        assert find_self_intersection(path, closed=False) == (0, 3)

    def test_adjacent_edges_share_vertex_without_report(self) -> None:
        """Смежные рёбра всегда имеют общую вершину и не сравниваются"""
        assert find_self_intersection(_square(), closed=False) is None
        assert find_self_intersection(_square(), closed=True) is None

    def test_open_path_ignores_wrap_edge(self) -> None:
        """Открытый путь не проверяет замыкающее ребро"""
        # Замыкающее ребро (0, 100) → (0, 0) пересекло бы ребро 1, но его нет
        path = [_pt(0, 0), _pt(100, 50), _pt(-50, 50), _pt(0, 100)]
        assert find_self_intersection(path, closed=False) is None
        assert find_self_intersection(path, closed=True) is not None

    def test_too_few_edges(self) -> None:
        assert find_self_intersection([_pt(0, 0), _pt(10, 0)], closed=True) is None
        assert find_self_intersection([_pt(0, 0), _pt(10, 0), _pt(10, 10)], closed=False) is None


# =============================================================================
# ТОЧКА В МНОГОУГОЛЬНИКЕ
# =============================================================================


class TestPointInPolygon:
    """Тесты для point_in_polygon"""

    def test_square_inside_outside(self) -> None:
        square = _square(100.0)
        assert point_in_polygon(_pt(50, 50), square)
        assert not point_in_polygon(_pt(150, 50), square)
        assert not point_in_polygon(_pt(50, -1), square)

    def test_concave_notch(self) -> None:
        """Точка в вырезе вогнутого многоугольника — снаружи"""
        u_shape = [
            _pt(0, 0),
            _pt(0, 300),
            _pt(300, 300),
            _pt(300, 200),
            _pt(100, 200),
            _pt(100, 100),
            _pt(300, 100),
            _pt(300, 0),
        ]
        assert point_in_polygon(_pt(50, 150), u_shape)
        assert not point_in_polygon(_pt(200, 150), u_shape)
        assert point_in_polygon(_pt(200, 250), u_shape)

    def test_degenerate_polygon_contains_nothing(self) -> None:
        assert not point_in_polygon(ORIGIN, [])
        assert not point_in_polygon(ORIGIN, [_pt(-1, -1), _pt(1, 1)])

    def test_matches_reference_on_random_polygons(self) -> None:
        """Совпадение с эталонной even-odd реализацией на 1000 случайных многоугольниках"""
        rng = random.Random(20240531)
        inside_count = 0
        for _ in range(1000):
            polygon = _random_star_polygon(rng)
            for _ in range(5):
                p = _pt(rng.uniform(-900.0, 900.0), rng.uniform(-900.0, 900.0))
                expected = _reference_even_odd(p, polygon)
                assert point_in_polygon(p, polygon) == expected
                inside_count += expected
        # Выборка содержит обе категории
        assert 0 < inside_count < 5000


# =============================================================================
# ПЛОЩАДЬ
# =============================================================================


class TestSignedArea:
    """Тесты для signed_area / spherical_signed_area"""

    def test_square_area_and_sign(self) -> None:
        """Квадрат 100 × 100 м: ≈ 10000 м², положительный при обходе против часовой"""
        square = _square(100.0)
        area = signed_area(square)
        assert area > 0
        assert area == pytest.approx(10_000.0, rel=0.02)
        assert signed_area(list(reversed(square))) == pytest.approx(-area, rel=1e-9)

    def test_spherical_matches_planar_with_opposite_sign(self) -> None:
        square = _square(100.0)
        planar = signed_area(square)
        spherical = spherical_signed_area(square)
        assert spherical < 0
        assert abs(spherical) == pytest.approx(planar, rel=0.01)

    def test_invariant_under_reversal_and_rotation(self) -> None:
        """Модуль площади не зависит от направления обхода и начальной вершины"""
        rng = random.Random(7)
        for _ in range(200):
            polygon = _random_star_polygon(rng)
            base = abs(signed_area(polygon))
            assert abs(signed_area(list(reversed(polygon)))) == pytest.approx(base, rel=1e-9)
            shift = rng.randrange(1, len(polygon))
            rotated = polygon[shift:] + polygon[:shift]
            assert abs(signed_area(rotated)) == pytest.approx(base, rel=1e-9)

    def test_fewer_than_three_vertices_raises(self) -> None:
        with pytest.raises(DegenerateGeometryError):
            signed_area([_pt(0, 0), _pt(10, 0)])
        with pytest.raises(DegenerateGeometryError):
            spherical_signed_area([])


# =============================================================================
# ОХВАТ И ПОДДЕРЖИВАЕМАЯ ОБЛАСТЬ
# =============================================================================


class TestSupportedGeometry:
    """Тесты для bounding_box / check_supported_geometry"""

    def test_bounding_box(self) -> None:
        box = bounding_box(_square(100.0))
        assert box.min_lat == ORIGIN.latitude
        assert box.min_lon == ORIGIN.longitude
        assert box.contains(_pt(50, 50))
        assert not box.contains(_pt(150, 50))

    def test_empty_bounding_box_raises(self) -> None:
        with pytest.raises(DegenerateGeometryError):
            bounding_box([])

    def test_regular_polygon_supported(self) -> None:
        check_supported_geometry(_square())

    def test_antimeridian_rejected(self) -> None:
        points = [GeoPoint(10.0, 179.9), GeoPoint(10.1, -179.9), GeoPoint(10.2, 179.95)]
        with pytest.raises(UnsupportedGeometryError, match="antimeridian"):
            check_supported_geometry(points)

    def test_polar_rejected(self) -> None:
        points = [GeoPoint(89.95, 0.0), GeoPoint(89.95, 10.0), GeoPoint(89.0, 5.0)]
        with pytest.raises(UnsupportedGeometryError, match="polar"):
            check_supported_geometry(points)
