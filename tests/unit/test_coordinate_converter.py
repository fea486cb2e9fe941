"""
Тесты для CoordinateSystemConverter (WGS-84 → GCJ-02)

Проверяет:
1. Точки вне региона проходят без изменений (идемпотентность)
2. Смещение внутри региона — сотни метров
3. DisplayPoint не конвертируется повторно
4. Разведение типов GeoPoint / DisplayPoint
5. Опорные значения GCJ-02 и поведение на границе региона
"""

import pytest

from src.core.domain import DisplayPoint, GeoPoint
from src.core.math import distance_meters
from src.display import CoordinateSystemConverter, DatumRegion


@pytest.fixture
def converter() -> CoordinateSystemConverter:
    return CoordinateSystemConverter()


class TestOutsideRegion:
    """Точки вне региона"""

    @pytest.mark.parametrize(
        "lat,lon",
        [
            (48.8584, 2.2945),  # Париж
            (40.6892, -74.0445),  # Нью-Йорк
            (-33.8568, 151.2153),  # Сидней
            (60.0, 100.0),  # Севернее региона
        ],
    )
    def test_passthrough(self, converter, lat, lon) -> None:
        result = converter.to_display(GeoPoint(latitude=lat, longitude=lon))
        assert isinstance(result, DisplayPoint)
        assert result.latitude == lat
        assert result.longitude == lon

    def test_idempotent_outside_region(self, converter) -> None:
        """Двойная конвертация точки вне региона совпадает с однократной"""
        point = GeoPoint(latitude=51.5007, longitude=-0.1246)
        once = converter.to_display(point)
        twice = converter.to_display(once)
        assert twice == once


class TestInsideRegion:
    """Точки внутри региона"""

    @pytest.mark.parametrize(
        "lat,lon",
        [
            (39.90872, 116.39748),  # Пекин
            (31.2304, 121.4737),  # Шанхай
            (22.5431, 114.0579),  # Шэньчжэнь
        ],
    )
    def test_offset_is_hundreds_of_meters(self, converter, lat, lon) -> None:
        raw = GeoPoint(latitude=lat, longitude=lon)
        display = converter.to_display(raw)
        shifted = GeoPoint(latitude=display.latitude, longitude=display.longitude)
        offset = distance_meters(raw, shifted)
        assert 100.0 < offset < 700.0

    @pytest.mark.parametrize(
        "wgs_lat,wgs_lon,gcj_lat,gcj_lon",
        [
            (39.911954, 116.377817, 39.91334545536767, 116.38404722455657),  # Пекин
            (31.1774276, 121.5272106, 31.17530398364597, 121.531541859215),  # Шанхай
        ],
    )
    def test_reference_values(self, converter, wgs_lat, wgs_lon, gcj_lat, gcj_lon) -> None:
        """Опорные пары WGS-84 → GCJ-02"""
        display = converter.to_display(GeoPoint(latitude=wgs_lat, longitude=wgs_lon))
        assert display.latitude == pytest.approx(gcj_lat, abs=1e-6)
        assert display.longitude == pytest.approx(gcj_lon, abs=1e-6)

    def test_beijing_direction(self, converter) -> None:
        """В Пекине смещение направлено на северо-восток"""
        raw = GeoPoint(latitude=39.90872, longitude=116.39748)
        display = converter.to_display(raw)
        assert display.latitude > raw.latitude
        assert display.longitude > raw.longitude

    def test_deterministic(self, converter) -> None:
        raw = GeoPoint(latitude=30.5728, longitude=104.0668)
        assert converter.to_display(raw) == converter.to_display(raw)
        assert CoordinateSystemConverter().to_display(raw) == converter.to_display(raw)

    def test_display_point_returned_unchanged(self, converter) -> None:
        """DisplayPoint уже в датуме отображения — повторно не смещается"""
        display = converter.to_display(GeoPoint(latitude=39.90872, longitude=116.39748))
        assert converter.to_display(display) is display

    def test_batch_conversion(self, converter) -> None:
        points = [GeoPoint(latitude=31.23, longitude=121.47), GeoPoint(latitude=48.85, longitude=2.29)]
        result = converter.to_display_path(points)
        assert result == [converter.to_display(p) for p in points]


class TestRegionAndTypes:
    """Регион и проверка типов"""

    def test_custom_region_disables_transform(self) -> None:
        converter = CoordinateSystemConverter(DatumRegion(min_lon=0.0, max_lon=1.0, min_lat=0.0, max_lat=1.0))
        result = converter.to_display(GeoPoint(latitude=39.9, longitude=116.4))
        assert (result.latitude, result.longitude) == (39.9, 116.4)

    def test_region_contains_is_inclusive(self) -> None:
        region = DatumRegion()
        assert region.contains(region.min_lat, region.min_lon)
        assert region.contains(region.max_lat, region.max_lon)
        assert not region.contains(region.max_lat + 0.001, region.max_lon)

    @pytest.mark.parametrize(
        "lat,lon",
        [
            (0.8293, 110.0),  # южная граница
            (40.0, 137.8347),  # восточная граница
        ],
    )
    def test_point_on_region_edge_is_shifted(self, converter, lat, lon) -> None:
        result = converter.to_display(GeoPoint(latitude=lat, longitude=lon))
        assert (result.latitude, result.longitude) != (lat, lon)

    def test_point_just_outside_edge_passes_through(self, converter) -> None:
        result = converter.to_display(GeoPoint(latitude=40.0, longitude=137.8348))
        assert (result.latitude, result.longitude) == (40.0, 137.8348)

    def test_invalid_region_raises(self) -> None:
        with pytest.raises(ValueError):
            DatumRegion(min_lon=10.0, max_lon=5.0)
        with pytest.raises(ValueError):
            DatumRegion(min_lat=20.0, max_lat=20.0)

    def test_rejects_non_point(self, converter) -> None:
        with pytest.raises(TypeError):
            converter.to_display((39.9, 116.4))
