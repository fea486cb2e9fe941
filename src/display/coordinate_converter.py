"""
CoordinateSystemConverter — перевод сырого датума (WGS-84) в датум отображения (GCJ-02)

Публичный алгоритм GCJ-02 на эллипсоиде Красовского. Преобразование применяется
только внутри фиксированного региона (DatumRegion); точки вне региона
возвращаются без изменений.

Правила:
- Конвертер вызывается только на границе рендера
- Результат (DisplayPoint) никогда не возвращается в геометрию
- Обратное преобразование не реализуется
"""

import math
from dataclasses import dataclass
from typing import Final, Iterable, List, Union

from src.core.math.geo_point import DisplayPoint, GeoPoint

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Большая полуось эллипсоида Красовского, метры
KRASOVSKY_A: Final[float] = 6378245.0

# Квадрат первого эксцентриситета
KRASOVSKY_EE: Final[float] = 0.00669342162296594323


# =============================================================================
# CONFIGURATION
# =============================================================================


@dataclass(frozen=True)
class DatumRegion:
    """
    Регион, внутри которого применяется преобразование (границы включительно).

    Значения по умолчанию — грубый охват материкового Китая.
    """

    min_lon: float = 72.004
    max_lon: float = 137.8347
    min_lat: float = 0.8293
    max_lat: float = 55.8271

    def __post_init__(self) -> None:
        if self.min_lon >= self.max_lon:
            raise ValueError(f"min_lon {self.min_lon} must be < max_lon {self.max_lon}")
        if self.min_lat >= self.max_lat:
            raise ValueError(f"min_lat {self.min_lat} must be < max_lat {self.max_lat}")

    def contains(self, latitude: float, longitude: float) -> bool:
        return (
            self.min_lon <= longitude <= self.max_lon
            and self.min_lat <= latitude <= self.max_lat
        )


# =============================================================================
# TRANSFORM
# =============================================================================


def _transform_lat(x: float, y: float) -> float:
    ret = -100.0 + 2.0 * x + 3.0 * y + 0.2 * y * y + 0.1 * x * y + 0.2 * math.sqrt(abs(x))
    ret += (20.0 * math.sin(6.0 * x * math.pi) + 20.0 * math.sin(2.0 * x * math.pi)) * 2.0 / 3.0
    ret += (20.0 * math.sin(y * math.pi) + 40.0 * math.sin(y / 3.0 * math.pi)) * 2.0 / 3.0
    ret += (160.0 * math.sin(y / 12.0 * math.pi) + 320.0 * math.sin(y * math.pi / 30.0)) * 2.0 / 3.0
    return ret


def _transform_lon(x: float, y: float) -> float:
    ret = 300.0 + x + 2.0 * y + 0.1 * x * x + 0.1 * x * y + 0.1 * math.sqrt(abs(x))
    ret += (20.0 * math.sin(6.0 * x * math.pi) + 20.0 * math.sin(2.0 * x * math.pi)) * 2.0 / 3.0
    ret += (20.0 * math.sin(x * math.pi) + 40.0 * math.sin(x / 3.0 * math.pi)) * 2.0 / 3.0
    ret += (150.0 * math.sin(x / 12.0 * math.pi) + 300.0 * math.sin(x / 30.0 * math.pi)) * 2.0 / 3.0
    return ret


class CoordinateSystemConverter:
    """
    Конвертер WGS-84 → GCJ-02.

    Чистый и stateless: один и тот же вход всегда даёт один и тот же выход.

    Examples:
        >>> converter = CoordinateSystemConverter()
        >>> converter.to_display(GeoPoint(latitude=48.8584, longitude=2.2945))
        DisplayPoint(latitude=48.8584, longitude=2.2945)
    """

    def __init__(self, region: DatumRegion | None = None):
        self.region = region or DatumRegion()

    def to_display(self, point: Union[GeoPoint, DisplayPoint]) -> DisplayPoint:
        """
        Перевод точки в датум отображения.

        Args:
            point: Точка в сыром датуме. DisplayPoint возвращается как есть.

        Returns:
            DisplayPoint (вне региона — те же координаты)

        Raises:
            TypeError: Если point не GeoPoint/DisplayPoint
        """
        if isinstance(point, DisplayPoint):
            return point
        if not isinstance(point, GeoPoint):
            raise TypeError(f"Expected GeoPoint, got {type(point).__name__}")

        lat = point.latitude
        lon = point.longitude

        if not self.region.contains(lat, lon):
            return DisplayPoint(latitude=lat, longitude=lon)

        d_lat = _transform_lat(lon - 105.0, lat - 35.0)
        d_lon = _transform_lon(lon - 105.0, lat - 35.0)

        rad_lat = lat / 180.0 * math.pi
        magic = 1.0 - KRASOVSKY_EE * math.sin(rad_lat) ** 2
        sqrt_magic = math.sqrt(magic)

        d_lat = (d_lat * 180.0) / ((KRASOVSKY_A * (1.0 - KRASOVSKY_EE)) / (magic * sqrt_magic) * math.pi)
        d_lon = (d_lon * 180.0) / (KRASOVSKY_A / sqrt_magic * math.cos(rad_lat) * math.pi)

        return DisplayPoint(latitude=lat + d_lat, longitude=lon + d_lon)

    def to_display_path(self, points: Iterable[Union[GeoPoint, DisplayPoint]]) -> List[DisplayPoint]:
        """Пакетный перевод (например, весь путь для отрисовки полилинии)."""
        return [self.to_display(p) for p in points]
