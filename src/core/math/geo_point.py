"""
GeoPoint — координатные value objects

Две системы координат намеренно разведены по разным типам:
- GeoPoint     — сырой датум GPS (WGS-84); вся геометрия работает только с ним
- DisplayPoint — датум отображения (GCJ-02); появляется только на границе рендера

ЗАПРЕЩЕНО передавать DisplayPoint в геометрию (площадь, коллизии, трекинг):
точки входа проверяют тип и бросают TypeError.
"""

from dataclasses import dataclass
from typing import Final

from src.core.math.numerical_safeguards import validate_in_range

LATITUDE_MIN: Final[float] = -90.0
LATITUDE_MAX: Final[float] = 90.0
LONGITUDE_MIN: Final[float] = -180.0
LONGITUDE_MAX: Final[float] = 180.0


@dataclass(frozen=True)
class GeoPoint:
    """
    Точка в сыром датуме GPS (WGS-84), десятичные градусы.

    Равенство точное; близость проверяется только через distance_meters.
    """

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        validate_in_range(self.latitude, "latitude", LATITUDE_MIN, LATITUDE_MAX)
        validate_in_range(self.longitude, "longitude", LONGITUDE_MIN, LONGITUDE_MAX)


@dataclass(frozen=True)
class DisplayPoint:
    """
    Точка в датуме отображения (GCJ-02).

    Производится только CoordinateSystemConverter и потребляется только
    рендером. Обратно в геометрию не возвращается.
    """

    latitude: float
    longitude: float


@dataclass(frozen=True)
class BoundingBox:
    """Осевой прямоугольник в градусах (сырой датум)."""

    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    def __post_init__(self) -> None:
        if self.min_lat > self.max_lat:
            raise ValueError(f"min_lat {self.min_lat} > max_lat {self.max_lat}")
        if self.min_lon > self.max_lon:
            raise ValueError(f"min_lon {self.min_lon} > max_lon {self.max_lon}")

    def contains(self, point: GeoPoint) -> bool:
        """Точка внутри прямоугольника (границы включительно)."""
        return (
            self.min_lat <= point.latitude <= self.max_lat
            and self.min_lon <= point.longitude <= self.max_lon
        )

    def intersects(self, other: "BoundingBox") -> bool:
        """Пересечение двух прямоугольников (касание считается пересечением)."""
        return not (
            other.min_lat > self.max_lat
            or other.max_lat < self.min_lat
            or other.min_lon > self.max_lon
            or other.max_lon < self.min_lon
        )

    def expanded(self, dlat: float, dlon: float) -> "BoundingBox":
        """Расширение на заданные приращения в градусах."""
        return BoundingBox(
            min_lat=self.min_lat - dlat,
            max_lat=self.max_lat + dlat,
            min_lon=self.min_lon - dlon,
            max_lon=self.max_lon + dlon,
        )
