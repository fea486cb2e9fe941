"""
Territory — замкнутый многоугольник и запись территории

ClosedPolygon — замкнутый контур в сыром датуме:
- не менее 3 различных вершин
- первая вершина хранится один раз, замыкающее ребро неявное
- нет рёбер нулевой длины
- не пересекает антимеридиан и не заходит за полярный предел
- (опционально) без самопересечений несмежных рёбер

Territory — внешняя запись из слоя хранения (immutable Pydantic модель).
Движок получает список Territory как read-only снапшот на время вызова
и никогда его не изменяет и не кэширует.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from pydantic import BaseModel, Field, InstanceOf

from src.core.contracts import validate_territory_record
from src.core.math.coordinate_math import (
    DegenerateGeometryError,
    bounding_box,
    check_supported_geometry,
    distance_meters,
    find_self_intersection,
)
from src.core.math.geo_point import BoundingBox, GeoPoint
from src.core.math.numerical_safeguards import EPS_METERS


# =============================================================================
# CLOSED POLYGON
# =============================================================================


@dataclass(frozen=True)
class ClosedPolygon:
    """
    Immutable замкнутый многоугольник (сырой датум).

    Attributes:
        vertices: Вершины в порядке обхода; первая вершина не дублируется
    """

    vertices: tuple[GeoPoint, ...]
    _bbox: BoundingBox = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        vertices = tuple(self.vertices)
        object.__setattr__(self, "vertices", vertices)

        for vertex in vertices:
            if not isinstance(vertex, GeoPoint):
                raise TypeError(
                    f"ClosedPolygon vertices must be raw-datum GeoPoint, got {type(vertex).__name__}"
                )

        if len(vertices) < 3:
            raise DegenerateGeometryError(
                f"ClosedPolygon needs at least 3 vertices, got {len(vertices)}"
            )

        if vertices[0] == vertices[-1]:
            raise DegenerateGeometryError(
                "First vertex must not be repeated at the end; closure is implicit"
            )

        if len(set(vertices)) < 3:
            raise DegenerateGeometryError("ClosedPolygon needs at least 3 distinct vertices")

        n = len(vertices)
        for i in range(n):
            if distance_meters(vertices[i], vertices[(i + 1) % n]) < EPS_METERS:
                raise DegenerateGeometryError(f"Zero-length edge at vertex {i}")

        check_supported_geometry(vertices)
        object.__setattr__(self, "_bbox", bounding_box(vertices))

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def from_points(cls, points: Sequence[GeoPoint], require_simple: bool = True) -> "ClosedPolygon":
        """
        Построение из последовательности точек.

        Хвостовой дубликат первой точки (явное замыкание) отбрасывается.

        Args:
            points: Точки контура
            require_simple: Проверить отсутствие самопересечений (O(n²))

        Raises:
            DegenerateGeometryError: Вырожденный или самопересекающийся контур
        """
        vertices = list(points)
        if len(vertices) >= 2 and vertices[0] == vertices[-1]:
            vertices.pop()

        polygon = cls(vertices=tuple(vertices))

        if require_simple:
            crossing = find_self_intersection(polygon.vertices, closed=True)
            if crossing is not None:
                raise DegenerateGeometryError(
                    f"Polygon edges {crossing[0]} and {crossing[1]} intersect"
                )

        return polygon

    @classmethod
    def from_path_json(
        cls, path: Iterable[Dict[str, float]], require_simple: bool = True
    ) -> "ClosedPolygon":
        """Построение из формата хранилища [{"lat": x, "lon": y}, ...]."""
        points = [GeoPoint(latitude=float(p["lat"]), longitude=float(p["lon"])) for p in path]
        return cls.from_points(points, require_simple=require_simple)

    # -------------------------------------------------------------------------
    # Geometry
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.vertices)

    @property
    def bounding_box(self) -> BoundingBox:
        return self._bbox

    def edges(self) -> List[tuple[GeoPoint, GeoPoint]]:
        """Все рёбра, включая замыкающее (последняя → первая)."""
        n = len(self.vertices)
        return [(self.vertices[i], self.vertices[(i + 1) % n]) for i in range(n)]

    def is_simple(self) -> bool:
        """Нет пересечений несмежных рёбер."""
        return find_self_intersection(self.vertices, closed=True) is None

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_path_json(self) -> List[Dict[str, float]]:
        """Формат хранилища: [{"lat": x, "lon": y}, ...] без дубликата первой точки."""
        return [{"lat": v.latitude, "lon": v.longitude} for v in self.vertices]

    def to_wkt(self) -> str:
        """
        WKT с SRID: "SRID=4326;POLYGON((lon lat, ...))".

        Порядок в WKT — долгота, затем широта; кольцо явно замкнуто.
        """
        ring = list(self.vertices) + [self.vertices[0]]
        coords = ", ".join(f"{v.longitude} {v.latitude}" for v in ring)
        return f"SRID=4326;POLYGON(({coords}))"


# =============================================================================
# TERRITORY MODEL
# =============================================================================


class Territory(BaseModel):
    """
    Запись территории, принадлежащая внешнему слою хранения.

    Immutable модель (frozen=True). Сравнение владельцев выполняет
    вызывающий код (см. foreign_territories).
    """

    id: str = Field(..., min_length=1, description="Идентификатор территории")
    owner_id: str = Field(..., min_length=1, description="Идентификатор владельца")
    polygon: InstanceOf[ClosedPolygon] = Field(..., description="Контур территории (сырой датум)")
    area: float = Field(..., ge=0, description="Площадь, м²")
    name: Optional[str] = Field(None, description="Название (nullable)")

    model_config = {"frozen": True}

    @classmethod
    def from_record(cls, record: Dict[str, Any], require_simple: bool = True) -> "Territory":
        """
        Построение из строки хранилища (контракт territory.json).

        Raises:
            jsonschema.ValidationError: Запись не соответствует контракту
            DegenerateGeometryError: Контур вырожден
        """
        validate_territory_record(record)
        return cls(
            id=str(record["id"]),
            owner_id=str(record["user_id"]),
            polygon=ClosedPolygon.from_path_json(record["path"], require_simple=require_simple),
            area=float(record["area"]),
            name=record.get("name"),
        )

    def belongs_to(self, owner_id: str) -> bool:
        """Принадлежит ли территория владельцу (регистр идентификатора не важен)."""
        return self.owner_id.lower() == owner_id.lower()


def foreign_territories(territories: Iterable[Territory], owner_id: str) -> List[Territory]:
    """
    Территории, не принадлежащие owner_id.

    Собственные территории игрока не являются препятствием для захвата.
    """
    return [t for t in territories if not t.belongs_to(owner_id)]
