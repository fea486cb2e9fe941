"""
TerritoryClaim — payload замкнутого многоугольника для слоя хранения

Immutable Pydantic модель. Соответствует схеме territory_claim.json.
Метаданные (владелец, временные метки, название) добавляет вызывающий код.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, Field, field_validator

from src.core.contracts import validate_territory_claim
from src.core.domain.territory import ClosedPolygon


class TerritoryClaim(BaseModel):
    """
    Payload захвата территории.

    Все координаты в сыром датуме; bbox используется хранилищем
    для пространственного индекса.
    """

    path: List[Dict[str, float]] = Field(..., min_length=3, description="[{lat, lon}, ...]")
    polygon_wkt: str = Field(..., description="SRID=4326;POLYGON((lon lat, ...))")

    # Bounding box
    bbox_min_lat: float = Field(..., ge=-90, le=90)
    bbox_max_lat: float = Field(..., ge=-90, le=90)
    bbox_min_lon: float = Field(..., ge=-180, le=180)
    bbox_max_lon: float = Field(..., ge=-180, le=180)

    area: float = Field(..., ge=0, description="Площадь, м²")
    point_count: int = Field(..., ge=3, description="Количество вершин")

    model_config = {"frozen": True}

    @field_validator("bbox_max_lat")
    @classmethod
    def validate_lat_order(cls, v: float, info) -> float:
        if "bbox_min_lat" in info.data and v < info.data["bbox_min_lat"]:
            raise ValueError(f"bbox_max_lat {v} must be >= bbox_min_lat {info.data['bbox_min_lat']}")
        return v

    @field_validator("bbox_max_lon")
    @classmethod
    def validate_lon_order(cls, v: float, info) -> float:
        if "bbox_min_lon" in info.data and v < info.data["bbox_min_lon"]:
            raise ValueError(f"bbox_max_lon {v} must be >= bbox_min_lon {info.data['bbox_min_lon']}")
        return v

    @classmethod
    def from_polygon(cls, polygon: ClosedPolygon, area: float) -> "TerritoryClaim":
        """
        Построение payload из замкнутого многоугольника.

        Args:
            polygon: Многоугольник, возвращённый PathTracker.check_closure
            area: Площадь, м² (AreaCalculator)
        """
        box = polygon.bounding_box
        return cls(
            path=polygon.to_path_json(),
            polygon_wkt=polygon.to_wkt(),
            bbox_min_lat=box.min_lat,
            bbox_max_lat=box.max_lat,
            bbox_min_lon=box.min_lon,
            bbox_max_lon=box.max_lon,
            area=area,
            point_count=len(polygon),
        )

    def to_record(self) -> Dict[str, Any]:
        """
        Запись для хранилища (контракт territory_claim.json).

        Raises:
            jsonschema.ValidationError: Payload не соответствует контракту
        """
        record = {
            "path": [dict(p) for p in self.path],
            "polygon": self.polygon_wkt,
            "bbox_min_lat": self.bbox_min_lat,
            "bbox_max_lat": self.bbox_max_lat,
            "bbox_min_lon": self.bbox_min_lon,
            "bbox_max_lon": self.bbox_max_lon,
            "area": self.area,
            "point_count": self.point_count,
        }
        validate_territory_claim(record)
        return record
