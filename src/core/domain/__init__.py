"""
Domain models and value objects.

Contains fundamental domain entities like GeoPoint, ClosedPolygon, Territory,
CollisionResult, TerritoryClaim.
"""

from src.core.domain.claim import TerritoryClaim
from src.core.domain.collision import (
    CollisionResult,
    CollisionType,
    RejectReason,
    WarningLevel,
)
from src.core.domain.territory import ClosedPolygon, Territory, foreign_territories
from src.core.math.geo_point import BoundingBox, DisplayPoint, GeoPoint

__all__ = [
    # Coordinates
    "GeoPoint",
    "DisplayPoint",
    "BoundingBox",
    # Territory
    "ClosedPolygon",
    "Territory",
    "foreign_territories",
    # Collision
    "CollisionResult",
    "CollisionType",
    "WarningLevel",
    "RejectReason",
    # Persistence hand-off
    "TerritoryClaim",
]
