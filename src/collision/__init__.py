"""Collision — проверка пути и многоугольника против чужих территорий."""

from .engine import ProximityConfig, TerritoryCollisionEngine

__all__ = [
    "TerritoryCollisionEngine",
    "ProximityConfig",
]
