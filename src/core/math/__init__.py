"""
Core math modules для territory engine

Геометрические примитивы и численные алгоритмы над сырым датумом (WGS-84).
Слой-лист: не зависит от domain, contracts, tracking и collision.
"""

# Numerical Safeguards
from src.core.math.numerical_safeguards import (
    # Epsilon constants
    EPS_CALC,
    EPS_METERS,
    EPS_ORIENTATION,
    # Safe division
    safe_divide,
    # Comparisons
    is_valid_float,
    sign_with_tolerance,
    # Utilities
    clamp,
    # Validation
    validate_in_range,
    validate_non_negative,
    validate_positive,
)

# Coordinate value objects
from src.core.math.geo_point import BoundingBox, DisplayPoint, GeoPoint

# Coordinate Math
from src.core.math.coordinate_math import (
    EARTH_RADIUS_M,
    METERS_PER_DEGREE,
    DegenerateGeometryError,
    GeometryError,
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

# Area
from src.core.math.area import AreaCalculator, AreaMethod

__all__ = [
    # Numerical Safeguards: Epsilon constants
    "EPS_CALC",
    "EPS_METERS",
    "EPS_ORIENTATION",
    # Numerical Safeguards: Functions
    "safe_divide",
    "is_valid_float",
    "sign_with_tolerance",
    "clamp",
    "validate_in_range",
    "validate_non_negative",
    "validate_positive",
    # Value objects
    "BoundingBox",
    "DisplayPoint",
    "GeoPoint",
    # Coordinate Math: Constants
    "EARTH_RADIUS_M",
    "METERS_PER_DEGREE",
    # Coordinate Math: Exceptions
    "DegenerateGeometryError",
    "GeometryError",
    "UnsupportedGeometryError",
    # Coordinate Math: Functions
    "bounding_box",
    "check_supported_geometry",
    "degrees_for_meters",
    "distance_meters",
    "find_self_intersection",
    "offset_point",
    "orientation",
    "path_length_meters",
    "point_in_polygon",
    "point_to_segment_distance_meters",
    "segments_intersect",
    "signed_area",
    "spherical_signed_area",
    # Area
    "AreaCalculator",
    "AreaMethod",
]
