"""Display — перевод координат в датум отображения (только граница рендера)."""

from .coordinate_converter import CoordinateSystemConverter, DatumRegion

__all__ = [
    "CoordinateSystemConverter",
    "DatumRegion",
]
