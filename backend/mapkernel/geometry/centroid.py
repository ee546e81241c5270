"""
Centroid Engine

Cheap representative point for any geometry, used to anchor labels and popups.
This is not an area/length weighted centroid: sequences pick their element at
index len // 2 (for even counts the element just past the midpoint) and
polygons use their interior point.
"""
from __future__ import annotations

import logging
from typing import Optional

from .types import Coordinate, Geometry, GeometryType

logger = logging.getLogger(__name__)


def _median(items):
    return items[len(items) // 2] if items else None


def centroid(geometry: Optional[Geometry]) -> Optional[Coordinate]:
    """
    Representative coordinate of a geometry.

    Returns None for a missing geometry, an empty one, or an unrecognised type.
    """
    if geometry is None:
        return None

    kind = getattr(geometry, "type", None)

    if kind is GeometryType.POINT:
        return geometry.coordinates

    if kind in (GeometryType.LINE_STRING, GeometryType.LINEAR_RING):
        return _median(geometry.coordinates)

    if kind is GeometryType.POLYGON:
        return centroid(geometry.interior_point())

    if kind is GeometryType.MULTI_POINT:
        return centroid(_median(geometry.points))

    if kind is GeometryType.MULTI_LINE_STRING:
        return centroid(_median(geometry.lines))

    if kind is GeometryType.MULTI_POLYGON:
        return centroid(geometry.interior_points())

    if kind is GeometryType.CIRCLE:
        return geometry.center

    if kind is GeometryType.GEOMETRY_COLLECTION:
        return centroid(_median(geometry.geometries))

    logger.debug(f"No centroid for unsupported geometry {type(geometry).__name__}")
    return None
