"""
Geometry Module
Typed geometries, tiled geometry decoding, representative points and spatial filters
"""
from .types import (
    Circle,
    Feature,
    Geometry,
    GeometryCollection,
    GeometryType,
    LinearRing,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    TiledGeometry,
    geometry_to_geojson,
)
from .decoder import decode_feature, decode_features, decode_tiled_geometry
from .centroid import centroid
from .filters import IntersectsFilter, intersect

__all__ = [
    "Circle",
    "Feature",
    "Geometry",
    "GeometryCollection",
    "GeometryType",
    "LinearRing",
    "LineString",
    "MultiLineString",
    "MultiPoint",
    "MultiPolygon",
    "Point",
    "Polygon",
    "TiledGeometry",
    "geometry_to_geojson",
    "decode_feature",
    "decode_features",
    "decode_tiled_geometry",
    "centroid",
    "IntersectsFilter",
    "intersect",
]
