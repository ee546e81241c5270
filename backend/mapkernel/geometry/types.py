"""
Geometry Types

Closed set of geometry variants used throughout the kernel, the tiled (flat
buffer) render geometry consumed by the decoder, and the Feature wrapper.

Geometries are frozen dataclasses tagged with GeometryType. Coordinates are
tuples of at least two floats; ordinates beyond x/y (elevation, measure) are
carried along untouched.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from shapely import geometry as sg
from shapely.errors import GEOSException

logger = logging.getLogger(__name__)

Coordinate = Tuple[float, ...]
Extent = Tuple[float, float, float, float]


class GeometryType(str, Enum):
    POINT = "Point"
    LINE_STRING = "LineString"
    LINEAR_RING = "LinearRing"
    POLYGON = "Polygon"
    MULTI_POINT = "MultiPoint"
    MULTI_LINE_STRING = "MultiLineString"
    MULTI_POLYGON = "MultiPolygon"
    GEOMETRY_COLLECTION = "GeometryCollection"
    CIRCLE = "Circle"


def as_coordinate(values: Sequence[float]) -> Coordinate:
    if len(values) < 2:
        raise ValueError(f"Coordinate needs at least 2 ordinates, got {list(values)!r}")
    return tuple(float(v) for v in values)


def _coordinates(values: Sequence[Sequence[float]]) -> Tuple[Coordinate, ...]:
    return tuple(as_coordinate(v) for v in values)


def _bounds(coordinates: Sequence[Coordinate]) -> Optional[Extent]:
    if not coordinates:
        return None
    xs = [c[0] for c in coordinates]
    ys = [c[1] for c in coordinates]
    return (min(xs), min(ys), max(xs), max(ys))


def _distinct_xy(coordinates: Sequence[Coordinate]) -> int:
    return len({(c[0], c[1]) for c in coordinates})


def _degenerate_shape(coordinates: Sequence[Coordinate]):
    """Lower-dimensional stand-in for a line or ring with too few distinct vertices."""
    if not coordinates:
        return sg.LineString()
    if _distinct_xy(coordinates) == 1:
        return sg.Point(coordinates[0])
    return sg.LineString(coordinates)


def _merge(extents: Sequence[Optional[Extent]]) -> Optional[Extent]:
    present = [e for e in extents if e is not None]
    if not present:
        return None
    return (
        min(e[0] for e in present),
        min(e[1] for e in present),
        max(e[2] for e in present),
        max(e[3] for e in present),
    )


@dataclass(frozen=True)
class Point:
    coordinates: Coordinate
    type: GeometryType = field(default=GeometryType.POINT, init=False)

    def __post_init__(self):
        object.__setattr__(self, "coordinates", as_coordinate(self.coordinates))

    def extent(self) -> Optional[Extent]:
        x, y = self.coordinates[0], self.coordinates[1]
        return (x, y, x, y)

    def to_shapely(self) -> sg.Point:
        return sg.Point(self.coordinates)


@dataclass(frozen=True)
class LineString:
    coordinates: Tuple[Coordinate, ...]
    type: GeometryType = field(default=GeometryType.LINE_STRING, init=False)

    def __post_init__(self):
        object.__setattr__(self, "coordinates", _coordinates(self.coordinates))

    def extent(self) -> Optional[Extent]:
        return _bounds(self.coordinates)

    def to_shapely(self):
        if _distinct_xy(self.coordinates) < 2:
            return _degenerate_shape(self.coordinates)
        return sg.LineString(self.coordinates)


@dataclass(frozen=True)
class LinearRing:
    """Closed coordinate sequence; the first coordinate is appended when missing at the end."""

    coordinates: Tuple[Coordinate, ...]
    type: GeometryType = field(default=GeometryType.LINEAR_RING, init=False)

    def __post_init__(self):
        coordinates = _coordinates(self.coordinates)
        if coordinates and coordinates[0] != coordinates[-1]:
            coordinates = coordinates + (coordinates[0],)
        object.__setattr__(self, "coordinates", coordinates)

    def extent(self) -> Optional[Extent]:
        return _bounds(self.coordinates)

    def to_shapely(self):
        if _distinct_xy(self.coordinates) < 3:
            return _degenerate_shape(self.coordinates)
        return sg.LinearRing(self.coordinates)


@dataclass(frozen=True)
class Polygon:
    """Exterior ring first, then holes. Rings are stored as given."""

    rings: Tuple[Tuple[Coordinate, ...], ...]
    type: GeometryType = field(default=GeometryType.POLYGON, init=False)

    def __post_init__(self):
        object.__setattr__(self, "rings", tuple(_coordinates(ring) for ring in self.rings))

    def extent(self) -> Optional[Extent]:
        # The exterior ring bounds the holes
        return _bounds(self.rings[0]) if self.rings else None

    def to_shapely(self):
        """
        Shapely polygon, or a Point/LineString when the exterior ring has fewer
        than 3 distinct vertices (tile geometries collapsed by simplification).
        Holes with fewer than 3 distinct vertices are dropped.
        """
        if not self.rings:
            return sg.Polygon()
        exterior = self.rings[0]
        if _distinct_xy(exterior) < 3:
            return _degenerate_shape(exterior)
        holes = [ring for ring in self.rings[1:] if _distinct_xy(ring) >= 3]
        return sg.Polygon(exterior, holes)

    def interior_point(self) -> Optional[Point]:
        """
        A point inside the polygon (shapely representative point).

        Degenerate polygons fall back to the middle vertex of the exterior ring;
        None only when the exterior ring is empty.
        """
        exterior = self.rings[0] if self.rings else ()
        if not exterior:
            return None
        shape = self.to_shapely()
        if isinstance(shape, sg.Polygon) and not shape.is_empty:
            try:
                rep = shape.representative_point()
            except (ValueError, GEOSException) as e:
                logger.debug(f"Representative point failed, using ring vertex: {e}")
            else:
                if not rep.is_empty:
                    return Point((rep.x, rep.y))
        return Point(exterior[len(exterior) // 2])


@dataclass(frozen=True)
class MultiPoint:
    points: Tuple[Point, ...]
    type: GeometryType = field(default=GeometryType.MULTI_POINT, init=False)

    def __post_init__(self):
        object.__setattr__(
            self, "points", tuple(p if isinstance(p, Point) else Point(p) for p in self.points)
        )

    def extent(self) -> Optional[Extent]:
        return _bounds([p.coordinates for p in self.points])

    def to_shapely(self) -> sg.MultiPoint:
        return sg.MultiPoint([p.coordinates for p in self.points])


@dataclass(frozen=True)
class MultiLineString:
    lines: Tuple[LineString, ...]
    type: GeometryType = field(default=GeometryType.MULTI_LINE_STRING, init=False)

    def __post_init__(self):
        object.__setattr__(
            self, "lines", tuple(line if isinstance(line, LineString) else LineString(line) for line in self.lines)
        )

    def extent(self) -> Optional[Extent]:
        return _merge([line.extent() for line in self.lines])

    def to_shapely(self):
        parts = [line.to_shapely() for line in self.lines]
        if all(isinstance(part, sg.LineString) and not part.is_empty for part in parts):
            return sg.MultiLineString(parts)
        return sg.GeometryCollection(parts)


@dataclass(frozen=True)
class MultiPolygon:
    polygons: Tuple[Polygon, ...]
    type: GeometryType = field(default=GeometryType.MULTI_POLYGON, init=False)

    def __post_init__(self):
        object.__setattr__(
            self, "polygons", tuple(p if isinstance(p, Polygon) else Polygon(p) for p in self.polygons)
        )

    def extent(self) -> Optional[Extent]:
        return _merge([polygon.extent() for polygon in self.polygons])

    def to_shapely(self):
        parts = [polygon.to_shapely() for polygon in self.polygons]
        if all(isinstance(part, sg.Polygon) and not part.is_empty for part in parts):
            return sg.MultiPolygon(parts)
        return sg.GeometryCollection(parts)

    def interior_points(self) -> MultiPoint:
        """One interior point per non-empty member polygon, in member order."""
        points = [polygon.interior_point() for polygon in self.polygons]
        return MultiPoint(tuple(p for p in points if p is not None))


@dataclass(frozen=True)
class GeometryCollection:
    geometries: Tuple["Geometry", ...]
    type: GeometryType = field(default=GeometryType.GEOMETRY_COLLECTION, init=False)

    def __post_init__(self):
        object.__setattr__(self, "geometries", tuple(self.geometries))

    def extent(self) -> Optional[Extent]:
        return _merge([g.extent() for g in self.geometries])

    def to_shapely(self) -> sg.GeometryCollection:
        return sg.GeometryCollection([g.to_shapely() for g in self.geometries])


@dataclass(frozen=True)
class Circle:
    center: Coordinate
    radius: float = 0.0
    type: GeometryType = field(default=GeometryType.CIRCLE, init=False)

    def __post_init__(self):
        object.__setattr__(self, "center", as_coordinate(self.center))
        if self.radius < 0:
            raise ValueError(f"Circle radius must be >= 0, got {self.radius}")

    def extent(self) -> Optional[Extent]:
        x, y = self.center[0], self.center[1]
        return (x - self.radius, y - self.radius, x + self.radius, y + self.radius)

    def to_shapely(self):
        center = sg.Point(self.center[0], self.center[1])
        return center.buffer(self.radius) if self.radius > 0 else center


Geometry = Union[
    Point,
    LineString,
    LinearRing,
    Polygon,
    MultiPoint,
    MultiLineString,
    MultiPolygon,
    GeometryCollection,
    Circle,
]


@dataclass
class TiledGeometry:
    """
    Compact render geometry as found in vector tiles.

    flat_coordinates holds interleaved x,y pairs. ends are exclusive end offsets
    into flat_coordinates (counted in numbers, not pairs), one per ring/line.
    endss are exclusive end offsets into ends, one per polygon of a MultiPolygon.
    geometries holds already materialised children of a GeometryCollection.
    """

    type: str
    flat_coordinates: List[float]
    ends: Optional[List[int]] = None
    endss: Optional[List[int]] = None
    properties: Dict[str, Any] = field(default_factory=dict)
    id: Optional[Union[str, int]] = None
    geometries: Optional[List[Geometry]] = None

    def clone(self) -> "TiledGeometry":
        """Deep copy of the coordinate buffer and boundary arrays; properties are shared."""
        return TiledGeometry(
            type=self.type,
            flat_coordinates=list(self.flat_coordinates),
            ends=list(self.ends) if self.ends is not None else None,
            endss=list(self.endss) if self.endss is not None else None,
            properties=self.properties,
            id=self.id,
            geometries=list(self.geometries) if self.geometries is not None else None,
        )


@dataclass
class Feature:
    geometry: Optional[Geometry]
    properties: Dict[str, Any] = field(default_factory=dict)
    id: Optional[Union[str, int]] = None

    def to_geojson(self) -> Dict[str, Any]:
        return {
            "type": "Feature",
            "id": self.id,
            "properties": dict(self.properties),
            "geometry": geometry_to_geojson(self.geometry),
        }


def geometry_to_geojson(geometry: Optional[Geometry]) -> Optional[Dict[str, Any]]:
    """
    GeoJSON dict for a geometry.

    LinearRing is written as a LineString and Circle as a Point (GeoJSON has
    neither type); the circle radius goes into a "radius" member.
    """
    if geometry is None:
        return None
    kind = geometry.type
    if kind is GeometryType.POINT:
        return {"type": "Point", "coordinates": list(geometry.coordinates)}
    if kind in (GeometryType.LINE_STRING, GeometryType.LINEAR_RING):
        return {"type": "LineString", "coordinates": [list(c) for c in geometry.coordinates]}
    if kind is GeometryType.POLYGON:
        return {"type": "Polygon", "coordinates": [[list(c) for c in ring] for ring in geometry.rings]}
    if kind is GeometryType.MULTI_POINT:
        return {"type": "MultiPoint", "coordinates": [list(p.coordinates) for p in geometry.points]}
    if kind is GeometryType.MULTI_LINE_STRING:
        return {
            "type": "MultiLineString",
            "coordinates": [[list(c) for c in line.coordinates] for line in geometry.lines],
        }
    if kind is GeometryType.MULTI_POLYGON:
        return {
            "type": "MultiPolygon",
            "coordinates": [
                [[list(c) for c in ring] for ring in polygon.rings] for polygon in geometry.polygons
            ],
        }
    if kind is GeometryType.GEOMETRY_COLLECTION:
        return {
            "type": "GeometryCollection",
            "geometries": [geometry_to_geojson(g) for g in geometry.geometries],
        }
    if kind is GeometryType.CIRCLE:
        return {"type": "Point", "coordinates": list(geometry.center), "radius": geometry.radius}
    raise TypeError(f"Unsupported geometry: {geometry!r}")
