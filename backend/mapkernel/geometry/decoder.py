"""
Tiled Geometry Decoder
Turns flat-buffer render geometries from vector tiles into typed geometries and features
"""
from __future__ import annotations

import logging
import math
import uuid
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..config import settings
from ..errors import MalformedGeometryEncoding
from ..projection.registry import CRSLike, CRSRegistry
from .types import (
    Circle,
    Coordinate,
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
)

logger = logging.getLogger(__name__)

STRIDE = 2


def _known(kind) -> bool:
    try:
        GeometryType(kind)
    except ValueError:
        return False
    return True


def _pairs(flat: Sequence[float], start: int = 0, end: Optional[int] = None) -> List[Coordinate]:
    end = len(flat) if end is None else end
    return [(float(flat[i]), float(flat[i + 1])) for i in range(start, end, STRIDE)]


def _check_buffer(tiled: TiledGeometry) -> None:
    if len(tiled.flat_coordinates) % STRIDE:
        raise MalformedGeometryEncoding(
            f"{tiled.type}: coordinate buffer length {len(tiled.flat_coordinates)} is not a multiple of {STRIDE}"
        )


def _ends(tiled: TiledGeometry) -> List[int]:
    """Validated ring/line boundaries; defaults to one segment spanning the buffer."""
    size = len(tiled.flat_coordinates)
    ends = list(tiled.ends) if tiled.ends else [size]
    previous = 0
    for end in ends:
        if end < previous or end > size or end % STRIDE:
            raise MalformedGeometryEncoding(
                f"{tiled.type}: ends {ends} do not fit a coordinate buffer of length {size}"
            )
        previous = end
    return ends


def _endss(tiled: TiledGeometry, ends: List[int]) -> List[int]:
    """Validated polygon boundaries into ends; defaults to one polygon holding every ring."""
    endss = list(tiled.endss) if tiled.endss else [len(ends)]
    previous = 0
    for end in endss:
        if end < previous or end > len(ends):
            raise MalformedGeometryEncoding(
                f"{tiled.type}: endss {endss} do not fit {len(ends)} ends"
            )
        previous = end
    return endss


def _split(flat: Sequence[float], ends: Sequence[int], offset: int = 0) -> List[List[Coordinate]]:
    segments = []
    start = offset
    for end in ends:
        segments.append(_pairs(flat, start, end))
        start = end
    return segments


def _decode(tiled: TiledGeometry) -> Optional[Geometry]:
    flat = tiled.flat_coordinates
    kind = tiled.type

    if kind == GeometryType.GEOMETRY_COLLECTION:
        return GeometryCollection(tuple(tiled.geometries or ()))

    if not _known(kind):
        logger.debug(f"Unsupported tiled geometry type {kind!r}; no geometry decoded")
        return None

    _check_buffer(tiled)

    if kind == GeometryType.POINT:
        if len(flat) < STRIDE:
            raise MalformedGeometryEncoding("Point: empty coordinate buffer")
        return Point(_pairs(flat, 0, STRIDE)[0])

    if kind == GeometryType.LINE_STRING:
        return LineString(_pairs(flat))

    if kind == GeometryType.LINEAR_RING:
        return LinearRing(_pairs(flat))

    if kind == GeometryType.POLYGON:
        return Polygon(tuple(_split(flat, _ends(tiled))))

    if kind == GeometryType.MULTI_POINT:
        return MultiPoint(tuple(Point(pair) for pair in _pairs(flat)))

    if kind == GeometryType.MULTI_LINE_STRING:
        return MultiLineString(tuple(LineString(line) for line in _split(flat, _ends(tiled))))

    if kind == GeometryType.MULTI_POLYGON:
        ends = _ends(tiled)
        polygons = []
        ring_start = 0
        offset = 0
        for polygon_end in _endss(tiled, ends):
            polygon_ends = ends[ring_start:polygon_end]
            polygons.append(Polygon(tuple(_split(flat, polygon_ends, offset))))
            if polygon_ends:
                offset = polygon_ends[-1]
            ring_start = polygon_end
        return MultiPolygon(tuple(polygons))

    # Circle: center pair, optionally followed by one perimeter pair
    pairs = _pairs(flat)
    if not pairs:
        raise MalformedGeometryEncoding("Circle: empty coordinate buffer")
    center = pairs[0]
    radius = math.dist(center, pairs[1]) if len(pairs) > 1 else 0.0
    return Circle(center, radius)


def reproject_tiled_geometry(
    tiled: TiledGeometry, tile_crs: CRSLike, map_crs: CRSLike, registry: CRSRegistry
) -> TiledGeometry:
    """Clone the tiled geometry and move every coordinate pair from tile_crs to map_crs."""
    _check_buffer(tiled)
    cloned = tiled.clone()
    if not cloned.flat_coordinates:
        return cloned

    buffer = np.asarray(cloned.flat_coordinates, dtype=float).reshape(-1, STRIDE)
    xs, ys = registry.transform_arrays(tile_crs, map_crs, buffer[:, 0], buffer[:, 1])
    cloned.flat_coordinates = np.column_stack((xs, ys)).ravel().tolist()
    return cloned


def decode_tiled_geometry(
    tiled: TiledGeometry,
    tile_crs: Optional[CRSLike] = None,
    map_crs: Optional[CRSLike] = None,
    registry: Optional[CRSRegistry] = None,
) -> Optional[Geometry]:
    """
    Decode a tiled render geometry into a typed geometry.

    When both CRS arguments are given the geometry is cloned and reprojected from
    tile space to map space first; the input is never modified.

    Args:
        tiled: Flat-buffer render geometry
        tile_crs: CRS of the tile coordinates
        map_crs: CRS the result should be expressed in
        registry: Registry used to resolve both CRSs (required when reprojecting)

    Returns:
        Geometry, or None for a type tag with no geometry counterpart

    Raises:
        MalformedGeometryEncoding: if ends/endss do not fit the coordinate buffer
        UnknownProjection: if either CRS is not registered
    """
    if tile_crs is None or map_crs is None:
        return _decode(tiled)

    if registry is None:
        raise ValueError("A CRS registry is required to reproject tiled geometries")

    if not _known(tiled.type):
        logger.debug(f"Unsupported tiled geometry type {tiled.type!r}; no geometry decoded")
        return None

    return _decode(reproject_tiled_geometry(tiled, tile_crs, map_crs, registry))


def generate_feature_id(prefix: str = settings.FEATURE_ID_PREFIX) -> str:
    return f"{prefix}{uuid.uuid4().hex}"


def decode_feature(
    tiled: TiledGeometry,
    tile_crs: Optional[CRSLike] = None,
    map_crs: Optional[CRSLike] = None,
    registry: Optional[CRSRegistry] = None,
    id_prefix: str = settings.FEATURE_ID_PREFIX,
) -> Feature:
    """Decode a tiled render feature into a Feature; ids are generated when absent."""
    geometry = decode_tiled_geometry(tiled, tile_crs, map_crs, registry)
    feature_id = tiled.id if tiled.id not in (None, "") else generate_feature_id(id_prefix)
    return Feature(geometry=geometry, properties=dict(tiled.properties), id=feature_id)


def decode_features(
    tiled_features: Sequence[TiledGeometry],
    tile_crs: Optional[CRSLike] = None,
    map_crs: Optional[CRSLike] = None,
    registry: Optional[CRSRegistry] = None,
) -> Tuple[List[Feature], int]:
    """
    Decode a batch of tiled features.

    Returns:
        (features, skipped) where skipped counts features whose type tag had no
        geometry counterpart; those are still returned with geometry None.
    """
    features = [decode_feature(tiled, tile_crs, map_crs, registry) for tiled in tiled_features]
    skipped = sum(1 for feature in features if feature.geometry is None)
    if skipped:
        logger.info(f"⚠️ {skipped}/{len(features)} tiled features decoded without geometry")
    return features, skipped
