"""
GeoJSON Reprojector
Reprojects the coordinates of GeoJSON features, returning new feature dicts
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from ..config import settings
from .registry import CoordinateTransform, CRSLike, CRSRegistry

logger = logging.getLogger(__name__)

# Nesting depth of the coordinates member above a single position
COORDINATE_DEPTH: Dict[str, int] = {
    "Point": 0,
    "LineString": 1,
    "MultiPoint": 1,
    "MultiLineString": 2,
    "Polygon": 2,
    "MultiPolygon": 3,
}


def reproject_coordinates(coordinates: Any, depth: int, transform: CoordinateTransform) -> Any:
    """Recursively rebuild a coordinates array, transforming every position at depth 0."""
    if depth == 0:
        return list(transform(coordinates))
    return [reproject_coordinates(child, depth - 1, transform) for child in coordinates]


def reproject_geometry(geometry: Optional[Dict[str, Any]], transform: CoordinateTransform) -> Optional[Dict[str, Any]]:
    """
    New geometry dict with reprojected coordinates.

    Types without a coordinate nesting depth (GeometryCollection, unknown types)
    come back as {"type": ..., "coordinates": []}: their members, including the
    "geometries" of a GeometryCollection, are dropped.
    """
    if geometry is None:
        return None
    geometry_type = geometry.get("type")
    depth = COORDINATE_DEPTH.get(geometry_type)
    if depth is None:
        logger.debug(f"Unsupported GeoJSON geometry type {geometry_type!r}; coordinates left empty")
        coordinates: Any = []
    else:
        coordinates = reproject_coordinates(geometry.get("coordinates", []), depth, transform)
    return {"type": geometry_type, "coordinates": coordinates}


def reproject_features(
    features: Sequence[Dict[str, Any]],
    src_code: CRSLike,
    tgt_code: CRSLike,
    registry: CRSRegistry,
) -> List[Dict[str, Any]]:
    """
    Reproject GeoJSON features from src_code to tgt_code.

    Every feature member other than geometry is carried over as-is; the input
    features are never modified. GeometryCollection geometries lose their
    members (see reproject_geometry).

    Raises:
        UnknownProjection: if either code is not registered
    """
    transform = registry.get_transform(src_code, tgt_code)
    result = []
    for feature in features:
        reprojected = dict(feature)
        reprojected["geometry"] = reproject_geometry(feature.get("geometry"), transform)
        result.append(reprojected)
    return result


def reproject_to_geographic(
    features: Sequence[Dict[str, Any]], src_code: CRSLike, registry: CRSRegistry
) -> List[Dict[str, Any]]:
    """Reproject GeoJSON features into the canonical geographic CRS (GEOGRAPHIC_CRS)."""
    return reproject_features(features, src_code, settings.GEOGRAPHIC_CRS, registry)
