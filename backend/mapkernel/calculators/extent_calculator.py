"""
Extent Calculator
Bounding extents for feature sets and CRS-aware extent transformation
"""
from __future__ import annotations

import logging
from functools import reduce
from typing import Optional, Sequence, Tuple

import numpy as np

from ..config import settings
from ..geometry.types import Extent, Feature, Geometry, GeometryType
from ..projection.registry import CRSLike, CRSRegistry

logger = logging.getLogger(__name__)


def extent_width(extent: Extent) -> float:
    return extent[2] - extent[0]


def extent_height(extent: Extent) -> float:
    return extent[3] - extent[1]


def extent_center(extent: Extent) -> Tuple[float, float]:
    return ((extent[0] + extent[2]) / 2, (extent[1] + extent[3]) / 2)


def extend(a: Extent, b: Extent) -> Extent:
    """Union of two extents."""
    return (min(a[0], b[0]), min(a[1], b[1]), max(a[2], b[2]), max(a[3], b[3]))


def geometry_extent(geometry: Optional[Geometry]) -> Optional[Extent]:
    if geometry is None:
        return None
    return geometry.extent()


def buffered_point_extent(x: float, y: float, half_width: float) -> Extent:
    return (x - half_width, y - half_width, x + half_width, y + half_width)


def features_extent(
    features: Sequence[Feature], crs_code: CRSLike, registry: CRSRegistry
) -> Optional[Extent]:
    """
    Extent covering every feature, in the units of crs_code.

    A set made of exactly one Point feature would give a zero-area extent; it is
    replaced with a square of half-width SINGLE_POINT_BUFFER_METERS (converted to
    native units) centered on the point. Features without geometry or with an
    empty geometry are ignored.

    Returns:
        The merged extent, or None when there is nothing to measure
    """
    extents = [geometry_extent(feature.geometry) for feature in features]
    extents = [extent for extent in extents if extent is not None]

    if len(features) == 1 and len(extents) == 1:
        geometry = features[0].geometry
        if geometry.type is GeometryType.POINT:
            half_width = registry.units_per_meter(crs_code, settings.SINGLE_POINT_BUFFER_METERS)
            x, y = geometry.coordinates[0], geometry.coordinates[1]
            extents = [buffered_point_extent(x, y, half_width)]
            logger.debug(f"📍 Single point extent buffered by {half_width} units")

    if not extents:
        return None
    return reduce(extend, extents)


def covers_projection_extent(extent: Extent, projection_extent: Extent) -> bool:
    """True when extent spans at least the whole projection validity extent."""
    return all(
        value <= projection_extent[i] if i < 2 else value >= projection_extent[i]
        for i, value in enumerate(extent)
    )


def transform_extent(
    extent: Extent, src: CRSLike, tgt: CRSLike, registry: CRSRegistry
) -> Extent:
    """
    Transform an extent from src to tgt.

    An extent covering the whole validity extent of src maps to the whole
    validity extent of tgt as-is; transforming it numerically would distort or
    overflow near projection singularities. Otherwise the four corners are
    transformed and their bounding extent returned.
    """
    src_info = registry.resolve(src)
    tgt_info = registry.resolve(tgt)

    if covers_projection_extent(extent, src_info.extent):
        logger.debug(f"🌐 Extent spans {src_info.code}; using {tgt_info.code} validity extent")
        return tuple(tgt_info.extent)

    min_x, min_y, max_x, max_y = extent
    xs = np.array([min_x, min_x, max_x, max_x], dtype=float)
    ys = np.array([min_y, max_y, min_y, max_y], dtype=float)
    out_x, out_y = registry.transform_arrays(src_info, tgt_info, xs, ys)
    return (float(out_x.min()), float(out_y.min()), float(out_x.max()), float(out_y.max()))
