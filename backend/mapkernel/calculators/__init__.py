"""
Calculators Module
Extent, scale and resolution arithmetic
"""
from .extent_calculator import (
    extend,
    extent_center,
    extent_height,
    extent_width,
    features_extent,
    geometry_extent,
    transform_extent,
)
from .scale_calculator import wmts_scale, wmts_scale_for_crs
from .resolution_calculator import generate_resolutions

__all__ = [
    "extend",
    "extent_center",
    "extent_height",
    "extent_width",
    "features_extent",
    "geometry_extent",
    "transform_extent",
    "wmts_scale",
    "wmts_scale_for_crs",
    "generate_resolutions",
]
