"""
Scale Calculator
Human-facing map scale (1:N) from viewport width, projected extent and CRS units
"""
import logging
import math
from typing import Sequence

from ..config import settings
from ..projection.registry import CRSLike, CRSRegistry

logger = logging.getLogger(__name__)

# Rounding bands for non-exact scales
UNIT_ROUNDING_LIMIT = 1000
THOUSAND_ROUNDING_LIMIT = 950000


def _round_half_up(value: float, step: float) -> float:
    return math.floor(value / step + 0.5) * step


def wmts_scale(
    viewport_pixel_width: float,
    projected_extent: Sequence[float],
    meters_per_unit: float,
    exact: bool = False,
) -> int:
    """
    Calculate the map scale denominator.

    Args:
        viewport_pixel_width: Map width in pixels
        projected_extent: Visible extent [minX, minY, maxX, maxY] in CRS units
        meters_per_unit: Meters per CRS unit
        exact: Skip the rounding to 1 / 1000 / 1000000

    Returns:
        int: Scale denominator, always truncated to an integer
    """
    if viewport_pixel_width <= 0:
        raise ValueError(f"Viewport width must be positive, got {viewport_pixel_width}")

    span = projected_extent[2] - projected_extent[0]
    # (meters on screen / pixels) / meters per pixel
    scale = ((meters_per_unit * span / viewport_pixel_width) * 1000) / settings.PIXEL_SIZE_MM

    if not exact:
        if UNIT_ROUNDING_LIMIT <= scale <= THOUSAND_ROUNDING_LIMIT:
            scale = _round_half_up(scale, 1000)
        elif scale > THOUSAND_ROUNDING_LIMIT:
            scale = _round_half_up(scale, 1000000)
        else:
            scale = _round_half_up(scale, 1)

    return math.trunc(scale)


def wmts_scale_for_crs(
    viewport_pixel_width: float,
    projected_extent: Sequence[float],
    crs: CRSLike,
    registry: CRSRegistry,
    exact: bool = False,
) -> int:
    """wmts_scale with meters-per-unit taken from a registered CRS."""
    info = registry.resolve(crs)
    return wmts_scale(viewport_pixel_width, projected_extent, info.meters_per_unit, exact)
