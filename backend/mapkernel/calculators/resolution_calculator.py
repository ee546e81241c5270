"""
Resolution Calculator
Per-zoom-level resolution ladders (map units per pixel) for tiled views
"""
import logging
from typing import List, Optional, Sequence

from ..config import settings
from ..projection.registry import CRSLike, CRSRegistry, ProjectionInfo

logger = logging.getLogger(__name__)


def generate_resolutions(
    crs: CRSLike,
    extent: Optional[Sequence[float]] = None,
    min_zoom: Optional[int] = None,
    max_zoom: Optional[int] = None,
    registry: Optional[CRSRegistry] = None,
) -> List[float]:
    """
    Build the resolution ladder for a CRS.

    Level 0 fits the extent width into one tile; every following level halves it.

    Args:
        crs: CRS code or resolved ProjectionInfo
        extent: Extent to cover; defaults to the CRS validity extent
        min_zoom: First zoom level (default DEFAULT_MIN_ZOOM)
        max_zoom: Zoom level bound, exclusive (default DEFAULT_MAX_ZOOM)
        registry: Needed only when crs is a code

    Returns:
        list: max_zoom - min_zoom strictly decreasing resolutions, coarsest first
    """
    if extent is None:
        if isinstance(crs, ProjectionInfo):
            info = crs
        elif registry is not None:
            info = registry.resolve(crs)
        else:
            raise ValueError("A CRS registry is required to resolve the default extent of a CRS code")
        extent = info.extent

    min_zoom = settings.DEFAULT_MIN_ZOOM if min_zoom is None else min_zoom
    max_zoom = settings.DEFAULT_MAX_ZOOM if max_zoom is None else max_zoom

    base_size = (extent[2] - extent[0]) / settings.TILE_SIZE_PX
    levels = max(0, max_zoom - min_zoom)
    return [base_size / (2 ** i) for i in range(levels)]
