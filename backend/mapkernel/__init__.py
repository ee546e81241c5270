"""
mapkernel
Geometry and projection kernel for web-map code: CRS catalogue, tiled geometry
decoding, representative points, extent/scale arithmetic and GeoJSON reprojection
"""
from .errors import CatalogueError, MalformedGeometryEncoding, MapKernelError, RegistryFrozen, UnknownProjection
from .projection import CRSRegistry, ProjectionPipeline, build_default_registry

__version__ = "0.1.0"

__all__ = [
    "CatalogueError",
    "MalformedGeometryEncoding",
    "MapKernelError",
    "RegistryFrozen",
    "UnknownProjection",
    "CRSRegistry",
    "ProjectionPipeline",
    "build_default_registry",
]
