"""
Central configuration for kernel settings.
"""
import os


# Tile edge length used to derive the coarsest resolution of a ladder
TILE_SIZE_PX: int = int(os.getenv("MAPKERNEL_TILE_SIZE", "256"))

DEFAULT_MIN_ZOOM: int = int(os.getenv("MAPKERNEL_DEFAULT_MIN_ZOOM", "0"))
DEFAULT_MAX_ZOOM: int = int(os.getenv("MAPKERNEL_DEFAULT_MAX_ZOOM", "20"))

# Physical pixel size (OGC standardized rendering pixel)
PIXEL_SIZE_MM: float = float(os.getenv("MAPKERNEL_PIXEL_SIZE_MM", "0.28"))

# Half-width of the synthetic extent built around a lone point feature
SINGLE_POINT_BUFFER_METERS: float = float(os.getenv("MAPKERNEL_SINGLE_POINT_BUFFER_METERS", "1000"))

GEOGRAPHIC_CRS: str = os.getenv("MAPKERNEL_GEOGRAPHIC_CRS", "EPSG:4326")
DEFAULT_MAP_CRS: str = os.getenv("MAPKERNEL_DEFAULT_MAP_CRS", "EPSG:3857")

FEATURE_ID_PREFIX: str = os.getenv("MAPKERNEL_FEATURE_ID_PREFIX", "mapkernel_feature_")

# Optional JSON table with extra CRS definitions, merged into the default catalogue
EXTRA_CATALOGUE_PATH: str | None = os.getenv("MAPKERNEL_CRS_CATALOGUE") or None
