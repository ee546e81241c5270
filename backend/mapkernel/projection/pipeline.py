"""
Projection Pipeline
Orchestrates CRS lookups, coordinate/extent transforms and view metrics behind dict results
"""
import logging
from typing import Dict, Any, List, Optional, Sequence

from pyproj.exceptions import ProjError

from ..calculators.extent_calculator import extent_center, extent_height, extent_width, transform_extent
from ..calculators.resolution_calculator import generate_resolutions
from ..calculators.scale_calculator import wmts_scale
from ..config import settings
from ..errors import MapKernelError
from .geojson_reprojector import reproject_features
from .registry import CRSRegistry, build_default_registry, is_finite_coordinate

logger = logging.getLogger(__name__)


class ProjectionPipeline:
    """
    Pipeline for coordinate transformations between registered CRSs.

    Every public method returns a dict carrying "success"; kernel errors are
    logged and reported in "error" instead of being raised.
    """

    def __init__(self, registry: Optional[CRSRegistry] = None):
        """Initialize projection pipeline with a registry (default catalogue when omitted)"""
        self.registry = registry or build_default_registry()

    def transform_coordinates(
        self,
        coordinates: Sequence[Sequence[float]],
        source_crs: str,
        target_crs: str
    ) -> dict:
        """
        Transform coordinates between coordinate reference systems

        Args:
            coordinates: List of coordinate tuples (x, y[, z...])
            source_crs: Source CRS code (e.g., "EPSG:25830")
            target_crs: Target CRS code

        Returns:
            dict: Transformed coordinates
        """
        try:
            validation_result = self._validate_coordinates(coordinates)
            if not validation_result["valid"]:
                return {
                    "success": False,
                    "error": f"Input validation failed: {validation_result['errors']}"
                }

            logger.info(f"🔄 Transforming {len(coordinates)} coordinates from {source_crs} to {target_crs}")

            transform = self.registry.get_transform(source_crs, target_crs)
            transformed_coords = []
            transformation_errors = []

            for i, coord in enumerate(coordinates):
                transformed = transform(coord)
                if is_finite_coordinate(transformed):
                    transformed_coords.append(transformed)
                else:
                    transformation_errors.append(f"Point {i+1}: transformation produced non-finite coordinates")
                    logger.warning(f"❌ Failed to transform point {i+1}: {coord}")

            if transformation_errors:
                return {
                    "success": False,
                    "error": f"Incomplete coordinate transformation: {len(transformed_coords)}/{len(coordinates)} successful",
                    "transformation_errors": transformation_errors[:10]
                }

            return {
                "success": True,
                "transformed_coordinates": transformed_coords,
                "source_crs": source_crs,
                "target_crs": target_crs,
                "coordinate_count": len(transformed_coords)
            }

        except (MapKernelError, ProjError) as e:
            logger.error(f"❌ Coordinate transformation failed: {str(e)}")
            return {
                "success": False,
                "error": f"Coordinate transformation error: {str(e)}"
            }

    def reproject_geojson(
        self,
        features: List[Dict[str, Any]],
        source_crs: str,
        target_crs: Optional[str] = None
    ) -> dict:
        """
        Reproject GeoJSON features (geographic CRS by default)

        Args:
            features: GeoJSON feature dicts
            source_crs: CRS of the feature coordinates
            target_crs: Target CRS, defaults to GEOGRAPHIC_CRS

        Returns:
            dict: Result with new feature dicts
        """
        target = target_crs or settings.GEOGRAPHIC_CRS
        try:
            reprojected = reproject_features(features, source_crs, target, self.registry)
            logger.info(f"✅ Reprojected {len(reprojected)} features {source_crs} → {target}")
            return {
                "success": True,
                "type": "FeatureCollection",
                "features": reprojected,
                "source_crs": source_crs,
                "target_crs": target
            }
        except (MapKernelError, ProjError, TypeError, IndexError) as e:
            logger.error(f"❌ GeoJSON reprojection failed: {str(e)}")
            return {
                "success": False,
                "error": f"GeoJSON reprojection error: {str(e)}"
            }

    def transform_extent(self, extent: Sequence[float], source_crs: str, target_crs: str) -> dict:
        """Transform an extent, reporting whether the full-domain shortcut applied"""
        try:
            if len(extent) != 4:
                return {"success": False, "error": "Extent must have 4 values [minX, minY, maxX, maxY]"}

            transformed = transform_extent(tuple(extent), source_crs, target_crs, self.registry)
            return {
                "success": True,
                "extent": list(transformed),
                "source_crs": source_crs,
                "target_crs": target_crs,
                "full_domain": list(transformed) == list(self.registry.resolve(target_crs).extent)
            }
        except (MapKernelError, ProjError) as e:
            logger.error(f"❌ Extent transformation failed: {str(e)}")
            return {
                "success": False,
                "error": f"Extent transformation error: {str(e)}"
            }

    def get_view_metrics(
        self,
        extent: Sequence[float],
        crs: str,
        viewport_pixel_width: float,
        exact: bool = False
    ) -> dict:
        """
        Scale and size metrics for a map view

        Args:
            extent: Visible extent in CRS units
            crs: CRS code of the view
            viewport_pixel_width: Map width in pixels
            exact: Report the unrounded scale

        Returns:
            dict: scale, resolution, size and center of the view
        """
        try:
            info = self.registry.resolve(crs)
            scale = wmts_scale(viewport_pixel_width, extent, info.meters_per_unit, exact)
            return {
                "success": True,
                "crs": info.code,
                "scale": scale,
                "resolution": extent_width(extent) / viewport_pixel_width,
                "width": extent_width(extent),
                "height": extent_height(extent),
                "center": list(extent_center(extent)),
                "units": info.units
            }
        except (MapKernelError, ValueError) as e:
            logger.error(f"❌ View metrics failed: {str(e)}")
            return {
                "success": False,
                "error": f"View metrics error: {str(e)}"
            }

    def get_resolutions(
        self,
        crs: str,
        extent: Optional[Sequence[float]] = None,
        min_zoom: Optional[int] = None,
        max_zoom: Optional[int] = None
    ) -> dict:
        """Resolution ladder for a CRS"""
        try:
            resolutions = generate_resolutions(crs, extent, min_zoom, max_zoom, registry=self.registry)
            return {
                "success": True,
                "crs": crs,
                "resolutions": resolutions,
                "zoom_levels": len(resolutions)
            }
        except MapKernelError as e:
            return {
                "success": False,
                "error": f"Resolution generation error: {str(e)}"
            }

    def get_crs_info(self, code: str) -> dict:
        """Get metadata of a registered CRS"""
        try:
            return {"success": True, **self.registry.describe(code)}
        except MapKernelError as e:
            return {"success": False, "error": str(e)}

    def get_supported_crs(self) -> dict:
        """Get registered coordinate reference systems grouped by canonical code"""
        groups: Dict[str, List[str]] = {}
        for code in self.registry.codes():
            canonical = self.registry.resolve(code).canonical_code
            groups.setdefault(canonical, []).append(code)

        return {
            "geographic": sorted(c for c in groups if self.registry.resolve(c).is_geographic()),
            "projected": sorted(c for c in groups if not self.registry.resolve(c).is_geographic()),
            "aliases": groups,
            "default_map_crs": settings.DEFAULT_MAP_CRS,
            "geographic_crs": settings.GEOGRAPHIC_CRS
        }

    def _validate_coordinates(self, coordinates: Sequence[Sequence[float]]) -> dict:
        """Validate coordinate inputs"""
        errors = []

        if not coordinates:
            errors.append("At least 1 coordinate required")

        for i, coord in enumerate(coordinates or []):
            if not isinstance(coord, (list, tuple)) or len(coord) < 2:
                errors.append(f"Coordinate {i} must have at least 2 ordinates")
                continue
            try:
                float(coord[0])
                float(coord[1])
            except (ValueError, TypeError):
                errors.append(f"Coordinate {i} contains non-numeric values")

        return {
            "valid": len(errors) == 0,
            "errors": errors
        }
