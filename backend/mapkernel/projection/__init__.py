"""
Projection Module
Handles the CRS catalogue, coordinate transformations and GeoJSON reprojection
"""
from .catalogue import DEFAULT_CATALOGUE, CRSDefinition, load_catalogue
from .registry import CRSRegistry, ProjectionInfo, build_default_registry
from .geojson_reprojector import reproject_features, reproject_to_geographic
from .pipeline import ProjectionPipeline

__all__ = [
    "DEFAULT_CATALOGUE",
    "CRSDefinition",
    "load_catalogue",
    "CRSRegistry",
    "ProjectionInfo",
    "build_default_registry",
    "reproject_features",
    "reproject_to_geographic",
    "ProjectionPipeline",
]
