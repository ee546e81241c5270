"""
Spatial Filters
Keep only the features whose geometry intersects a query geometry
"""
from __future__ import annotations

import logging
from typing import List, Sequence

from shapely.errors import GEOSException
from shapely.prepared import prep

from .types import Feature, Geometry

logger = logging.getLogger(__name__)


class IntersectsFilter:
    """Reusable filter bound to one query geometry."""

    def __init__(self, query: Geometry):
        self.query = query
        self._prepared = prep(query.to_shapely())

    def matches(self, feature: Feature) -> bool:
        if feature.geometry is None:
            return False
        try:
            return self._prepared.intersects(feature.geometry.to_shapely())
        except (ValueError, GEOSException) as e:
            logger.debug(f"Skipping feature {feature.id!r}: geometry not usable by shapely ({e})")
            return False

    def execute(self, features: Sequence[Feature]) -> List[Feature]:
        """Features intersecting the query, in input order."""
        selected = [feature for feature in features if self.matches(feature)]
        logger.debug(f"🔎 Intersects filter kept {len(selected)}/{len(features)} features")
        return selected


def intersect(query: Geometry) -> IntersectsFilter:
    return IntersectsFilter(query)
