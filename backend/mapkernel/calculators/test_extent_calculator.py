from __future__ import annotations

import pytest

from ..geometry.types import Feature, LineString, Point, Polygon
from .extent_calculator import (
    covers_projection_extent,
    extend,
    extent_center,
    features_extent,
    transform_extent,
)


def test_single_point_is_buffered_in_meters(registry) -> None:
    extent = features_extent([Feature(Point((500.0, 700.0)))], "EPSG:3857", registry)
    assert extent == (-500.0, -300.0, 1500.0, 1700.0)


def test_single_point_buffer_uses_native_units(registry) -> None:
    min_x, min_y, max_x, max_y = features_extent([Feature(Point((-3.7, 40.4)))], "EPSG:4326", registry)
    half_width = 1000 / 111319.49079327358
    assert min_x == pytest.approx(-3.7 - half_width)
    assert max_y == pytest.approx(40.4 + half_width)


def test_multiple_features_merge(registry) -> None:
    features = [
        Feature(Point((1.0, 1.0))),
        Feature(LineString([(-2.0, 0.0), (3.0, 5.0)])),
        Feature(None),
    ]
    assert features_extent(features, "EPSG:3857", registry) == (-2.0, 0.0, 3.0, 5.0)


def test_two_points_are_not_buffered(registry) -> None:
    features = [Feature(Point((1.0, 1.0))), Feature(Point((1.0, 1.0)))]
    assert features_extent(features, "EPSG:3857", registry) == (1.0, 1.0, 1.0, 1.0)


def test_single_polygon_uses_exterior_ring(registry) -> None:
    polygon = Polygon([[(0, 0), (4, 0), (4, 2), (0, 0)], [(1, 0.5), (2, 0.5), (2, 1), (1, 0.5)]])
    assert features_extent([Feature(polygon)], "EPSG:25830", registry) == (0.0, 0.0, 4.0, 2.0)


def test_nothing_to_measure(registry) -> None:
    assert features_extent([], "EPSG:3857", registry) is None
    assert features_extent([Feature(None)], "EPSG:3857", registry) is None


def test_extend_and_center() -> None:
    assert extend((0, 0, 1, 1), (-1, 0.5, 0.5, 3)) == (-1, 0, 1, 3)
    assert extent_center((0, 0, 10, 4)) == (5.0, 2.0)


def test_covers_projection_extent() -> None:
    assert covers_projection_extent((-190, -90, 180, 95), (-180, -90, 180, 90))
    assert not covers_projection_extent((-170, -90, 180, 90), (-180, -90, 180, 90))


def test_full_domain_maps_to_target_extent(registry) -> None:
    result = transform_extent((-180, -90, 180, 90), "EPSG:4326", "EPSG:3857", registry)
    assert result == registry.resolve("EPSG:3857").extent


def test_partial_extent_transforms_corners(registry) -> None:
    min_x, min_y, max_x, max_y = transform_extent((-10, -5, 10, 5), "EPSG:4326", "EPSG:3857", registry)
    assert min_x == pytest.approx(-max_x)
    assert min_y == pytest.approx(-max_y)
    assert max_x == pytest.approx(1113194.9079, abs=1e-3)


def test_same_system_is_unchanged(registry) -> None:
    extent = (1.0, 2.0, 3.0, 4.0)
    assert transform_extent(extent, "EPSG:25830", "urn:ogc:def:crs:EPSG::25830", registry) == extent
