from __future__ import annotations

import math

import pytest

from .pipeline import ProjectionPipeline


@pytest.fixture(scope="module")
def pipeline(registry) -> ProjectionPipeline:
    return ProjectionPipeline(registry)


def test_transform_coordinates(pipeline: ProjectionPipeline) -> None:
    result = pipeline.transform_coordinates([(10.0, 0.0), (0.0, 0.0, 5.0)], "EPSG:4326", "EPSG:3857")
    assert result["success"] is True
    assert result["coordinate_count"] == 2
    first, second = result["transformed_coordinates"]
    assert first[0] == pytest.approx(6378137 * math.radians(10), abs=1e-3)
    assert second[2] == 5.0


def test_transform_coordinates_unknown_crs(pipeline: ProjectionPipeline) -> None:
    result = pipeline.transform_coordinates([(0.0, 0.0)], "EPSG:4326", "EPSG:12345678")
    assert result["success"] is False
    assert "EPSG:12345678" in result["error"]


def test_transform_coordinates_validates_input(pipeline: ProjectionPipeline) -> None:
    result = pipeline.transform_coordinates([(1.0,), ("a", 2.0)], "EPSG:4326", "EPSG:3857")
    assert result["success"] is False
    assert "validation" in result["error"]


def test_transform_coordinates_rejects_non_finite_output(pipeline: ProjectionPipeline) -> None:
    # Latitude beyond the pole is outside the Mercator domain
    result = pipeline.transform_coordinates([(0.0, 91.0)], "EPSG:4326", "EPSG:3857")
    assert result["success"] is False
    assert result["transformation_errors"] == ["Point 1: transformation produced non-finite coordinates"]


def test_reproject_geojson_defaults_to_geographic(pipeline: ProjectionPipeline) -> None:
    features = [{"type": "Feature", "properties": {}, "geometry": {"type": "Point", "coordinates": [0.0, 0.0]}}]
    result = pipeline.reproject_geojson(features, "EPSG:3857")
    assert result["success"] is True
    assert result["target_crs"] == "EPSG:4326"
    assert result["features"][0]["geometry"]["coordinates"] == pytest.approx([0.0, 0.0], abs=1e-9)


def test_transform_extent_full_domain(pipeline: ProjectionPipeline) -> None:
    result = pipeline.transform_extent([-180, -90, 180, 90], "EPSG:4326", "EPSG:3857")
    assert result["success"] is True
    assert result["full_domain"] is True
    assert result["extent"][2] == pytest.approx(20037508.342789244)


def test_transform_extent_rejects_bad_length(pipeline: ProjectionPipeline) -> None:
    assert pipeline.transform_extent([0, 0, 1], "EPSG:4326", "EPSG:3857")["success"] is False


def test_view_metrics(pipeline: ProjectionPipeline) -> None:
    result = pipeline.get_view_metrics([0.0, 0.0, 1000.0, 500.0], "EPSG:3857", 1000)
    assert result["success"] is True
    assert result["scale"] == 4000
    assert result["resolution"] == 1.0
    assert result["center"] == [500.0, 250.0]


def test_view_metrics_rejects_zero_width(pipeline: ProjectionPipeline) -> None:
    assert pipeline.get_view_metrics([0.0, 0.0, 1.0, 1.0], "EPSG:3857", 0)["success"] is False


def test_resolutions(pipeline: ProjectionPipeline) -> None:
    result = pipeline.get_resolutions("EPSG:3857", [0, 0, 2560, 2560], 0, 3)
    assert result["resolutions"] == [10.0, 5.0, 2.5]
    assert result["zoom_levels"] == 3


def test_supported_crs_groups(pipeline: ProjectionPipeline) -> None:
    supported = pipeline.get_supported_crs()
    assert "EPSG:4326" in supported["geographic"]
    assert "EPSG:3857" in supported["projected"]
    assert "EPSG:900913" in supported["aliases"]["EPSG:3857"]


def test_crs_info(pipeline: ProjectionPipeline) -> None:
    assert pipeline.get_crs_info("EPSG:4258")["units"] == "degrees"
    assert pipeline.get_crs_info("nope")["success"] is False
