from __future__ import annotations

import pytest

from .resolution_calculator import generate_resolutions


def test_explicit_extent_halves_each_level() -> None:
    assert generate_resolutions("EPSG:3857", (0, 0, 2560, 2560), 0, 3) == [10.0, 5.0, 2.5]


def test_default_extent_and_zoom_range(registry) -> None:
    resolutions = generate_resolutions("EPSG:3857", registry=registry)
    assert len(resolutions) == 20
    assert resolutions[0] == pytest.approx(156543.03392804097)
    assert all(a > b for a, b in zip(resolutions, resolutions[1:]))


def test_projection_info_needs_no_registry(registry) -> None:
    info = registry.resolve("EPSG:4326")
    assert generate_resolutions(info, min_zoom=0, max_zoom=2) == [360 / 256, 180 / 256]


def test_empty_or_inverted_zoom_range() -> None:
    assert generate_resolutions("EPSG:3857", (0, 0, 256, 256), 5, 5) == []
    assert generate_resolutions("EPSG:3857", (0, 0, 256, 256), 7, 3) == []


def test_code_without_registry_needs_extent() -> None:
    with pytest.raises(ValueError):
        generate_resolutions("EPSG:3857")
