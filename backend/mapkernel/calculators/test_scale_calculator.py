from __future__ import annotations

import pytest

from .scale_calculator import wmts_scale, wmts_scale_for_crs

# 1 map unit per pixel in a metric CRS gives 1 / 0.00028 = 3571.43
PIXEL_SIZE_M = 0.00028


def _extent_for(scale: float, pixels: int = 1000) -> tuple:
    """Metric extent that yields the given raw scale at the given width."""
    return (0.0, 0.0, scale * PIXEL_SIZE_M * pixels, 1.0)


def test_small_scales_round_to_unit() -> None:
    assert wmts_scale(1000, _extent_for(499.6), 1.0) == 500
    assert wmts_scale(1000, _extent_for(499.4), 1.0) == 499


def test_mid_scales_round_to_thousands() -> None:
    assert wmts_scale(1000, _extent_for(123456), 1.0) == 123000
    assert wmts_scale(1000, _extent_for(3571.43), 1.0) == 4000


def test_large_scales_round_to_millions() -> None:
    assert wmts_scale(1000, _extent_for(2600000), 1.0) == 3000000
    assert wmts_scale(1000, _extent_for(960000), 1.0) == 1000000


def test_exact_scale_is_truncated() -> None:
    assert wmts_scale(1000, _extent_for(123456.7), 1.0, exact=True) == 123456


def test_degrees_use_meters_per_unit(registry) -> None:
    extent = (0.0, 0.0, 1.0, 1.0)
    scale = wmts_scale_for_crs(1000, extent, "EPSG:4326", registry, exact=True)
    assert scale == int(111319.49079327358 / 1000 / PIXEL_SIZE_M)


def test_non_positive_width_rejected() -> None:
    with pytest.raises(ValueError):
        wmts_scale(0, (0, 0, 1, 1), 1.0)
