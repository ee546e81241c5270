from __future__ import annotations

import pytest

from mapkernel.projection.registry import CRSRegistry


@pytest.fixture(scope="session")
def registry() -> CRSRegistry:
    """Default catalogue registry shared by read-only tests."""
    return CRSRegistry.from_catalogue()
