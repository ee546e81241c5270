"""
CRS Registry
Publishes catalogue definitions to pyproj and resolves codes to metadata and transforms
"""
from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np
from pyproj import CRS, Transformer
from pyproj.exceptions import CRSError

from ..config import settings
from ..errors import CatalogueError, RegistryFrozen, UnknownProjection
from .catalogue import DEFAULT_CATALOGUE, DEGREES_METERS_PER_UNIT, CRSDefinition, Extent, load_catalogue

logger = logging.getLogger(__name__)

Coordinate = Tuple[float, ...]
CoordinateTransform = Callable[[Sequence[float]], Coordinate]


@dataclass(frozen=True)
class ProjectionInfo:
    """Resolved metadata for one registered code."""

    code: str
    canonical_code: str
    extent: Extent
    units: str
    meters_per_unit: float
    axis_orientation: str
    crs: CRS

    @property
    def width(self) -> float:
        return self.extent[2] - self.extent[0]

    @property
    def height(self) -> float:
        return self.extent[3] - self.extent[1]

    def is_geographic(self) -> bool:
        return self.units == "degrees"


CRSLike = Union[str, ProjectionInfo]


def _meters_per_unit(definition: CRSDefinition) -> float:
    if definition.meters_per_unit is not None:
        return definition.meters_per_unit
    if definition.units == "degrees":
        return DEGREES_METERS_PER_UNIT
    return 1.0


class CRSRegistry:
    """
    Context object holding every registered CRS.

    Build it once at process start and pass it to whatever needs CRS resolution.
    Registration is only allowed until the first lookup; after that the registry
    is read-only and safe to share between threads.
    """

    def __init__(self):
        self._infos: Dict[str, ProjectionInfo] = {}
        self._folded: Dict[str, str] = {}
        self._transformers: Dict[Tuple[str, str], Transformer] = {}
        self._register_lock = threading.Lock()
        self._sealed = False

    @classmethod
    def from_catalogue(cls, definitions: Optional[Iterable[CRSDefinition]] = None) -> "CRSRegistry":
        """Create a registry holding the given definitions (default catalogue when None)."""
        registry = cls()
        registry.register(DEFAULT_CATALOGUE if definitions is None else definitions)
        return registry

    def register(self, definitions: Iterable[CRSDefinition]) -> None:
        """
        Publish definitions to the transform engine.

        Every alias code of a definition gets its own ProjectionInfo with identical
        extent/units/meters-per-unit/axis orientation and a shared canonical code,
        which makes the aliases mutually equivalent.

        Raises:
            RegistryFrozen: if the registry has already served lookups
            CatalogueError: if pyproj rejects a definition string; none of the
                batch is registered in that case
        """
        with self._register_lock:
            if self._sealed:
                raise RegistryFrozen("CRS registry is read-only once it has been queried")

            # Nothing is published unless the whole batch is accepted
            staged: Dict[str, ProjectionInfo] = {}
            count = 0
            for definition in definitions:
                try:
                    crs = CRS.from_user_input(definition.definition)
                except CRSError as e:
                    raise CatalogueError(
                        f"Transform engine rejected definition for {definition.canonical_code}: {e}"
                    ) from e

                for code in definition.codes:
                    info = ProjectionInfo(
                        code=code,
                        canonical_code=definition.canonical_code,
                        extent=tuple(definition.extent),
                        units=definition.units,
                        meters_per_unit=_meters_per_unit(definition),
                        axis_orientation=definition.axis_orientation or "enu",
                        crs=crs,
                    )
                    staged[code] = info
                count += 1

            self._infos.update(staged)
            self._folded.update({code.casefold(): code for code in staged})
            logger.info(f"🧭 Registered {count} CRS definitions ({len(self._infos)} codes)")

    def seal(self) -> None:
        """Mark the registry read-only. Called implicitly by the first lookup."""
        self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    def codes(self) -> List[str]:
        return list(self._infos)

    def __contains__(self, code: object) -> bool:
        if not isinstance(code, str):
            return False
        return code in self._infos or code.casefold() in self._folded

    def resolve(self, crs: CRSLike) -> ProjectionInfo:
        """
        Resolve a code to its metadata; ProjectionInfo objects pass through.

        Raises:
            UnknownProjection: if the code is not registered
        """
        if isinstance(crs, ProjectionInfo):
            return crs
        if not self._sealed:
            self.seal()
        info = self._infos.get(crs)
        if info is None and isinstance(crs, str):
            folded = self._folded.get(crs.casefold())
            if folded is not None:
                info = self._infos[folded]
        if info is None:
            raise UnknownProjection(crs)
        return info

    def equivalent(self, a: CRSLike, b: CRSLike) -> bool:
        return self.resolve(a).canonical_code == self.resolve(b).canonical_code

    def units_per_meter(self, crs: CRSLike, meters: float) -> float:
        """Convert a distance in meters into the native units of the CRS."""
        return meters / self.resolve(crs).meters_per_unit

    def _transformer(self, src: ProjectionInfo, tgt: ProjectionInfo) -> Transformer:
        key = (src.canonical_code, tgt.canonical_code)
        transformer = self._transformers.get(key)
        if transformer is None:
            transformer = Transformer.from_crs(src.crs, tgt.crs, always_xy=True)
            self._transformers[key] = transformer
            logger.debug(f"📍 Created transformer {key[0]} → {key[1]}")
        return transformer

    def get_transform(self, src: CRSLike, tgt: CRSLike) -> CoordinateTransform:
        """
        Return a function mapping one coordinate to a new coordinate in the target CRS.

        Ordinates beyond x/y are copied unchanged. Equivalent codes give an identity copy.
        """
        src_info = self.resolve(src)
        tgt_info = self.resolve(tgt)

        if src_info.canonical_code == tgt_info.canonical_code:
            def identity(coordinate: Sequence[float]) -> Coordinate:
                return tuple(coordinate)
            return identity

        transformer = self._transformer(src_info, tgt_info)

        def transform(coordinate: Sequence[float]) -> Coordinate:
            x, y = transformer.transform(coordinate[0], coordinate[1])
            return (x, y, *coordinate[2:])

        return transform

    def transform_coordinate(self, coordinate: Sequence[float], src: CRSLike, tgt: CRSLike) -> Coordinate:
        return self.get_transform(src, tgt)(coordinate)

    def transform_arrays(
        self, src: CRSLike, tgt: CRSLike, xs: np.ndarray, ys: np.ndarray
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Vectorised x/y transform; returns new arrays and leaves the inputs untouched."""
        src_info = self.resolve(src)
        tgt_info = self.resolve(tgt)
        xs = np.array(xs, dtype=float)
        ys = np.array(ys, dtype=float)
        if src_info.canonical_code == tgt_info.canonical_code or xs.size == 0:
            return xs, ys
        out_x, out_y = self._transformer(src_info, tgt_info).transform(xs, ys)
        return np.asarray(out_x, dtype=float), np.asarray(out_y, dtype=float)

    def describe(self, crs: CRSLike) -> dict:
        """Plain-dict summary of a registered code."""
        info = self.resolve(crs)
        aliases = [code for code, other in self._infos.items() if other.canonical_code == info.canonical_code]
        return {
            "code": info.code,
            "canonical_code": info.canonical_code,
            "aliases": aliases,
            "extent": list(info.extent),
            "units": info.units,
            "meters_per_unit": info.meters_per_unit,
            "axis_orientation": info.axis_orientation,
            "definition": info.crs.srs,
        }


def build_default_registry(extra_catalogue: Optional[str] = None) -> CRSRegistry:
    """
    Build the process registry: the default catalogue plus an optional JSON table.

    The table path defaults to settings.EXTRA_CATALOGUE_PATH.
    """
    definitions: List[CRSDefinition] = list(DEFAULT_CATALOGUE)
    table = extra_catalogue or settings.EXTRA_CATALOGUE_PATH
    if table:
        definitions.extend(load_catalogue(table))
    return CRSRegistry.from_catalogue(definitions)


def is_finite_coordinate(coordinate: Sequence[float]) -> bool:
    return all(math.isfinite(value) for value in coordinate[:2])
