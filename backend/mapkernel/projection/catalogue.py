"""
CRS Catalogue

Static definitions of every coordinate reference system the kernel knows about,
plus a loader for extra definitions kept in a JSON table.

Each definition carries all alias codes a client may use for the same system
(plain EPSG code, OGC URN, GML srs URL). The registry publishes every alias to
pyproj and treats them as equivalent.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ..errors import CatalogueError

logger = logging.getLogger(__name__)


Extent = Tuple[float, float, float, float]

_UNIT_ALIASES = {
    "d": "degrees",
    "degree": "degrees",
    "degrees": "degrees",
    "m": "meters",
    "meter": "meters",
    "meters": "meters",
    "metre": "meters",
    "metres": "meters",
}


class CRSDefinition(BaseModel):
    """One catalogue entry: a set of equivalent codes sharing one proj4 definition."""

    model_config = ConfigDict(frozen=True)

    codes: List[str] = Field(..., min_length=1, description="Equivalent codes; the first is canonical")
    definition: str = Field(..., min_length=1, description="proj4 definition string")
    extent: Extent = Field(..., description="Validity extent [minX, minY, maxX, maxY] in native units")
    units: str = Field(..., description="'degrees' or 'meters'")
    meters_per_unit: Optional[float] = Field(None, gt=0)
    axis_orientation: Optional[str] = Field(None, description="Axis orientation tag, e.g. 'neu'")

    @field_validator("units", mode="before")
    @classmethod
    def _normalise_units(cls, value: str) -> str:
        units = _UNIT_ALIASES.get(str(value).strip().lower())
        if units is None:
            raise ValueError(f"Unsupported units: {value!r}")
        return units

    @field_validator("codes")
    @classmethod
    def _strip_codes(cls, value: List[str]) -> List[str]:
        codes = [code.strip() for code in value]
        if any(not code for code in codes):
            raise ValueError("CRS codes must be non-empty strings")
        return codes

    @model_validator(mode="after")
    def _check_extent(self) -> "CRSDefinition":
        min_x, min_y, max_x, max_y = self.extent
        if min_x > max_x or min_y > max_y:
            raise ValueError(f"Malformed extent {list(self.extent)}: minimum exceeds maximum")
        return self

    @property
    def canonical_code(self) -> str:
        return self.codes[0]


def epsg_aliases(number: int) -> List[str]:
    """Codes under which clients commonly request EPSG:<number>."""
    return [
        f"EPSG:{number}",
        f"urn:ogc:def:crs:EPSG::{number}",
        f"http://www.opengis.net/gml/srs/epsg.xml#{number}",
    ]


def _utm(number: int, zone: int, ellps: str, towgs84: Optional[str], extent: Extent) -> CRSDefinition:
    datum = f"+towgs84={towgs84}" if towgs84 else "+datum=WGS84"
    return CRSDefinition(
        codes=epsg_aliases(number),
        definition=f"+proj=utm +zone={zone} +ellps={ellps} {datum} +units=m +no_defs",
        extent=extent,
        units="meters",
    )


DEGREES_METERS_PER_UNIT = 111319.49079327358

_WGS84_UTM_EXTENT: Extent = (166021.4431, 0.0, 833978.5569, 9329005.1825)
_WEB_MERCATOR_HALF_WORLD = 20037508.342789244

DEFAULT_CATALOGUE: Tuple[CRSDefinition, ...] = (
    # WGS84 geographic
    CRSDefinition(
        codes=epsg_aliases(4326)[:2] + [
            "urn:ogc:def:crs:OGC:1.3:CRS84",
            "http://www.opengis.net/def/crs/OGC/1.3/CRS84",
        ],
        definition="+proj=longlat +datum=WGS84 +no_defs",
        extent=(-180.0, -90.0, 180.0, 90.0),
        units="degrees",
        meters_per_unit=DEGREES_METERS_PER_UNIT,
        axis_orientation="neu",
    ),
    # Web Mercator (default map projection)
    CRSDefinition(
        codes=epsg_aliases(3857) + ["EPSG:102100", "EPSG:102113", "EPSG:900913"],
        definition=(
            "+proj=merc +a=6378137 +b=6378137 +lat_ts=0 +lon_0=0 +x_0=0 +y_0=0 "
            "+k=1 +units=m +nadgrids=@null +wktext +no_defs"
        ),
        extent=(
            -_WEB_MERCATOR_HALF_WORLD,
            -_WEB_MERCATOR_HALF_WORLD,
            _WEB_MERCATOR_HALF_WORLD,
            _WEB_MERCATOR_HALF_WORLD,
        ),
        units="meters",
    ),
    # WGS84 UTM 27N-31N
    _utm(32627, 27, "WGS84", None, _WGS84_UTM_EXTENT),
    _utm(32628, 28, "WGS84", None, (166021.44317933178, 0.0, 833978.5568206678, 9329005.18301614)),
    _utm(32629, 29, "WGS84", None, _WGS84_UTM_EXTENT),
    _utm(32630, 30, "WGS84", None, _WGS84_UTM_EXTENT),
    _utm(32631, 31, "WGS84", None, _WGS84_UTM_EXTENT),
    # ETRS89
    CRSDefinition(
        codes=epsg_aliases(4258),
        definition="+proj=longlat +ellps=GRS80 +towgs84=0,0,0,0,0,0,0 +no_defs",
        extent=(-16.1, 32.88, 39.65, 84.17),
        units="degrees",
        meters_per_unit=DEGREES_METERS_PER_UNIT,
    ),
    _utm(25829, 29, "GRS80", "0,0,0,0,0,0,0", (-164850.78, 3660417.01, 988728.57, 9567111.85)),
    _utm(25828, 28, "GRS80", "0,0,0,0,0,0,0", (397101.09, 3638520.14, 1034670.43, 9625438.82)),
    _utm(25830, 30, "GRS80", "0,0,0,0,0,0,0", (-729785.83, 3715125.82, 940929.67, 9518470.69)),
    _utm(25831, 31, "GRS80", "0,0,0,0,0,0,0", (-1300111.74, 3804640.43, 893164.13, 9478718.31)),
    # ED50
    CRSDefinition(
        codes=epsg_aliases(4230),
        definition="+proj=longlat +ellps=intl +no_defs",
        extent=(-16.09882145355955, 25.711114310330917, 48.60999527749605, 84.16977336415472),
        units="degrees",
        meters_per_unit=DEGREES_METERS_PER_UNIT,
    ),
    _utm(23028, 28, "intl", "-87,-98,-121,0,0,0,0", (997517.95, 3873475.61, 2024693.05, 8529441.99)),
    _utm(23029, 29, "intl", "-87,-98,-121,0,0,0,0", (448933.91, 3860083.93, 1860436.11, 8381369.16)),
    _utm(23030, 30, "intl", "-87,-98,-121,0,0,0,0", (-99844.71, 3879626.63, 1682737.72, 8251830.80)),
    _utm(23031, 31, "intl", "-87,-98,-121,0,0,0,0", (-650883.16, 3932764.97, 1493695.91, 8141744.84)),
    # REGCAN95 (Canary Islands)
    CRSDefinition(
        codes=epsg_aliases(4081),
        definition="+proj=longlat +ellps=GRS80 +towgs84=0,0,0,0,0,0,0 +no_defs",
        extent=(-21.93, 24.6, -11.75, 32.76),
        units="degrees",
        meters_per_unit=DEGREES_METERS_PER_UNIT,
    ),
    _utm(4082, 27, "GRS80", "0,0,0,0,0,0,0", (405849.71, 2720975.60, 1367994.77, 3662797.15)),
    _utm(4083, 28, "GRS80", "0,0,0,0,0,0,0", (-202677.94, 2738405.48, 804488.92, 3629357.10)),
    # World Mercator
    CRSDefinition(
        codes=epsg_aliases(3395),
        definition="+proj=merc +ellps=WGS84 +datum=WGS84 +units=m +no_defs",
        extent=(-20026376.39, -15496570.74, 20026376.39, 18764656.23),
        units="meters",
    ),
)


def load_catalogue(path: str | Path) -> List[CRSDefinition]:
    """
    Load CRS definitions from a JSON table.

    The table is a list of objects with the CRSDefinition fields. The short unit
    forms used by web clients ('d', 'm') are accepted.

    Raises:
        CatalogueError: if the file cannot be read or an entry fails validation
    """
    table_path = Path(path)
    try:
        raw = json.loads(table_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogueError(f"Cannot read CRS catalogue {table_path}: {e}") from e

    if not isinstance(raw, list):
        raise CatalogueError(f"CRS catalogue {table_path} must contain a JSON list")

    definitions: List[CRSDefinition] = []
    for index, entry in enumerate(raw):
        try:
            definitions.append(CRSDefinition.model_validate(entry))
        except ValidationError as e:
            raise CatalogueError(f"Invalid CRS catalogue entry #{index} in {table_path}: {e}") from e

    logger.info(f"📚 Loaded {len(definitions)} CRS definitions from {table_path}")
    return definitions
