from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from ..errors import CatalogueError
from .catalogue import DEFAULT_CATALOGUE, CRSDefinition, load_catalogue


def test_default_catalogue_codes_are_unique() -> None:
    codes = [code for definition in DEFAULT_CATALOGUE for code in definition.codes]
    assert len(codes) == len(set(codes))


def test_default_catalogue_has_geographic_and_map_systems() -> None:
    canonical = {definition.canonical_code for definition in DEFAULT_CATALOGUE}
    assert {"EPSG:4326", "EPSG:3857", "EPSG:25830", "EPSG:4258", "EPSG:3395"} <= canonical


@pytest.mark.parametrize("value, expected", [("d", "degrees"), ("m", "meters"), ("Metres", "meters")])
def test_units_are_normalised(value: str, expected: str) -> None:
    definition = CRSDefinition(codes=["X:1"], definition="+proj=longlat +no_defs", extent=(0, 0, 1, 1), units=value)
    assert definition.units == expected


def test_unknown_units_rejected() -> None:
    with pytest.raises(ValidationError):
        CRSDefinition(codes=["X:1"], definition="+proj=longlat", extent=(0, 0, 1, 1), units="feet")


def test_inverted_extent_rejected() -> None:
    with pytest.raises(ValidationError):
        CRSDefinition(codes=["X:1"], definition="+proj=longlat", extent=(10, 0, 1, 1), units="d")


def test_empty_codes_rejected() -> None:
    with pytest.raises(ValidationError):
        CRSDefinition(codes=[], definition="+proj=longlat", extent=(0, 0, 1, 1), units="d")


def test_definitions_are_immutable() -> None:
    definition = DEFAULT_CATALOGUE[0]
    with pytest.raises(ValidationError):
        definition.units = "meters"


def test_load_catalogue_reads_json_table(tmp_path) -> None:
    table = tmp_path / "catalogue.json"
    table.write_text(
        json.dumps(
            [
                {
                    "codes": ["EPSG:4258", "urn:ogc:def:crs:EPSG::4258"],
                    "definition": "+proj=longlat +ellps=GRS80 +no_defs",
                    "extent": [-16.1, 32.88, 39.65, 84.17],
                    "units": "d",
                    "meters_per_unit": 111319.49079327358,
                }
            ]
        ),
        encoding="utf-8",
    )
    definitions = load_catalogue(table)
    assert len(definitions) == 1
    assert definitions[0].canonical_code == "EPSG:4258"
    assert definitions[0].units == "degrees"
    assert definitions[0].extent == (-16.1, 32.88, 39.65, 84.17)


def test_load_catalogue_reports_bad_entry(tmp_path) -> None:
    table = tmp_path / "catalogue.json"
    table.write_text(json.dumps([{"codes": ["X:1"], "definition": "+proj=longlat"}]), encoding="utf-8")
    with pytest.raises(CatalogueError):
        load_catalogue(table)


def test_load_catalogue_requires_a_list(tmp_path) -> None:
    table = tmp_path / "catalogue.json"
    table.write_text(json.dumps({"codes": ["X:1"]}), encoding="utf-8")
    with pytest.raises(CatalogueError):
        load_catalogue(table)


def test_load_catalogue_missing_file(tmp_path) -> None:
    with pytest.raises(CatalogueError):
        load_catalogue(tmp_path / "missing.json")
