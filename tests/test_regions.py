"""Tests for the region directory."""

import pytest

from carbovid.exceptions import RegionNotFoundError, ValidationError
from carbovid.regions import DEFAULT_DIRECTORY, UK_REGIONS, RegionDirectory, parse_region_id


class TestRegionDirectory:
    """Tests for RegionDirectory lookups."""

    @pytest.mark.parametrize("region_id", range(1, 18))
    def test_every_region_resolves(self, region_id: int) -> None:
        """All 17 grid regions map to a nation or region health area."""
        descriptor = DEFAULT_DIRECTORY.resolve(region_id)

        assert descriptor.region_id == region_id
        assert descriptor.covid_area_type in {"nation", "region"}
        assert descriptor.carbon_region_name
        assert descriptor.covid_area_name

    def test_disjoint_vocabularies(self) -> None:
        """Carbon and health names differ where the upstream vocabularies do."""
        england = DEFAULT_DIRECTORY.resolve(15)
        assert england.carbon_region_name == "England"
        assert (england.covid_area_name, england.covid_area_type) == ("England", "nation")

        yorkshire = DEFAULT_DIRECTORY.resolve(5)
        assert yorkshire.carbon_region_name == "Yorkshire"
        assert (yorkshire.covid_area_name, yorkshire.covid_area_type) == ("Yorkshire and The Humber", "region")

    @pytest.mark.parametrize("region_id", [0, 18, -1, "abc", "1.5", None, 2.0, "1_5", "１５", "0x0f", "15 5"])
    def test_invalid_region_raises_validation_error(self, region_id) -> None:
        """Unknown and non-integer ids are validation errors, not crashes."""
        with pytest.raises(RegionNotFoundError, match="Invalid region id"):
            DEFAULT_DIRECTORY.resolve(region_id)

    def test_not_found_is_validation_error(self) -> None:
        assert issubclass(RegionNotFoundError, ValidationError)

    def test_string_ids_are_accepted(self) -> None:
        """Query-string ids resolve like integers."""
        assert DEFAULT_DIRECTORY.resolve("13").carbon_region_name == "London"
        assert parse_region_id(" 7 ") == 7
        assert parse_region_id("+3") == 3

    def test_contains_and_len(self) -> None:
        assert len(DEFAULT_DIRECTORY) == 17
        assert 1 in DEFAULT_DIRECTORY
        assert 18 not in DEFAULT_DIRECTORY
        assert "x" not in DEFAULT_DIRECTORY

    def test_iteration_is_ordered_by_id(self) -> None:
        assert [d.region_id for d in DEFAULT_DIRECTORY] == list(range(1, 18))

    def test_table_is_read_only(self) -> None:
        with pytest.raises(TypeError):
            UK_REGIONS[99] = ("Nowhere", "Nowhere", "region")

    def test_descriptors_are_immutable(self) -> None:
        descriptor = DEFAULT_DIRECTORY.resolve(1)
        with pytest.raises(Exception):
            descriptor.covid_area_name = "Elsewhere"

    def test_custom_table(self) -> None:
        directory = RegionDirectory({42: ("Somewhere", "Elsewhere", "region")})

        assert len(directory) == 1
        assert directory.resolve(42).covid_area_name == "Elsewhere"
        with pytest.raises(RegionNotFoundError):
            directory.resolve(1)
