"""
Region hierarchy: health region -> province -> country
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import attr
import pandas as pd
from attrs import define, field

from ccodwg.assertions import assert_has_columns
from ccodwg.exceptions import MissingReferenceMappingError, UnrecognisedValueError
from ccodwg.metrics import COUNTRY


@define
class RegionHierarchy:
    """
    Mapping from each region to its parent

    Every health region maps to exactly one province
    and every province maps to the single national aggregate.
    """

    provinces: pd.DataFrame = field()
    """
    Province reference table

    Must have a `province` column, one row per province.
    Other columns (e.g. full and short names) are carried but not used.
    """

    health_regions: pd.DataFrame = field()
    """
    Health region reference table

    Must have `province` and `health_region` columns,
    one row per health region.
    """

    country: str = COUNTRY
    """
    Name of the national aggregate
    """

    @provinces.validator
    def validate_provinces(
        self, attribute: attr.Attribute[Any], value: pd.DataFrame
    ) -> None:
        """
        Validate the province table
        """
        assert_has_columns(value, ["province"], name="province reference table")
        duplicated = value["province"][value["province"].duplicated()]
        if not duplicated.empty:
            msg = f"Provinces appear more than once: {duplicated.tolist()}"
            raise AssertionError(msg)

    @health_regions.validator
    def validate_health_regions(
        self, attribute: attr.Attribute[Any], value: pd.DataFrame
    ) -> None:
        """
        Validate the health region table

        Each health region must appear once and belong to a known province.
        """
        assert_has_columns(
            value, ["province", "health_region"], name="health region reference table"
        )
        key = value[["province", "health_region"]]
        duplicated = key[key.duplicated()]
        if not duplicated.empty:
            msg = f"Health regions appear more than once:\n{duplicated}"
            raise AssertionError(msg)

        unknown_provinces = sorted(
            set(value["province"]).difference(self.provinces["province"])
        )
        if unknown_provinces:
            raise MissingReferenceMappingError(
                unknown_provinces,
                region_columns=["province"],
                source="the health region reference table",
            )

    @classmethod
    def from_reference_tables(
        cls,
        prov_map: pd.DataFrame,
        hr_map: pd.DataFrame,
        country: str = COUNTRY,
    ) -> RegionHierarchy:
        """
        Initialise from the reference tables as they are read from disk

        Surrounding whitespace is stripped from the key columns.
        """
        prov_map = prov_map.copy()
        prov_map["province"] = prov_map["province"].str.strip()

        hr_map = hr_map.copy()
        for col in ["province", "health_region"]:
            hr_map[col] = hr_map[col].str.strip()

        return cls(provinces=prov_map, health_regions=hr_map, country=country)

    def get_known_index(self, region_columns: Iterable[str]) -> pd.Index:
        """
        Get all region keys we know about for the given key columns

        Parameters
        ----------
        region_columns
            Columns making up the key, either `("province",)`
            or `("province", "health_region")`

        Returns
        -------
        :
            Known keys

        Raises
        ------
        UnrecognisedValueError
            `region_columns` is not one of the supported keys
        """
        region_columns = tuple(region_columns)
        if region_columns == ("province",):
            return pd.Index(self.provinces["province"], name="province")

        if region_columns == ("province", "health_region"):
            return pd.MultiIndex.from_frame(
                self.health_regions[["province", "health_region"]]
            )

        raise UnrecognisedValueError(
            region_columns,
            name="region_columns",
            known_values=[("province",), ("province", "health_region")],
        )

    def assert_regions_known(
        self,
        indf: pd.DataFrame,
        region_columns: Iterable[str],
        source: str,
    ) -> None:
        """
        Assert that every region in a table is in the hierarchy

        Parameters
        ----------
        indf
            Long table to check

        region_columns
            Columns making up the region key

        source
            Description of `indf`, used in the error message

        Raises
        ------
        MissingReferenceMappingError
            Some regions in `indf` are not in the hierarchy
        """
        region_columns = list(region_columns)
        known = self.get_known_index(region_columns)

        if len(region_columns) > 1:
            in_data = pd.MultiIndex.from_frame(indf[region_columns]).unique()
        else:
            in_data = pd.Index(indf[region_columns[0]]).unique()

        missing = in_data.difference(known)
        if not missing.empty:
            raise MissingReferenceMappingError(
                missing.tolist(), region_columns=region_columns, source=source
            )

    def get_parents(self, health_regions: pd.MultiIndex) -> pd.Index:
        """
        Get the province to which each health region belongs

        Parameters
        ----------
        health_regions
            Health region keys, with `province` and `health_region` levels

        Returns
        -------
        :
            Parent province of each key in `health_regions`, in the same order

        Raises
        ------
        MissingReferenceMappingError
            Some health regions are not in the hierarchy
        """
        lookup = self.health_regions.set_index(
            ["province", "health_region"], drop=False
        )["province"]

        missing = health_regions.unique().difference(lookup.index)
        if not missing.empty:
            raise MissingReferenceMappingError(
                missing.tolist(),
                region_columns=["province", "health_region"],
                source="the parent lookup",
            )

        return pd.Index(lookup.reindex(health_regions).to_numpy(), name="province")
