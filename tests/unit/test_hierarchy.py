"""
Tests of `ccodwg.hierarchy`
"""

import re
from contextlib import nullcontext as does_not_raise

import pandas as pd
import pytest

from ccodwg.exceptions import MissingReferenceMappingError, UnrecognisedValueError
from ccodwg.hierarchy import RegionHierarchy


@pytest.mark.parametrize(
    "rows, region_columns, exp",
    (
        pytest.param(
            [("Alberta", "Calgary"), ("BC", "Fraser")],
            ["province", "health_region"],
            does_not_raise(),
            id="known-health-regions",
        ),
        pytest.param(
            [("Alberta", "Calgary"), ("Alberta", "Fraser")],
            ["province", "health_region"],
            pytest.raises(
                MissingReferenceMappingError,
                match=re.escape(
                    "The following regions in cases have no entry "
                    "in the region hierarchy "
                    "(['province', 'health_region']): [('Alberta', 'Fraser')]"
                ),
            ),
            id="health-region-in-wrong-province",
        ),
        pytest.param(
            [("Ontario",), ("BC",)],
            ["province"],
            does_not_raise(),
            id="known-provinces",
        ),
        pytest.param(
            [("Ontario",), ("Narnia",)],
            ["province"],
            pytest.raises(MissingReferenceMappingError, match="Narnia"),
            id="unknown-province",
        ),
    ),
)
def test_assert_regions_known(hierarchy, rows, region_columns, exp):
    indf = pd.DataFrame(rows, columns=region_columns)

    with exp:
        hierarchy.assert_regions_known(indf, region_columns, source="cases")


def test_get_parents(hierarchy):
    health_regions = pd.MultiIndex.from_tuples(
        [("BC", "Vancouver Coastal"), ("Alberta", "Calgary"), ("BC", "Fraser")],
        names=["province", "health_region"],
    )

    res = hierarchy.get_parents(health_regions)

    assert res.name == "province"
    assert res.tolist() == ["BC", "Alberta", "BC"]


def test_get_parents_unknown(hierarchy):
    health_regions = pd.MultiIndex.from_tuples(
        [("Alberta", "Calgary"), ("Alberta", "Vancouver Coastal")],
        names=["province", "health_region"],
    )

    with pytest.raises(MissingReferenceMappingError, match="Vancouver Coastal"):
        hierarchy.get_parents(health_regions)


def test_get_known_index_unsupported_columns(hierarchy):
    with pytest.raises(
        UnrecognisedValueError,
        match=re.escape(
            "('health_region',) is not a recognised value for region_columns"
        ),
    ):
        hierarchy.get_known_index(["health_region"])


def test_health_region_with_unknown_province():
    with pytest.raises(MissingReferenceMappingError, match="Yukon"):
        RegionHierarchy(
            provinces=pd.DataFrame({"province": ["Alberta"]}),
            health_regions=pd.DataFrame(
                {
                    "province": ["Alberta", "Yukon"],
                    "health_region": ["Calgary", "Yukon"],
                }
            ),
        )


def test_duplicate_health_region():
    with pytest.raises(AssertionError, match="Health regions appear more than once"):
        RegionHierarchy(
            provinces=pd.DataFrame({"province": ["Alberta"]}),
            health_regions=pd.DataFrame(
                {"province": ["Alberta", "Alberta"], "health_region": ["Calgary"] * 2}
            ),
        )


def test_from_reference_tables_strips_whitespace():
    res = RegionHierarchy.from_reference_tables(
        prov_map=pd.DataFrame({"province": ["Alberta "]}),
        hr_map=pd.DataFrame({"province": [" Alberta"], "health_region": ["Calgary "]}),
    )

    assert res.country == "Canada"
    assert res.get_known_index(["province", "health_region"]).tolist() == [
        ("Alberta", "Calgary")
    ]
