"""
Tests of `ccodwg.metrics`
"""

import re

import pytest

from ccodwg.exceptions import UnrecognisedValueError
from ccodwg.metrics import METRICS, MetricConfig, get_metric


def test_metric_names_unique():
    names = [m.name for m in METRICS]

    assert len(names) == len(set(names)) == 7


@pytest.mark.parametrize(
    "name, exp_levels, exp_region_columns",
    (
        ("cases", ("hr", "prov", "canada"), ("province", "health_region")),
        ("mortality", ("hr", "prov", "canada"), ("province", "health_region")),
        ("recovered", ("prov", "canada"), ("province",)),
        ("vaccine_completion", ("prov", "canada"), ("province",)),
    ),
)
def test_levels(name, exp_levels, exp_region_columns):
    metric = get_metric(name)

    assert metric.levels == exp_levels
    assert metric.region_columns == exp_region_columns


def test_output_path():
    assert (
        get_metric("testing").output_path("prov")
        == "timeseries_prov/testing_timeseries_prov.csv"
    )


def test_get_metric_unknown():
    with pytest.raises(
        UnrecognisedValueError,
        match=re.escape(
            "'case' is not a recognised value for metric. Did you mean 'cases'?"
        ),
    ):
        get_metric("case")


def test_invalid_granularity():
    with pytest.raises(UnrecognisedValueError, match="granularity"):
        MetricConfig(
            name="junk",
            sheet="junk",
            granularity="canada",
            date_column="date",
            daily_column="junk",
            cumulative_column="cumulative_junk",
        )
