"""
Metrics we build time series for

Each metric goes through exactly the same pipeline.
The differences between metrics are captured here,
in [MetricConfig][(m).],
so that the pipeline itself has no per-metric branches.
"""

from __future__ import annotations

from attrs import field, frozen

from ccodwg.exceptions import UnrecognisedValueError
from ccodwg.typing import LEVEL

COUNTRY = "Canada"
"""
Name of the national aggregate
"""

INPUT_DATE_FORMAT = "%d-%m-%Y"
"""
Format of the date column headers in the spreadsheet exports
"""

OUTPUT_DATE_FORMAT = "%d-%m-%Y"
"""
Format of the dates in the written time series
"""

MANUAL_SENTINEL_DATE = "18-06-2021"
"""
Date column in the manual sheets that marks 'no manual override'

This column is a placeholder, it never holds data to merge.
"""

REGION_COLUMNS: dict[str, tuple[str, ...]] = {
    "hr": ("province", "health_region"),
    "prov": ("province",),
    "canada": ("province",),
}
"""
Columns which make up the region key at each level
"""


@frozen
class MetricConfig:
    """
    Configuration of a single metric
    """

    name: str
    """
    Name of the metric, used in output file names
    """

    sheet: str
    """
    Name of the sheet (in both the automated and manual folders)
    """

    granularity: LEVEL = field()
    """
    Finest level at which the metric is reported (`"hr"` or `"prov"`)
    """

    date_column: str
    """
    Name of the date column in the output
    """

    daily_column: str
    """
    Name of the daily value column in the output
    """

    cumulative_column: str
    """
    Name of the cumulative value column in the output
    """

    has_manual: bool = False
    """
    Whether there is a manually curated sheet for this metric
    """

    @granularity.validator
    def _check_granularity(self, attribute, value) -> None:
        if value not in ("hr", "prov"):
            raise UnrecognisedValueError(
                value, name="granularity", known_values=("hr", "prov")
            )

    @property
    def region_columns(self) -> tuple[str, ...]:
        """
        Columns which identify a region at the metric's finest granularity
        """
        return REGION_COLUMNS[self.granularity]

    @property
    def levels(self) -> tuple[LEVEL, ...]:
        """
        Levels at which we output this metric
        """
        if self.granularity == "hr":
            return ("hr", "prov", "canada")

        return ("prov", "canada")

    def output_path(self, level: LEVEL) -> str:
        """
        Path, relative to the output directory, of the table at `level`
        """
        return f"timeseries_{level}/{self.name}_timeseries_{level}.csv"


METRICS: tuple[MetricConfig, ...] = (
    MetricConfig(
        name="cases",
        sheet="cases_timeseries_hr",
        granularity="hr",
        date_column="date_report",
        daily_column="cases",
        cumulative_column="cumulative_cases",
        has_manual=True,
    ),
    MetricConfig(
        name="mortality",
        sheet="mortality_timeseries_hr",
        granularity="hr",
        date_column="date_death_report",
        daily_column="deaths",
        cumulative_column="cumulative_deaths",
        has_manual=True,
    ),
    MetricConfig(
        name="recovered",
        sheet="recovered_timeseries_prov",
        granularity="prov",
        date_column="date_recovered",
        daily_column="recovered",
        cumulative_column="cumulative_recovered",
    ),
    MetricConfig(
        name="testing",
        sheet="testing_timeseries_prov",
        granularity="prov",
        date_column="date_testing",
        daily_column="testing",
        cumulative_column="cumulative_testing",
    ),
    MetricConfig(
        name="vaccine_administration",
        sheet="vaccine_administration_timeseries_prov",
        granularity="prov",
        date_column="date_vaccine_administered",
        daily_column="avaccine",
        cumulative_column="cumulative_avaccine",
    ),
    MetricConfig(
        name="vaccine_distribution",
        sheet="vaccine_distribution_timeseries_prov",
        granularity="prov",
        date_column="date_vaccine_distributed",
        daily_column="dvaccine",
        cumulative_column="cumulative_dvaccine",
    ),
    MetricConfig(
        name="vaccine_completion",
        sheet="vaccine_completion_timeseries_prov",
        granularity="prov",
        date_column="date_vaccine_completed",
        daily_column="cvaccine",
        cumulative_column="cumulative_cvaccine",
        has_manual=True,
    ),
)


def get_metric(name: str) -> MetricConfig:
    """
    Get the configuration of a metric

    Parameters
    ----------
    name
        Name of the metric

    Returns
    -------
    :
        Configuration of the metric

    Raises
    ------
    UnrecognisedValueError
        `name` is not a known metric
    """
    res_l = [m for m in METRICS if m.name == name]
    if len(res_l) < 1:
        raise UnrecognisedValueError(
            unrecognised_value=name,
            name="metric",
            known_values=[m.name for m in METRICS],
        )

    return res_l[0]
