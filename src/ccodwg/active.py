"""
Active cases

Active cases are cases which have neither recovered nor died.
"""

from __future__ import annotations

from attrs import define

from ccodwg.gap_filling import get_daily, get_increments
from ccodwg.metrics import OUTPUT_DATE_FORMAT, REGION_COLUMNS
from ccodwg.normalisation import stack_timeseries_frames
from ccodwg.timeseries import Timeseries
from ccodwg.typing import LEVEL, LongTimeseriesTable, TimeseriesDataFrame

ACTIVE_DATE_COLUMN = "date_active"


@define
class ActiveTimeseries:
    """
    Active cases, along with the series they were derived from
    """

    cumulative_cases: TimeseriesDataFrame
    cumulative_recovered: TimeseriesDataFrame
    cumulative_deaths: TimeseriesDataFrame

    active_cases: TimeseriesDataFrame
    """
    Cumulative cases minus cumulative recovered minus cumulative deaths
    """

    active_cases_change: TimeseriesDataFrame
    """
    Day-over-day change in active cases (zero on each region's first date)
    """

    def to_long(
        self, level: LEVEL, date_format: str = OUTPUT_DATE_FORMAT
    ) -> LongTimeseriesTable:
        """
        Convert to the long table we write
        """
        return stack_timeseries_frames(
            {
                "cumulative_cases": self.cumulative_cases,
                "cumulative_recovered": self.cumulative_recovered,
                "cumulative_deaths": self.cumulative_deaths,
                "active_cases": self.active_cases,
                "active_cases_change": self.active_cases_change,
            },
            region_columns=REGION_COLUMNS[level],
            date_name=ACTIVE_DATE_COLUMN,
            date_format=date_format,
        )


def get_active_output_path(level: LEVEL) -> str:
    """
    Path, relative to the output directory, of the active cases table at `level`
    """
    return f"timeseries_{level}/active_timeseries_{level}.csv"


def create_active_timeseries(
    cases: Timeseries, recovered: Timeseries, mortality: Timeseries
) -> ActiveTimeseries:
    """
    Create the active cases time series

    Only regions and dates which are in all three inputs are kept
    (missing values are not treated as zero).

    Parameters
    ----------
    cases
        Cases time series

    recovered
        Recovered time series

    mortality
        Mortality time series

    Returns
    -------
    :
        Active cases
    """
    index = (
        cases.cumulative.index.intersection(recovered.cumulative.index)
        .intersection(mortality.cumulative.index)
        .sort_values()
    )
    columns = (
        cases.cumulative.columns.intersection(recovered.cumulative.columns)
        .intersection(mortality.cumulative.columns)
        .sort_values()
    )

    cumulative_cases = cases.cumulative.loc[index, columns]
    cumulative_recovered = recovered.cumulative.loc[index, columns]
    cumulative_deaths = mortality.cumulative.loc[index, columns]

    active_cases = cumulative_cases - cumulative_recovered - cumulative_deaths

    return ActiveTimeseries(
        cumulative_cases=cumulative_cases,
        cumulative_recovered=cumulative_recovered,
        cumulative_deaths=cumulative_deaths,
        active_cases=active_cases,
        active_cases_change=get_daily(get_increments(active_cases)),
    )
