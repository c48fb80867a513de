"""
Construction of the time series for a single metric

The steps are:

- melt the automated and manual sheets into long tables
- merge them, with the manual rows taking precedence
- check every region is in the hierarchy
- resolve a cumulative value for every region on every day
  from the metric's first observation to the run date
- aggregate up to province and national level

Every metric goes through exactly the same steps,
see [build_time_series][(m).].
"""

from __future__ import annotations

import datetime as dt
from functools import partial

import pandas as pd
import structlog
from attrs import define

from ccodwg.aggregation import aggregate_to_country, aggregate_to_parent
from ccodwg.assertions import assert_aggregation_consistent, assert_dates_contiguous
from ccodwg.gap_filling import (
    fill_date_gaps,
    get_cumulative,
    get_daily,
    get_date_range,
    get_increments,
    to_timeseries_frame,
)
from ccodwg.hierarchy import RegionHierarchy
from ccodwg.merging import merge_with_overrides
from ccodwg.metrics import (
    INPUT_DATE_FORMAT,
    MANUAL_SENTINEL_DATE,
    OUTPUT_DATE_FORMAT,
    REGION_COLUMNS,
    MetricConfig,
)
from ccodwg.normalisation import melt_wide_table, stack_timeseries_frames
from ccodwg.typing import LEVEL, LongTimeseriesTable, TimeseriesDataFrame

log = structlog.get_logger()


@define
class RawTables:
    """
    The sheets for a single metric, as loaded
    """

    automated: pd.DataFrame
    """
    Sheet from the automated feed
    """

    manual: pd.DataFrame | None = None
    """
    Sheet from the manually curated feed, if there is one
    """


@define
class Timeseries:
    """
    Cumulative and daily values at a single level
    """

    cumulative: TimeseriesDataFrame
    """
    Cumulative values
    """

    daily: TimeseriesDataFrame
    """
    Daily values
    """

    @classmethod
    def from_increments(cls, increments: TimeseriesDataFrame) -> Timeseries:
        """
        Initialise from increments (see [get_increments][(p).gap_filling.])
        """
        return cls(cumulative=get_cumulative(increments), daily=get_daily(increments))

    @property
    def increments(self) -> TimeseriesDataFrame:
        """
        Increments, i.e. what we sum when we aggregate
        """
        return get_increments(self.cumulative)

    def to_long(
        self,
        metric: MetricConfig,
        level: LEVEL,
        date_format: str = OUTPUT_DATE_FORMAT,
    ) -> LongTimeseriesTable:
        """
        Convert to the long table we write

        Parameters
        ----------
        metric
            Metric these values are for (defines the column names)

        level
            Level of these values (defines the region columns)

        date_format
            Format in which to write the dates

        Returns
        -------
        :
            Long table
        """
        return stack_timeseries_frames(
            {
                metric.daily_column: self.daily,
                metric.cumulative_column: self.cumulative,
            },
            region_columns=REGION_COLUMNS[level],
            date_name=metric.date_column,
            date_format=date_format,
        )


@define
class MetricTimeseries:
    """
    Time series for a metric at every level we output
    """

    metric: MetricConfig
    """
    Metric
    """

    levels: dict[str, Timeseries]
    """
    Time series, keyed by level
    """

    def to_long(self, level: LEVEL) -> LongTimeseriesTable:
        """
        Get the long table to write for a given level
        """
        return self.levels[level].to_long(self.metric, level=level)


def get_empty_timeseries_frame(level: LEVEL) -> TimeseriesDataFrame:
    """
    Get a [TimeseriesDataFrame][(p).typing] with no regions and no dates
    """
    region_columns = REGION_COLUMNS[level]
    if len(region_columns) > 1:
        index = pd.MultiIndex.from_arrays(
            [[] for _ in region_columns], names=region_columns
        )
    else:
        index = pd.Index([], name=region_columns[0], dtype=object)

    return pd.DataFrame(
        index=index, columns=pd.DatetimeIndex([], name="date"), dtype="int64"
    )


def load_long_observations(
    metric: MetricConfig, raw_tables: RawTables
) -> LongTimeseriesTable:
    """
    Melt and merge the sheets for a metric

    Parameters
    ----------
    metric
        Metric

    raw_tables
        Sheets for the metric

    Returns
    -------
    :
        Observed cumulative values, manual overrides applied
    """
    melt = partial(
        melt_wide_table,
        id_columns=metric.region_columns,
        date_name=metric.date_column,
        value_name=metric.cumulative_column,
        date_format=INPUT_DATE_FORMAT,
    )
    automated = melt(raw_tables.automated, source=f"{metric.sheet} (automated)")

    if raw_tables.manual is None:
        manual = None
    else:
        manual = melt(
            raw_tables.manual,
            exclude_dates=[MANUAL_SENTINEL_DATE],
            source=f"{metric.sheet} (manual)",
        )

    return merge_with_overrides(
        automated, manual, key_columns=[*metric.region_columns, metric.date_column]
    )


def build_time_series(
    metric: MetricConfig,
    raw_tables: RawTables,
    hierarchy: RegionHierarchy,
    run_date: dt.date,
    run_checks: bool = True,
) -> MetricTimeseries:
    """
    Build the time series for a metric

    Parameters
    ----------
    metric
        Metric to build

    raw_tables
        Sheets for the metric

    hierarchy
        Region hierarchy, used to check regions, to find the parent
        of each health region and to name the country

    run_date
        Last date of the time series

    run_checks
        If `True`, check the internal consistency of the output

    Returns
    -------
    :
        Time series at every level in `metric.levels`.
        If there are no observations at all, every level is empty.

    Raises
    ------
    MalformedDateError
        A date in the sheets is not in the expected format

    NonNumericValueError
        A value in the sheets is not a count

    MissingReferenceMappingError
        A region in the sheets is not in `hierarchy`
    """
    region_columns = list(metric.region_columns)

    observations = load_long_observations(metric, raw_tables)
    hierarchy.assert_regions_known(observations, region_columns, source=metric.name)

    run_date_ts = pd.Timestamp(run_date)
    after_run_date = observations[metric.date_column] > run_date_ts
    if after_run_date.any():
        log.warning(
            "Dropping observations after the run date",
            metric=metric.name,
            run_date=run_date_ts.date().isoformat(),
            n_dropped=int(after_run_date.sum()),
        )
        observations = observations.loc[~after_run_date]

    if observations.empty:
        log.warning("No observations", metric=metric.name)
        return MetricTimeseries(
            metric=metric,
            levels={
                level: Timeseries(
                    cumulative=get_empty_timeseries_frame(level),
                    daily=get_empty_timeseries_frame(level),
                )
                for level in metric.levels
            },
        )

    date_min = observations[metric.date_column].min()
    dates = get_date_range(date_min, run_date_ts)
    log.info(
        "Building time series",
        metric=metric.name,
        date_min=date_min.date().isoformat(),
        n_regions=len(observations[region_columns].drop_duplicates()),
    )

    cumulative = fill_date_gaps(
        to_timeseries_frame(
            observations,
            region_columns=region_columns,
            date_column=metric.date_column,
            value_column=metric.cumulative_column,
        ),
        dates=dates,
    )

    increments = {metric.granularity: get_increments(cumulative)}
    if metric.granularity == "hr":
        increments["prov"] = aggregate_to_parent(increments["hr"], hierarchy=hierarchy)

    increments["canada"] = aggregate_to_country(
        increments["prov"], region_level="province", country=hierarchy.country
    )

    levels = {
        level: Timeseries.from_increments(increments[level]) for level in metric.levels
    }

    if run_checks:
        assert_timeseries_consistent(levels)

    return MetricTimeseries(metric=metric, levels=levels)


def assert_timeseries_consistent(levels: dict[str, Timeseries]) -> None:
    """
    Assert that the levels of a metric's time series are consistent

    Parameters
    ----------
    levels
        Time series, keyed by level

    Raises
    ------
    AssertionError
        The dates are not a contiguous run

    InternalConsistencyError
        A parent's daily values are not the sum of its children's
    """
    for ts in levels.values():
        assert_dates_contiguous(ts.cumulative)
        assert_dates_contiguous(ts.daily)

    if "hr" in levels:
        assert_aggregation_consistent(
            levels["hr"].daily,
            levels["prov"].daily,
            child_level="health_region",
            parent_level="province",
        )

    assert_aggregation_consistent(
        levels["prov"].daily,
        levels["canada"].daily,
        child_level="province",
        parent_level="country",
    )
