"""
Filling of date gaps and conversion from cumulative to daily values

All the functions here work on [TimeseriesDataFrame][(p).typing]'s,
i.e. one row per region, one column per date.
Each region is handled independently.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterable

import numpy as np
import pandas as pd
import structlog

from ccodwg.typing import LongTimeseriesTable, TimeseriesDataFrame

log = structlog.get_logger()


def to_timeseries_frame(
    indf: LongTimeseriesTable,
    region_columns: Iterable[str],
    date_column: str,
    value_column: str,
) -> TimeseriesDataFrame:
    """
    Convert a long table into a [TimeseriesDataFrame][(p).typing]

    Parameters
    ----------
    indf
        Long table, one row per region-date

    region_columns
        Columns which identify the region

    date_column
        Column which holds the date

    value_column
        Column which holds the value

    Returns
    -------
    :
        Wide data, with only the dates that were observed as columns.
        Region-dates without an observation are missing (`pd.NA`).
    """
    region_columns = list(region_columns)
    res = indf.astype({value_column: "Int64"}).pivot(
        index=region_columns, columns=date_column, values=value_column
    )
    res.columns = pd.DatetimeIndex(res.columns, name="date")

    return res.sort_index(axis="columns")


def get_date_range(
    date_min: dt.date | pd.Timestamp, date_max: dt.date | pd.Timestamp
) -> pd.DatetimeIndex:
    """
    Get every day from `date_min` to `date_max`, inclusive

    If `date_max` is before `date_min`, the result is empty.
    """
    return pd.date_range(
        pd.Timestamp(date_min), pd.Timestamp(date_max), freq="D", name="date"
    )


def fill_date_gaps(
    indf: TimeseriesDataFrame, dates: pd.DatetimeIndex
) -> TimeseriesDataFrame:
    """
    Resolve a cumulative value for every region on every date

    For each region, we walk through `dates` in order.
    Where there is an observation, we use it.
    Where there isn't, we carry the last resolved value forward.
    Before the first observation, the value is zero.

    Observations which decrease the cumulative value are kept as they are.
    These are a known data quality issue, not an error.

    Parameters
    ----------
    indf
        Observed cumulative values

    dates
        Dates for which to resolve values.
        Observations on other dates are ignored.

    Returns
    -------
    :
        Resolved cumulative values, with `dates` as the columns
    """
    observed = indf.reindex(columns=dates).astype("Int64").to_numpy(dtype=object)

    resolved = np.zeros(observed.shape, dtype=np.int64)
    for i, row in enumerate(observed):
        last = 0
        for j, value in enumerate(row):
            if not pd.isna(value):
                last = int(value)

            resolved[i, j] = last

    res = pd.DataFrame(resolved, index=indf.index, columns=dates)

    decreases = res.diff(axis="columns").lt(0).any(axis="columns")
    if decreases.any():
        log.warning(
            "Cumulative values decrease over time",
            regions=res.index[decreases.to_numpy()].tolist(),
        )

    return res


def get_increments(cumulative: TimeseriesDataFrame) -> TimeseriesDataFrame:
    """
    Get the increments of a cumulative series

    The increment on the first date is the cumulative value on that date,
    on all other dates it is the difference from the day before.
    As a result, the cumulative sum of the increments
    is exactly `cumulative`.
    This is what we sum when aggregating.

    Parameters
    ----------
    cumulative
        Cumulative values

    Returns
    -------
    :
        Increments
    """
    res = cumulative.diff(axis="columns")
    if not res.columns.empty:
        res.iloc[:, 0] = cumulative.iloc[:, 0]

    return res.astype(np.int64)


def get_daily(increments: TimeseriesDataFrame) -> TimeseriesDataFrame:
    """
    Get daily values from increments

    The daily value on the first date in the range is zero.

    Parameters
    ----------
    increments
        Increments, see [get_increments][(m).]

    Returns
    -------
    :
        Daily values
    """
    res = increments.copy()
    if not res.columns.empty:
        res.iloc[:, 0] = 0

    return res


def get_cumulative(increments: TimeseriesDataFrame) -> TimeseriesDataFrame:
    """
    Get cumulative values from increments

    This is the inverse of [get_increments][(m).].
    """
    return increments.cumsum(axis="columns")
