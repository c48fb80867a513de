"""
Useful assertions
"""

from __future__ import annotations

from collections.abc import Iterable

import pandas as pd
from pandas_openscm.grouping import groupby_except

from ccodwg.typing import TimeseriesDataFrame


class InternalConsistencyError(ValueError):
    """
    Raised when there is an internal consistency issue in the data

    Specifically, the sum of the children doesn't match the parent
    """

    def __init__(
        self,
        differences: pd.DataFrame,
        parent_level: str,
    ) -> None:
        error_msg = (
            f"Summing the children does not equal the {parent_level} total. "
            f"Differences:\n{differences}"
        )

        super().__init__(error_msg)


def assert_has_columns(indf: pd.DataFrame, columns: Iterable[str], name: str) -> None:
    """
    Assert that a [pd.DataFrame][pandas.DataFrame] has the given columns

    Parameters
    ----------
    indf
        Data to verify

    columns
        Columns we expect

    name
        Name of the data, used in the error message

    Raises
    ------
    AssertionError
        `indf` is missing some of `columns`
    """
    missing = [c for c in columns if c not in indf.columns]
    if missing:
        msg = f"{name} is missing columns {missing}. Available: {indf.columns.tolist()}"
        raise AssertionError(msg)


def assert_dates_contiguous(indf: TimeseriesDataFrame) -> None:
    """
    Assert that the columns are a contiguous run of days

    Parameters
    ----------
    indf
        Data to verify

    Raises
    ------
    AssertionError
        The columns are not in order or there are missing days
    """
    if indf.columns.empty:
        return

    exp = pd.date_range(indf.columns.min(), indf.columns.max(), freq="D")
    if not indf.columns.equals(exp):
        missing = exp.difference(indf.columns)
        msg = f"Dates are not a contiguous daily run. {missing=}"
        raise AssertionError(msg)


def assert_aggregation_consistent(
    children_daily: TimeseriesDataFrame,
    parent_daily: TimeseriesDataFrame,
    child_level: str,
    parent_level: str,
) -> None:
    """
    Assert that the parent's daily values are the sum of its children's

    Parameters
    ----------
    children_daily
        Daily values of the children

    parent_daily
        Daily values of the parents

    child_level
        Index level which identifies the child within its parent.

        If this is the only level in the index of `children_daily`,
        all children are summed into the single row of `parent_daily`.

    parent_level
        Name of the parent level, used in the error message

    Raises
    ------
    InternalConsistencyError
        The parent's values are not the sum of its children's
    """
    if children_daily.index.nlevels > 1:
        exp = groupby_except(children_daily, child_level).sum()
    else:
        exp = pd.DataFrame(
            [children_daily.sum(axis="index")], index=parent_daily.index
        )

    exp_aligned, parent_aligned = exp.align(parent_daily, join="outer")
    comparison = exp_aligned.compare(
        parent_aligned, result_names=("children", "parent")
    )
    if not comparison.empty:
        raise InternalConsistencyError(
            differences=comparison, parent_level=parent_level
        )
