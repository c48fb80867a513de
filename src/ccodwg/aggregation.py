"""
Aggregation helpers

We aggregate increments (see [get_increments][(p).gap_filling.])
rather than cumulative values.
Once gap filled, every region has the same date range,
so summing increments and re-accumulating
gives a well-defined parent series.
"""

from __future__ import annotations

import pandas as pd

from ccodwg.hierarchy import RegionHierarchy
from ccodwg.typing import TimeseriesDataFrame


def aggregate_to_parent(
    increments: TimeseriesDataFrame,
    hierarchy: RegionHierarchy,
) -> TimeseriesDataFrame:
    """
    Sum all health regions which share a parent province

    Parameters
    ----------
    increments
        Increments of the health regions,
        indexed by `province` and `health_region`

    hierarchy
        Region hierarchy, which defines the parent of each health region

    Returns
    -------
    :
        Increments of the provinces

    Raises
    ------
    MissingReferenceMappingError
        A health region in `increments` is not in `hierarchy`
    """
    parents = hierarchy.get_parents(increments.index)

    res = increments.groupby(parents.to_numpy()).sum()
    res.index = res.index.rename(parents.name)

    return res


def aggregate_to_country(
    increments: TimeseriesDataFrame,
    region_level: str = "province",
    country: str = "Canada",
) -> TimeseriesDataFrame:
    """
    Sum all regions into a single national row

    Parameters
    ----------
    increments
        Increments of the regions

    region_level
        Name of the index level of the output

    country
        Value of `region_level` for the national row

    Returns
    -------
    :
        National increments.
        If `increments` has no regions, the result has no rows.
    """
    index = pd.Index([country], name=region_level)
    if increments.shape[0] == 0:
        return pd.DataFrame(columns=increments.columns, index=index[:0], dtype="int64")

    res = pd.DataFrame(
        [increments.sum(axis="index").to_numpy()],
        columns=increments.columns,
        index=index,
    )

    return res
