"""
Merging of the automated and manually curated feeds
"""

from __future__ import annotations

from collections.abc import Iterable

import pandas as pd
import structlog

from ccodwg.exceptions import DuplicateObservationError
from ccodwg.typing import LongTimeseriesTable

log = structlog.get_logger()


def assert_no_duplicate_observations(
    indf: LongTimeseriesTable, key_columns: Iterable[str], source: str
) -> None:
    """
    Assert that each key appears at most once

    Parameters
    ----------
    indf
        Data to verify

    key_columns
        Columns which together identify an observation

    source
        Description of `indf`, used in the error message

    Raises
    ------
    DuplicateObservationError
        Some keys appear more than once
    """
    duplicated = indf.duplicated(subset=list(key_columns), keep=False)
    if duplicated.any():
        raise DuplicateObservationError(indf[duplicated], source=source)


def merge_with_overrides(
    automated: LongTimeseriesTable,
    manual: LongTimeseriesTable | None,
    key_columns: Iterable[str],
) -> LongTimeseriesTable:
    """
    Merge automated data with manual overrides

    Where a key is in both `automated` and `manual`,
    the manual row wins, whatever its value.
    Rows whose key is only in one of the two pass through unchanged.

    Parameters
    ----------
    automated
        Data from the automated feed

    manual
        Data from the manually curated feed.
        If `None`, `automated` is returned (sorted).

    key_columns
        Columns which together identify an observation
        (i.e. the region columns and the date column)

    Returns
    -------
    :
        Merged data, sorted by `key_columns`

    Raises
    ------
    DuplicateObservationError
        Either input has more than one row for the same key
    """
    key_columns = list(key_columns)
    assert_no_duplicate_observations(automated, key_columns, source="automated data")

    if manual is None:
        return automated.sort_values(key_columns).reset_index(drop=True)

    assert_no_duplicate_observations(manual, key_columns, source="manual data")

    overridden = pd.MultiIndex.from_frame(automated[key_columns]).isin(
        pd.MultiIndex.from_frame(manual[key_columns])
    )
    if overridden.any():
        log.info("Applying manual overrides", n_overridden=int(overridden.sum()))

    res = pd.concat([automated.loc[~overridden], manual], ignore_index=True)

    return res.sort_values(key_columns).reset_index(drop=True)
