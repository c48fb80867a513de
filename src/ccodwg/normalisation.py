"""
Normalisation of dates and values

The spreadsheet exports are wide (one column per date)
and every cell is text.
Here we turn them into long tables with real dates and integer counts,
validating as we go rather than relying on implicit coercion.
"""

from __future__ import annotations

from collections.abc import Iterable

import pandas as pd
import structlog

from ccodwg.assertions import assert_has_columns
from ccodwg.exceptions import MalformedDateError, NonNumericValueError
from ccodwg.typing import LongTimeseriesTable, TimeseriesDataFrame

log = structlog.get_logger()

MISSING_MARKERS: tuple[str, ...] = ("", "NA", "N/A", "NAN", "NONE")
"""
Cell contents (after stripping and upper-casing) which mean 'no value'
"""


def parse_dates(values: Iterable[str], date_format: str, name: str) -> pd.Series:
    """
    Parse date strings

    Parameters
    ----------
    values
        Values to parse

    date_format
        Format the values must be in

    name
        Description of where the values came from

        This is only used to provide a helpful error message.

    Returns
    -------
    :
        Parsed dates

    Raises
    ------
    MalformedDateError
        Any of `values` does not match `date_format`
    """
    values_s = pd.Series(values, dtype=object)
    parsed = pd.to_datetime(values_s, format=date_format, errors="coerce")

    malformed = values_s[parsed.isna()]
    if not malformed.empty:
        raise MalformedDateError(
            malformed.tolist(), date_format=date_format, source=name
        )

    return parsed


def parse_values(values: pd.Series, name: str) -> pd.Series:
    """
    Parse cells into integer counts

    Parameters
    ----------
    values
        Values to parse

    name
        Description of where the values came from

        This is only used to provide a helpful error message.

    Returns
    -------
    :
        Parsed values, as nullable integers.
        Missing markers are returned as `pd.NA` (not zero).

    Raises
    ------
    NonNumericValueError
        A value is neither a missing marker nor a non-negative integer
    """
    text = values.astype("string").str.strip()
    missing = text.isna() | text.str.upper().isin(MISSING_MARKERS)

    present = text[~missing].str.replace(",", "", regex=False).astype(str)
    numeric = pd.to_numeric(present, errors="coerce")

    invalid_locator = numeric.isna() | (numeric < 0) | (numeric % 1 != 0)
    if invalid_locator.any():
        raise NonNumericValueError(
            values[~missing][invalid_locator].tolist(), source=name
        )

    res = numeric.astype("int64").astype("Int64").reindex(values.index)

    return res


def melt_wide_table(  # noqa: PLR0913
    indf: pd.DataFrame,
    id_columns: Iterable[str],
    date_name: str,
    value_name: str,
    date_format: str,
    exclude_dates: Iterable[str] = (),
    source: str = "table",
) -> LongTimeseriesTable:
    """
    Melt a wide table (one column per date) into a long table

    Parameters
    ----------
    indf
        Wide table. Every column not in `id_columns` must be a date.

    id_columns
        Columns which identify each row (i.e. the region)

    date_name
        Name of the date column in the output

    value_name
        Name of the value column in the output

    date_format
        Format of the date column headers

    exclude_dates
        Date column headers to drop before melting

    source
        Description of `indf`, used in log and error messages

    Returns
    -------
    :
        Long table with columns `*id_columns, date_name, value_name`.
        Missing values are dropped.

    Raises
    ------
    MalformedDateError
        A column header is not a date in `date_format`

    NonNumericValueError
        A cell is not a count or a missing marker
    """
    id_columns = list(id_columns)
    exclude_dates = set(exclude_dates)
    assert_has_columns(indf, id_columns, name=source)

    id_text = indf[id_columns].astype("string").apply(lambda s: s.str.strip())
    indf = indf.copy()
    indf[id_columns] = id_text.astype(object)

    # Blank rows come through from the spreadsheets
    blank_rows = (id_text.isna() | (id_text == "")).all(axis="columns")
    if blank_rows.any():
        log.debug("Dropping blank rows", source=source, n_rows=int(blank_rows.sum()))
        indf = indf.loc[~blank_rows]

    value_columns = [
        c for c in indf.columns if c not in id_columns and c not in exclude_dates
    ]
    column_dates = parse_dates(
        value_columns, date_format=date_format, name=f"the column headers of {source}"
    )

    if not value_columns or indf.empty:
        res = pd.DataFrame(
            {
                **{c: pd.Series(dtype=object) for c in id_columns},
                date_name: pd.Series(dtype="datetime64[ns]"),
                value_name: pd.Series(dtype="int64"),
            }
        )
        return res

    res = indf.melt(
        id_vars=id_columns,
        value_vars=value_columns,
        var_name=date_name,
        value_name=value_name,
    )
    res[date_name] = res[date_name].map(dict(zip(value_columns, column_dates)))
    res[value_name] = parse_values(res[value_name], name=source)

    res = res.dropna(subset=[value_name])
    res[value_name] = res[value_name].astype("int64")

    return res.reset_index(drop=True)


def format_dates(values: pd.Series, date_format: str) -> pd.Series:
    """
    Format dates as text for writing

    Parameters
    ----------
    values
        Dates to format

    date_format
        Format to write the dates in

    Returns
    -------
    :
        Formatted dates
    """
    return pd.to_datetime(values).dt.strftime(date_format)


def stack_timeseries_frames(
    frames: dict[str, TimeseriesDataFrame],
    region_columns: Iterable[str],
    date_name: str,
    date_format: str,
) -> LongTimeseriesTable:
    """
    Stack [TimeseriesDataFrame][(p).typing]'s into a single long table

    This is the reverse of [melt_wide_table][(m).],
    used to get our results into the shape we write.

    Parameters
    ----------
    frames
        Frames to stack, keyed by the name of their value column in the output.
        They must all share the same index and columns.

    region_columns
        Names of the index levels in the output

    date_name
        Name of the date column in the output

    date_format
        Format in which to write the dates

    Returns
    -------
    :
        Long table with columns `*region_columns, date_name, *frames`,
        sorted by region then date
    """
    region_columns = list(region_columns)
    out_columns = [*region_columns, date_name, *frames]

    if any(df.empty for df in frames.values()):
        return pd.DataFrame(columns=out_columns)

    res = pd.concat(
        [
            df.stack(future_stack=True)
            .rename_axis([*region_columns, date_name])
            .rename(name)
            for name, df in frames.items()
        ],
        axis="columns",
    ).reset_index()

    res = res.sort_values([*region_columns, date_name])
    res[date_name] = format_dates(res[date_name], date_format)
    for name in frames:
        res[name] = res[name].astype("int64")

    return res[out_columns].reset_index(drop=True)
