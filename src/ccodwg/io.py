"""
Reading the sheets and writing the time series

The sheets are expected on disk in the same folder structure
as the cloud folder they are exported from:

```
<data_dir>/
    ts/<sheet>.csv          automated feed
    ts_manual/<sheet>.csv   manually curated feed
    other/prov_map.csv      province reference table
    other/hr_map.csv        health region reference table
```
"""

from __future__ import annotations

import datetime as dt
from pathlib import Path

import pandas as pd
import structlog

from ccodwg.hierarchy import RegionHierarchy
from ccodwg.metrics import COUNTRY, MetricConfig
from ccodwg.timeseries import RawTables

log = structlog.get_logger()

AUTOMATED_FOLDER = "ts"
MANUAL_FOLDER = "ts_manual"
REFERENCE_FOLDER = "other"

UPDATE_TIME_FILE = "update_time.txt"
UPDATE_TIME_FORMAT = "%Y-%m-%d %H:%M %Z"


def load_sheet(path: Path) -> pd.DataFrame:
    """
    Load a sheet

    Every cell is read as text, empty cells as empty strings.
    Interpretation of the cells is left to [ccodwg.normalisation][].
    """
    log.debug("Loading sheet", path=str(path))
    return pd.read_csv(path, dtype=str, keep_default_na=False)


def load_raw_tables(data_dir: Path, metric: MetricConfig) -> RawTables:
    """
    Load the sheets for a metric

    Parameters
    ----------
    data_dir
        Root of the folder structure

    metric
        Metric to load

    Returns
    -------
    :
        Loaded sheets. `manual` is `None` if the metric has no manual feed.
    """
    automated = load_sheet(data_dir / AUTOMATED_FOLDER / f"{metric.sheet}.csv")

    manual = None
    if metric.has_manual:
        manual = load_sheet(data_dir / MANUAL_FOLDER / f"{metric.sheet}.csv")

    return RawTables(automated=automated, manual=manual)


def load_hierarchy(data_dir: Path, country: str = COUNTRY) -> RegionHierarchy:
    """
    Load the region hierarchy from the reference tables
    """
    return RegionHierarchy.from_reference_tables(
        prov_map=load_sheet(data_dir / REFERENCE_FOLDER / "prov_map.csv"),
        hr_map=load_sheet(data_dir / REFERENCE_FOLDER / "hr_map.csv"),
        country=country,
    )


def write_table(df: pd.DataFrame, path: Path) -> None:
    """
    Write a table as CSV, creating the parent directory if needed
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)
    log.info("Wrote table", path=str(path), n_rows=df.shape[0])


def write_update_time(output_dir: Path, update_time: dt.datetime) -> Path:
    """
    Write the update time marker

    This must be the last file written in a run.

    Parameters
    ----------
    output_dir
        Output directory

    update_time
        Time of the update (timezone-aware)

    Returns
    -------
    :
        Path of the written file
    """
    out_path = output_dir / UPDATE_TIME_FILE
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(f"{update_time.strftime(UPDATE_TIME_FORMAT)}\n")

    return out_path
