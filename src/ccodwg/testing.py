"""
Code to support our tests

This is here, rather than in our `tests` directory
because of the issues that come
when you turn your tests into a package using `__init__.py` files
(for details, see https://docs.pytest.org/en/7.1.x/explanation/goodpractices.html#choosing-an-import-mode).
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import pandas as pd

from ccodwg.hierarchy import RegionHierarchy
from ccodwg.io import AUTOMATED_FOLDER, MANUAL_FOLDER, REFERENCE_FOLDER
from ccodwg.metrics import METRICS

EXAMPLE_HEALTH_REGIONS = (
    ("Alberta", "Calgary"),
    ("Alberta", "Edmonton"),
    ("BC", "Fraser"),
    ("BC", "Vancouver Coastal"),
    ("Ontario", "Toronto"),
)

EXAMPLE_PROVINCES = ("Alberta", "BC", "Ontario")


def get_sheet(
    regions: Iterable[tuple[str, ...]],
    region_columns: Iterable[str],
    values: dict[str, Iterable[str]],
) -> pd.DataFrame:
    """
    Get a wide sheet, as it would be loaded from disk

    Parameters
    ----------
    regions
        Region key of each row

    region_columns
        Names of the region columns

    values
        Cell contents, keyed by date column header,
        one entry per row of `regions`

    Returns
    -------
    :
        Sheet, every cell as text
    """
    region_columns = list(region_columns)
    res = pd.DataFrame(list(regions), columns=region_columns, dtype=str)
    for date, column_values in values.items():
        res[date] = [str(v) for v in column_values]

    return res


def get_example_hierarchy() -> RegionHierarchy:
    """
    Get a small region hierarchy for testing
    """
    return RegionHierarchy(
        provinces=pd.DataFrame(
            {
                "province": list(EXAMPLE_PROVINCES),
                "province_full": ["Alberta", "British Columbia", "Ontario"],
            }
        ),
        health_regions=pd.DataFrame(
            list(EXAMPLE_HEALTH_REGIONS), columns=["province", "health_region"]
        ),
    )


def write_example_data_dir(data_dir: Path) -> Path:
    """
    Write a complete, small set of sheets and reference tables

    Every metric gets data, health region metrics at the health region level.
    Metrics with a manual feed get a manual sheet
    which overrides one value and includes the sentinel column.

    Parameters
    ----------
    data_dir
        Directory in which to write

    Returns
    -------
    :
        `data_dir`
    """
    hierarchy = get_example_hierarchy()
    (data_dir / REFERENCE_FOLDER).mkdir(parents=True, exist_ok=True)
    hierarchy.provinces.to_csv(
        data_dir / REFERENCE_FOLDER / "prov_map.csv", index=False
    )
    hierarchy.health_regions.to_csv(
        data_dir / REFERENCE_FOLDER / "hr_map.csv", index=False
    )

    for folder in (AUTOMATED_FOLDER, MANUAL_FOLDER):
        (data_dir / folder).mkdir(parents=True, exist_ok=True)

    for i, metric in enumerate(METRICS):
        if metric.granularity == "hr":
            regions = EXAMPLE_HEALTH_REGIONS
        else:
            regions = tuple((p,) for p in EXAMPLE_PROVINCES)

        scale = 10 ** (i % 3)
        automated = get_sheet(
            regions,
            metric.region_columns,
            {
                "01-03-2021": [str(scale * (j + 1)) for j in range(len(regions))],
                "03-03-2021": [""] * len(regions),
                "04-03-2021": [str(scale * (j + 3)) for j in range(len(regions))],
            },
        )
        automated.to_csv(
            data_dir / AUTOMATED_FOLDER / f"{metric.sheet}.csv", index=False
        )

        if metric.has_manual:
            manual = get_sheet(
                regions[:1],
                metric.region_columns,
                {
                    "04-03-2021": [str(scale * 4)],
                    "18-06-2021": [""],
                },
            )
            manual.to_csv(data_dir / MANUAL_FOLDER / f"{metric.sheet}.csv", index=False)

    return data_dir
