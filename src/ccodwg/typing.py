"""
Type hints that are used throughout
"""

from __future__ import annotations

import pandas as pd
from typing_extensions import Literal, TypeAlias

LEVEL: TypeAlias = Literal["hr", "prov", "canada"]
"""
Type alias for the granularity of a table
"""

TimeseriesDataFrame: TypeAlias = pd.DataFrame
"""
Type alias for the wide [pandas.DataFrame][pd.DataFrame] shape we compute with

For typing purposes, this is just a direct alias of [pandas.DataFrame][pd.DataFrame].
However, the point of defining this
is to provide greater clarity of the kind of data we expect.

We expect a collection of timeseries, one per region.
The columns are a contiguous, daily [pd.DatetimeIndex][pandas.DatetimeIndex]
named `date`.
The index contains the region key
(`province` and, at the health region level, `health_region`).
The data are integer counts.

```python
date                        2021-01-01  2021-01-02  2021-01-03
province health_region
Alberta  Calgary                    10          10          12
         Edmonton                    4           6           6
```
"""

LongTimeseriesTable: TypeAlias = pd.DataFrame
"""
Type alias for the long [pandas.DataFrame][pd.DataFrame] shape we read and write

One row per region and date,
with the region key and date as ordinary columns
followed by the value columns.
"""
