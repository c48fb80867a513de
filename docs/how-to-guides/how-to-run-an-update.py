# ---
# jupyter:
#   jupytext:
#     text_representation:
#       extension: .py
#       format_name: percent
#       format_version: '1.3'
#       jupytext_version: 1.16.6
#   kernelspec:
#     display_name: Python 3 (ipykernel)
#     language: python
#     name: python3
# ---

# %% [markdown]
# # How to run an update
#
# Here we demonstrate how to build the time series,
# first for a single metric and then for a full update.
# The sheets are normally exported from the working group's cloud folders.
# Here we use a small, made-up set instead.

# %% [markdown]
# ## Imports

# %%
import datetime as dt
import tempfile
from pathlib import Path

from ccodwg.active import create_active_timeseries
from ccodwg.io import load_hierarchy, load_raw_tables
from ccodwg.metrics import get_metric
from ccodwg.testing import write_example_data_dir
from ccodwg.timeseries import build_time_series
from ccodwg.update import get_update_time, run_update

# %% [markdown]
# ## Starting point
#
# The starting point is a folder with the sheets as CSV files.
# Each sheet is wide: region columns followed by one column per date,
# every cell holding a cumulative count (or nothing).

# %%
tmp_dir = Path(tempfile.mkdtemp())
data_dir = write_example_data_dir(tmp_dir / "data")
sorted(str(p.relative_to(data_dir)) for p in data_dir.glob("**/*.csv"))

# %%
hierarchy = load_hierarchy(data_dir)
cases_raw = load_raw_tables(data_dir, get_metric("cases"))
cases_raw.automated

# %% [markdown]
# The manual sheet overrides the automated sheet wherever both have a value.

# %%
cases_raw.manual

# %% [markdown]
# ## A single metric
#
# [build_time_series][ccodwg.timeseries.build_time_series]
# gives us the time series at every level the metric is output at.

# %%
run_date = dt.date(2021, 3, 5)
cases = build_time_series(
    get_metric("cases"), cases_raw, hierarchy=hierarchy, run_date=run_date
)
cases.to_long("hr")

# %%
cases.to_long("canada")

# %% [markdown]
# ## Active cases
#
# Active cases need cases, recovered and mortality at the same level.

# %%
recovered = build_time_series(
    get_metric("recovered"),
    load_raw_tables(data_dir, get_metric("recovered")),
    hierarchy=hierarchy,
    run_date=run_date,
)
mortality = build_time_series(
    get_metric("mortality"),
    load_raw_tables(data_dir, get_metric("mortality")),
    hierarchy=hierarchy,
    run_date=run_date,
)
create_active_timeseries(
    cases=cases.levels["prov"],
    recovered=recovered.levels["prov"],
    mortality=mortality.levels["prov"],
).to_long("prov")

# %% [markdown]
# ## A full update
#
# The same thing is available from the command line as `ccodwg-update`.

# %%
output_dir = tmp_dir / "output"
run_update(
    data_dir=data_dir,
    output_dir=output_dir,
    update_time=get_update_time(),
    run_date=run_date,
)
sorted(str(p.relative_to(output_dir)) for p in output_dir.glob("**/*"))
