"""
Re-useable fixtures etc. for tests

See https://docs.pytest.org/en/7.1.x/reference/fixtures.html#conftest-py-sharing-fixtures-across-multiple-files
"""

import datetime as dt

import pandas as pd
import pytest

from ccodwg.testing import get_example_hierarchy, write_example_data_dir


@pytest.fixture(scope="session", autouse=True)
def pandas_terminal_width():
    # Set pandas terminal width so that error messages don't depend on terminal width.

    # We set the display width to 120 because examples should be short,
    # anything more than this is too wide to read in the source.
    pd.set_option("display.width", 120)

    # Display as many columns as you want (i.e. let the display width do the
    # truncation)
    pd.set_option("display.max_columns", 1000)


@pytest.fixture
def hierarchy():
    return get_example_hierarchy()


@pytest.fixture
def run_date():
    return dt.date(2021, 3, 5)


@pytest.fixture
def example_data_dir(tmp_path):
    return write_example_data_dir(tmp_path / "data")
