"""
Tests of `ccodwg.merging`
"""

import re

import pandas as pd
import pytest

from ccodwg.exceptions import DuplicateObservationError
from ccodwg.merging import merge_with_overrides

KEY_COLUMNS = ["province", "date_report"]


def get_long(rows):
    return pd.DataFrame(
        [(p, pd.Timestamp(d), v) for p, d, v in rows],
        columns=["province", "date_report", "cumulative_cases"],
    )


def test_manual_wins():
    automated = get_long([("Alberta", "2021-01-01", 100)])
    manual = get_long([("Alberta", "2021-01-01", 90)])

    res = merge_with_overrides(automated, manual, key_columns=KEY_COLUMNS)

    pd.testing.assert_frame_equal(res, manual)


def test_manual_wins_even_if_smaller_or_zero():
    automated = get_long(
        [
            ("Alberta", "2021-01-01", 100),
            ("Alberta", "2021-01-02", 110),
        ]
    )
    manual = get_long([("Alberta", "2021-01-02", 0)])

    res = merge_with_overrides(automated, manual, key_columns=KEY_COLUMNS)

    exp = get_long(
        [
            ("Alberta", "2021-01-01", 100),
            ("Alberta", "2021-01-02", 0),
        ]
    )
    pd.testing.assert_frame_equal(res, exp)


def test_non_clashing_rows_pass_through():
    automated = get_long(
        [
            ("BC", "2021-01-01", 5),
            ("Alberta", "2021-01-02", 110),
        ]
    )
    manual = get_long(
        [
            ("Alberta", "2021-01-01", 90),
            ("BC", "2021-01-02", 7),
        ]
    )

    res = merge_with_overrides(automated, manual, key_columns=KEY_COLUMNS)

    exp = get_long(
        [
            ("Alberta", "2021-01-01", 90),
            ("Alberta", "2021-01-02", 110),
            ("BC", "2021-01-01", 5),
            ("BC", "2021-01-02", 7),
        ]
    )
    pd.testing.assert_frame_equal(res, exp)


def test_no_manual():
    automated = get_long(
        [
            ("BC", "2021-01-01", 5),
            ("Alberta", "2021-01-01", 3),
        ]
    )

    res = merge_with_overrides(automated, None, key_columns=KEY_COLUMNS)

    exp = get_long(
        [
            ("Alberta", "2021-01-01", 3),
            ("BC", "2021-01-01", 5),
        ]
    )
    pd.testing.assert_frame_equal(res, exp)


@pytest.mark.parametrize("duplicated_source", ("automated", "manual"))
def test_duplicates_within_a_source(duplicated_source):
    clean = get_long([("Alberta", "2021-01-01", 3)])
    duplicated = get_long(
        [
            ("Alberta", "2021-01-01", 3),
            ("Alberta", "2021-01-01", 4),
        ]
    )
    kwargs = {"automated": clean, "manual": clean}
    kwargs[duplicated_source] = duplicated

    with pytest.raises(
        DuplicateObservationError,
        match=re.escape(f"Duplicate observations in {duplicated_source} data"),
    ):
        merge_with_overrides(**kwargs, key_columns=KEY_COLUMNS)
