"""
Integration tests of a full update, run through the command-line interface
"""

import datetime as dt
from pathlib import Path

import pandas as pd
import pytest
from click.testing import CliRunner

from ccodwg.exceptions import MalformedDateError
from ccodwg.io import UPDATE_TIME_FILE
from ccodwg.metrics import METRICS
from ccodwg.update import get_update_time, main

RUN_DATE = "2021-03-05"


def run_cli(data_dir: Path, output_dir: Path, *extra_args: str):
    runner = CliRunner()
    return runner.invoke(
        main,
        [
            "--data-dir",
            str(data_dir),
            "--output-dir",
            str(output_dir),
            "--run-date",
            RUN_DATE,
            *extra_args,
        ],
    )


def get_expected_paths() -> list[str]:
    res = [m.output_path(level) for m in METRICS for level in m.levels]
    res.extend(
        [
            "timeseries_prov/active_timeseries_prov.csv",
            "timeseries_canada/active_timeseries_canada.csv",
        ]
    )

    return res


def test_update(example_data_dir, tmp_path):
    output_dir = tmp_path / "output"

    result = run_cli(example_data_dir, output_dir)

    assert result.exit_code == 0, result.output
    for path in get_expected_paths():
        assert (output_dir / path).exists(), path

    assert (output_dir / UPDATE_TIME_FILE).exists()

    cases_hr = pd.read_csv(output_dir / "timeseries_hr/cases_timeseries_hr.csv")
    assert cases_hr.columns.tolist() == [
        "province",
        "health_region",
        "date_report",
        "cases",
        "cumulative_cases",
    ]
    calgary = cases_hr.loc[cases_hr["health_region"] == "Calgary"]
    assert calgary["date_report"].tolist() == [
        "01-03-2021",
        "02-03-2021",
        "03-03-2021",
        "04-03-2021",
        "05-03-2021",
    ]
    # 04-03-2021 is overridden by the manual sheet
    assert calgary["cumulative_cases"].tolist() == [1, 1, 1, 4, 4]
    assert calgary["cases"].tolist() == [0, 0, 0, 3, 0]

    cases_prov = pd.read_csv(output_dir / "timeseries_prov/cases_timeseries_prov.csv")
    cases_canada = pd.read_csv(
        output_dir / "timeseries_canada/cases_timeseries_canada.csv"
    )
    assert (cases_canada["province"] == "Canada").all()
    # Canada is the sum of the provinces on every date
    pd.testing.assert_series_equal(
        cases_prov.groupby("date_report", sort=False)["cases"]
        .sum()
        .reset_index(drop=True),
        cases_canada["cases"],
        check_names=False,
    )

    active_prov = pd.read_csv(
        output_dir / "timeseries_prov/active_timeseries_prov.csv"
    )
    assert active_prov.columns.tolist() == [
        "province",
        "date_active",
        "cumulative_cases",
        "cumulative_recovered",
        "cumulative_deaths",
        "active_cases",
        "active_cases_change",
    ]
    assert (
        active_prov["active_cases"]
        == active_prov["cumulative_cases"]
        - active_prov["cumulative_recovered"]
        - active_prov["cumulative_deaths"]
    ).all()


def test_update_is_reproducible(example_data_dir, tmp_path):
    output_dir = tmp_path / "output"

    first = run_cli(example_data_dir, output_dir)
    assert first.exit_code == 0, first.output
    first_bytes = {p: (output_dir / p).read_bytes() for p in get_expected_paths()}

    second = run_cli(example_data_dir, output_dir)
    assert second.exit_code == 0, second.output
    second_bytes = {p: (output_dir / p).read_bytes() for p in get_expected_paths()}

    assert first_bytes == second_bytes


def test_update_no_checks(example_data_dir, tmp_path):
    result = run_cli(example_data_dir, tmp_path / "output", "--no-checks")

    assert result.exit_code == 0, result.output


def test_failed_update_writes_nothing(example_data_dir, tmp_path):
    sheet_path = example_data_dir / "ts" / "testing_timeseries_prov.csv"
    sheet = pd.read_csv(sheet_path, dtype=str, keep_default_na=False)
    sheet = sheet.rename(columns={"04-03-2021": "2021-03-04"})
    sheet.to_csv(sheet_path, index=False)

    output_dir = tmp_path / "output"
    result = run_cli(example_data_dir, output_dir)

    assert result.exit_code != 0
    assert isinstance(result.exception, MalformedDateError)
    assert "testing_timeseries_prov" in str(result.exception)
    assert not (output_dir / UPDATE_TIME_FILE).exists()
    assert not any(output_dir.glob("**/*.csv"))


def test_missing_manual_sheet_is_fatal(example_data_dir, tmp_path):
    (example_data_dir / "ts_manual" / "cases_timeseries_hr.csv").unlink()

    result = run_cli(example_data_dir, tmp_path / "output")

    assert isinstance(result.exception, FileNotFoundError)


@pytest.mark.parametrize("timezone", ("America/Toronto", "UTC"))
def test_get_update_time(timezone):
    res = get_update_time(timezone)

    assert res.tzinfo is not None
    assert abs(res - dt.datetime.now(tz=dt.timezone.utc)) < dt.timedelta(minutes=1)
