"""
Run a full update

Builds every metric in [METRICS][(p).metrics.], derives active cases,
writes every table and, last of all, the update time marker.
A run either completes or raises,
in which case the update time marker is not written.
"""

from __future__ import annotations

import datetime as dt
import logging
from pathlib import Path
from zoneinfo import ZoneInfo

import click
import structlog

from ccodwg.active import create_active_timeseries, get_active_output_path
from ccodwg.io import load_hierarchy, load_raw_tables, write_table, write_update_time
from ccodwg.metrics import METRICS
from ccodwg.timeseries import MetricTimeseries, build_time_series

log = structlog.get_logger()

DEFAULT_TIMEZONE = "America/Toronto"


def get_update_time(timezone: str = DEFAULT_TIMEZONE) -> dt.datetime:
    """
    Get the current time in `timezone`
    """
    return dt.datetime.now(tz=ZoneInfo(timezone))


def run_update(
    data_dir: Path,
    output_dir: Path,
    update_time: dt.datetime,
    run_date: dt.date | None = None,
    run_checks: bool = True,
) -> dict[str, MetricTimeseries]:
    """
    Run a full update

    Parameters
    ----------
    data_dir
        Directory containing the sheets (see [ccodwg.io][])

    output_dir
        Directory in which to write the time series

    update_time
        Time of the update, written to the update time marker

    run_date
        Last date of the time series.
        If not supplied, the date of `update_time`.

    run_checks
        If `True`, check the internal consistency of each metric's output

    Returns
    -------
    :
        Time series, keyed by metric name
    """
    if run_date is None:
        run_date = update_time.date()

    log.info("Starting update", run_date=run_date.isoformat(), data_dir=str(data_dir))
    hierarchy = load_hierarchy(data_dir)

    res = {}
    for metric in METRICS:
        res[metric.name] = build_time_series(
            metric,
            raw_tables=load_raw_tables(data_dir, metric),
            hierarchy=hierarchy,
            run_date=run_date,
            run_checks=run_checks,
        )

    active = {
        level: create_active_timeseries(
            cases=res["cases"].levels[level],
            recovered=res["recovered"].levels[level],
            mortality=res["mortality"].levels[level],
        )
        for level in ("prov", "canada")
    }

    for metric_ts in res.values():
        for level in metric_ts.metric.levels:
            write_table(
                metric_ts.to_long(level),
                output_dir / metric_ts.metric.output_path(level),
            )

    for level, active_ts in active.items():
        write_table(
            active_ts.to_long(level),
            output_dir / get_active_output_path(level),
        )

    out_path = write_update_time(output_dir, update_time)
    log.info("Update complete", update_time_file=str(out_path))

    return res


@click.command()
@click.option(
    "--data-dir",
    envvar="CCODWG_DATA_DIR",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Directory containing the ts, ts_manual and other folders.",
)
@click.option(
    "--output-dir",
    envvar="CCODWG_OUTPUT_DIR",
    type=click.Path(file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Directory in which to write the time series.",
)
@click.option(
    "--timezone",
    envvar="CCODWG_TIMEZONE",
    default=DEFAULT_TIMEZONE,
    show_default=True,
    help="Timezone of the update time.",
)
@click.option(
    "--run-date",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Last date of the time series. Defaults to today in --timezone.",
)
@click.option(
    "--checks/--no-checks",
    default=True,
    show_default=True,
    help="Check the internal consistency of the output.",
)
@click.option(
    "--log-level",
    envvar="CCODWG_LOG_LEVEL",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    show_default=True,
)
def main(  # noqa: PLR0913
    data_dir: Path,
    output_dir: Path,
    timezone: str,
    run_date: dt.datetime | None,
    checks: bool,
    log_level: str,
) -> None:
    """
    Build the time series from the sheets in DATA_DIR
    """
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(log_level.upper())
        )
    )

    run_update(
        data_dir=data_dir,
        output_dir=output_dir,
        update_time=get_update_time(timezone),
        run_date=run_date.date() if run_date is not None else None,
        run_checks=checks,
    )


if __name__ == "__main__":
    main()
