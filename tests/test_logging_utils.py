from __future__ import annotations

import logging
from datetime import date, datetime, timezone

import pytest

from coldstore.logging_utils import (
    DEVICE_REPORT_LOG_PREFIX,
    PURGE_DATE_LOG_PREFIX,
    configure_logging,
    daily_log_file,
    run_log_file,
)

pytestmark = pytest.mark.usefixtures("restore_root_logging")


def test_log_file_names(tmp_path) -> None:
    daily = daily_log_file(tmp_path, PURGE_DATE_LOG_PREFIX, day=date(2016, 5, 12))
    per_run = run_log_file(tmp_path, DEVICE_REPORT_LOG_PREFIX, now=datetime(2016, 5, 12, 8, 30, 5, tzinfo=timezone.utc))

    assert daily == tmp_path / "setColdStoragePurgeDateLog_2016-05-12.log"
    assert per_run == tmp_path / "c42ComputerUserReportLog_2016-05-12T083005Z.log"


def test_same_day_runs_append_to_one_log(tmp_path) -> None:
    log_file = daily_log_file(tmp_path / "logs", PURGE_DATE_LOG_PREFIX, day=date(2016, 5, 12))

    configure_logging(log_file, append=True).info("first run")
    configure_logging(log_file, append=True).info("second run")

    lines = log_file.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    assert lines[0].endswith("| INFO | coldstore | first run")
    assert lines[1].endswith("| INFO | coldstore | second run")


def test_reconfiguring_replaces_handlers(tmp_path) -> None:
    configure_logging(tmp_path / "a.log")
    configure_logging(tmp_path / "b.log", append=False)

    root = logging.getLogger()
    assert len(root.handlers) == 2
    assert logging.getLogger("urllib3").level == logging.WARNING
