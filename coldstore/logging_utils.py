"""
Log files for the command-line tools.

The purge date tool keeps one log per UTC day that every run appends to, so
a day's changes can be audited in one place. The device report writes a
fresh log per run, named with the run's timestamp.
"""

import logging
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

PURGE_DATE_LOG_PREFIX = "setColdStoragePurgeDateLog_"
DEVICE_REPORT_LOG_PREFIX = "c42ComputerUserReportLog_"

# urllib3 logs every connection at DEBUG/INFO
QUIET_LOGGERS = ("urllib3",)


def daily_log_file(output_dir, prefix: str, day: Optional[date] = None) -> Path:
    """<prefix><YYYY-MM-DD>.log for the given (default: current UTC) day."""
    day = day or datetime.now(timezone.utc).date()
    return Path(output_dir) / f"{prefix}{day.isoformat()}.log"


def run_log_file(output_dir, prefix: str, now: Optional[datetime] = None) -> Path:
    """<prefix><YYYY-MM-DDTHHMMSSZ>.log for a single run."""
    now = now or datetime.now(timezone.utc)
    return Path(output_dir) / f"{prefix}{now.strftime('%Y-%m-%dT%H%M%SZ')}.log"


def _handlers(log_file: Path, append: bool) -> list:
    console = logging.StreamHandler()
    to_file = logging.FileHandler(log_file, mode="a" if append else "w", encoding="utf-8")
    return [console, to_file]


def configure_logging(log_file, level: int = logging.INFO, append: bool = True) -> logging.Logger:
    """Send every record to the console and to log_file.

    Handlers left by an earlier call are closed first, so calling this twice
    in one process never duplicates lines.
    """
    log_file = Path(log_file)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    for handler in _handlers(log_file, append):
        handler.setFormatter(formatter)
        handler.setLevel(level)
        root.addHandler(handler)
    root.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    package_logger = logging.getLogger("coldstore")
    package_logger.setLevel(level)
    return package_logger
