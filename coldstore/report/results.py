"""
Audit rows for purge-date runs.

One row per outcome, failed or not, behind a header row that is written
even when there are no outcomes.
"""

import csv
from datetime import datetime
from pathlib import Path

RESULT_HEADERS = ["Archive GUID", "Old Purge Date", "New Purge Date", "DestinationId"]
DRY_RUN_PREFIX = "test_"
NEW_DATE_FORMAT = "%Y-%m-%d"


def build_result_rows(outcomes: list) -> list:
    rows = [list(RESULT_HEADERS)]
    for outcome in outcomes:
        candidate = outcome.candidate
        rows.append([
            candidate.guid,
            candidate.original_expiration or "",
            outcome.applied_expiration.strftime(NEW_DATE_FORMAT),
            str(candidate.destination_id),
        ])
    return rows


def result_csv_name(dry_run: bool, now: datetime = None) -> str:
    """results_<timestamp>.csv, prefixed with test_ for dry runs."""
    now = now or datetime.now()
    prefix = DRY_RUN_PREFIX if dry_run else ""
    return f"{prefix}results_{now.strftime('%Y%m%dT%H%M%S')}.csv"


def write_result_csv(rows: list, output_dir: Path, dry_run: bool, now: datetime = None) -> Path:
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    csv_path = output_dir / result_csv_name(dry_run, now)
    with open(csv_path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerows(rows)

    return csv_path
