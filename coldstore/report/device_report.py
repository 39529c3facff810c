"""
Device/User Report

Joins three Code42 resources into one CSV:

    DeviceBackupReport   one row per device (the base of the report)
    Computer             selected files, last backup and to-do counts,
                         looked up per device by deviceUid
    User                 users whose userUid matches no device are
                         appended as email-only rows
"""

import csv
import logging
from dataclasses import dataclass, fields
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from coldstore.client import Code42Client
from coldstore.dump.devices import fetch_backup_usage, fetch_device_backup_report, fetch_users
from coldstore.plan.select_archives import parse_code42_timestamp

logger = logging.getLogger(__name__)

REPORT_HEADERS = [
    "Email", "DeviceName", "DeviceStatus", "SelectedFiles", "LastBackup",
    "LastCompletedBackup", "LastConnected", "BytesToDo", "FilesToDo",
    "BackupCompletePercentage", "Alerts", "Destination", "OrgName",
]


@dataclass
class DeviceReportRow:
    email: str = ""
    device_name: str = ""
    status: str = ""
    selected_files: str = ""
    last_backup: str = ""
    last_completed_backup: str = ""
    last_connected: str = ""
    bytes_to_do: str = ""
    files_to_do: str = ""
    backup_complete_percentage: str = ""
    alerts: str = ""
    destination_name: str = ""
    org_name: str = ""
    # join keys, not written to the report
    user_uid: str = ""
    device_uid: str = ""

    def as_record(self) -> list:
        return [getattr(self, f.name) for f in fields(self)][:len(REPORT_HEADERS)]


def _text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return ",".join(str(v) for v in value)
    return str(value)


def device_row(device: dict) -> DeviceReportRow:
    return DeviceReportRow(
        email=_text(device.get("email")),
        device_name=_text(device.get("deviceName")),
        status=_text(device.get("status")),
        last_completed_backup=_text(device.get("lastCompletedBackupDate")),
        last_connected=_text(device.get("lastConnectedDate")),
        backup_complete_percentage=_text(device.get("backupCompletePercentage")),
        alerts=_text(device.get("alertStates")),
        destination_name=_text(device.get("destinationName")),
        org_name=_text(device.get("orgName")),
        user_uid=_text(device.get("userUid")),
        device_uid=_text(device.get("deviceUid")),
    )


def apply_backup_usage(row: DeviceReportRow, usage: dict):
    row.selected_files = _text(usage.get("selectedFiles"))
    row.last_backup = _text(usage.get("lastBackup"))
    row.bytes_to_do = _text(usage.get("todoBytes"))
    row.files_to_do = _text(usage.get("todoFiles"))


def users_without_devices(users: list, rows: list) -> list:
    """Email-only rows for users whose userUid appears on no device."""
    device_user_uids = {row.user_uid for row in rows if row.user_uid}
    extra = []
    for user in users:
        email = _text(user.get("email"))
        if not email or _text(user.get("userUid")) in device_user_uids:
            continue
        extra.append(DeviceReportRow(email=email))
    return extra


def _connected_sort_key(row: DeviceReportRow):
    connected = parse_code42_timestamp(row.last_connected)
    if connected is None:
        return (1, 0.0)
    return (0, -connected.timestamp())


def build_device_report(
    client: Code42Client,
    active_only: bool = False,
    computer_limit: Optional[int] = None,
    include_users: bool = True,
    sort_by_connected: bool = False,
) -> list:
    """Read, join and order every report row."""
    rows = [device_row(d) for d in fetch_device_backup_report(client, active_only)]
    logger.info("Total number of device objects: %d", len(rows))

    for index, row in enumerate(rows):
        if computer_limit is not None and index >= computer_limit:
            logger.info("Computer lookups limited to %d devices.", computer_limit)
            break
        if not row.device_uid:
            continue
        usage = fetch_backup_usage(client, row.device_uid)
        if usage:
            apply_backup_usage(row, usage)

    if sort_by_connected:
        rows.sort(key=_connected_sort_key)

    if include_users:
        extra = users_without_devices(fetch_users(client), rows)
        logger.info("Users without devices appended: %d", len(extra))
        rows.extend(extra)

    return rows


def build_report_records(rows: list) -> list:
    records = [list(REPORT_HEADERS)]
    records.extend(row.as_record() for row in rows)
    return records


def write_device_report(rows: list, output_dir: Path, now: datetime = None) -> Path:
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    now = now or datetime.now(timezone.utc)

    csv_path = output_dir / f"device_user_report_{now.strftime('%Y%m%dT%H%M%S')}.csv"
    with open(csv_path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerows(build_report_records(rows))

    return csv_path
