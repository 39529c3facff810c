"""
Device, computer and user reads for the device/user report.

DeviceBackupReport is paged (1000 rows per page is the server maximum).
Computer is read one device at a time. User is read in a single call with
a page size large enough to hold every user.
"""

from typing import Optional

from coldstore.client import API_COMPUTER, API_DEVICE_BACKUP_REPORT, API_USER, Code42Client
from coldstore.dump.pager import data_list, data_object, iter_pages, require_rows

DEVICE_REPORT_PAGE_SIZE = 1000
USER_PAGE_SIZE = 99999


def fetch_device_backup_report(client: Code42Client, active_only: bool = False) -> list:
    """All DeviceBackupReport rows, in page order."""
    params = {"active": "true"} if active_only else None
    devices = []
    for page in iter_pages(client, API_DEVICE_BACKUP_REPORT, params, items=data_list,
                           page_size=DEVICE_REPORT_PAGE_SIZE):
        devices.extend(page)
    return devices


def fetch_backup_usage(client: Code42Client, device_uid: str) -> Optional[dict]:
    """First backupUsage entry of a computer, or None when it has none."""
    document = client.get_json(f"{API_COMPUTER}/{device_uid}", {"idType": "guid", "incAll": "true"})
    usage = require_rows(data_object(document).get("backupUsage"), f"backupUsage of computer {device_uid}")
    if not usage:
        return None
    return usage[0]


def fetch_users(client: Code42Client) -> list:
    document = client.get_json(API_USER, {"pgSize": USER_PAGE_SIZE})
    return require_rows(data_object(document).get("users"), "data.users")
