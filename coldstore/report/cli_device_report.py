#!/usr/bin/env python3
"""
CLI for the Device/User Report

Usage:
  c42-device-user-report
  c42-device-user-report --active --limit 100
  c42-device-user-report --no-users --sort-connected

--limit caps the number of Computer lookups, which dominate run time.
With --active, users whose only devices are deactivated also show up in the
users-without-devices section at the end of the report.
"""

import argparse
import logging
import sys
from pathlib import Path

from coldstore.client import Code42Client
from coldstore.config import DEFAULT_HOST_INFO_FILE, resolve_host_info
from coldstore.errors import AbortException
from coldstore.logging_utils import DEVICE_REPORT_LOG_PREFIX, configure_logging, run_log_file
from coldstore.report.device_report import build_device_report, write_device_report

logger = logging.getLogger("coldstore.device_report")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Generate the Code42 device/user backup report")
    parser.add_argument("--active", action="store_true", help="Show only active devices")
    parser.add_argument("--limit", type=int, default=None,
                        help="Limit calls to the Computer resource to this number")
    parser.add_argument("--no-users", action="store_true",
                        help="Do not append users without registered devices")
    parser.add_argument("--sort-connected", action="store_true",
                        help="Sort devices by last connected date, most recent first")
    parser.add_argument("--config", default=DEFAULT_HOST_INFO_FILE,
                        help="Host info file with server URL, username and password")
    parser.add_argument("--output-dir", default=".", help="Directory for the log file and report CSV")
    args = parser.parse_args(argv)

    output_dir = Path(args.output_dir)
    configure_logging(run_log_file(output_dir, DEVICE_REPORT_LOG_PREFIX), append=False)

    print("=" * 70)
    print("DEVICE/USER REPORT")
    print("=" * 70)
    print()

    if args.limit is not None and args.limit < 0:
        print(f"ERROR: --limit must be non-negative, got {args.limit}")
        return 1

    try:
        host_info = resolve_host_info(args.config)
        client = Code42Client(host_info.url, host_info.username, host_info.password)
        rows = build_device_report(
            client,
            active_only=args.active,
            computer_limit=args.limit,
            include_users=not args.no_users,
            sort_by_connected=args.sort_connected,
        )
    except AbortException as e:
        logger.error("ABORTED: %s", e)
        print(f"\nABORTED: {e}")
        return 1

    csv_path = write_device_report(rows, output_dir)
    logger.info("Report generated: %s", csv_path)
    print(f"\nReport: {csv_path}")
    print(f"Rows: {len(rows)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
