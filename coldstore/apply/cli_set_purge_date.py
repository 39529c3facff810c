#!/usr/bin/env python3
"""
CLI for Cold Storage Purge Date Changes

Sets the purge date of archives in cold storage to a baseline date plus
N days. Only archives currently expiring later than that date are changed,
unless --all is given.

Usage:
  set-cold-storage-purge-date -b 05-12-2016 -d 30 -t -s    # test run
  set-cold-storage-purge-date -b TODAY -d 90               # LIVE WRITES
  set-cold-storage-purge-date -b TODAY -d 90 -a            # every archive

Required file: hostinfo.config (or C42_URL / C42_USERNAME / C42_PASSWORD)
    master server url, e.g.: https://master.example.com:4285
    username
    password

Output:
  setColdStoragePurgeDateLog_<YYYY-MM-DD>.log   appended by every run that day
  [test_]results_<timestamp>.csv                one row per archive considered
"""

import argparse
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from coldstore.apply.purge_dates import PurgeDateRun
from coldstore.client import Code42Client
from coldstore.config import DEFAULT_HOST_INFO_FILE, TODAY, RunParameters, parse_baseline_date, resolve_host_info
from coldstore.errors import ConfigError
from coldstore.logging_utils import PURGE_DATE_LOG_PREFIX, configure_logging, daily_log_file
from coldstore.report.results import write_result_csv

logger = logging.getLogger("coldstore.set_purge_date")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Set the purge date of archives in cold storage to baseline date + N days"
    )
    parser.add_argument("-b", "--baseline", default=TODAY,
                        help="Baseline date for calculating purge date: MM-DD-YYYY or TODAY (UTC)")
    parser.add_argument("-d", "--days", type=int, default=0,
                        help="Number of days after baseline to set the purge date to")
    parser.add_argument("-t", "--test", action="store_true",
                        help="Test only: report the archives that would change, change nothing")
    parser.add_argument("-a", "--all", action="store_true",
                        help="Set all archives in cold storage to the new date, not only those with purge date > b+d")
    parser.add_argument("-s", "--skip-zero", action="store_true",
                        help="Skip destinations that report zero bytes in cold storage")
    parser.add_argument("--limit", type=int, default=None,
                        help="Stop after examining this many archives (for testing)")
    parser.add_argument("--config", default=DEFAULT_HOST_INFO_FILE,
                        help="Host info file with server URL, username and password")
    parser.add_argument("--output-dir", default=".",
                        help="Directory for the log file and results CSV")
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    output_dir = Path(args.output_dir)
    configure_logging(daily_log_file(output_dir, PURGE_DATE_LOG_PREFIX), append=True)

    print("=" * 70)
    print("COLD STORAGE PURGE DATE")
    print("=" * 70)
    print()

    logger.info("Start at %s", datetime.now(timezone.utc).isoformat())
    logger.info("Command line arguments:")
    logger.info("-b: %s", args.baseline)
    logger.info("-d: %s", args.days)
    logger.info("-t: %s", args.test)
    logger.info("-a: %s", args.all)
    logger.info("-s: %s", args.skip_zero)
    logger.info("--limit: %s", args.limit)

    try:
        params = RunParameters(
            baseline_date=parse_baseline_date(args.baseline),
            offset_days=args.days,
            dry_run=args.test,
            select_all=args.all,
            skip_zero_cold_bytes=args.skip_zero,
            item_limit=args.limit,
        )
        host_info = resolve_host_info(args.config)
    except ConfigError as e:
        logger.error("%s Quitting.", e)
        print(f"ERROR: {e}")
        return 1

    logger.info("New purge date= %s", params.target_expiration.isoformat())
    logger.info("Connecting to host: %s", host_info.url)

    if params.dry_run:
        print("Running in TEST mode (no actual changes)")
    else:
        print("=" * 70)
        print("WARNING: LIVE MODE - PURGE DATES WILL BE CHANGED")
        print("=" * 70)
    print()

    client = Code42Client(host_info.url, host_info.username, host_info.password)
    run = PurgeDateRun(client, params)
    results = run.run()

    if results["aborted"]:
        print(f"\nABORTED: {results['abort_reason']}")
        return 1

    csv_path = write_result_csv(run.rows, output_dir, dry_run=params.dry_run)
    logger.info("Results written to %s", csv_path)

    summary = results["summary"]
    print()
    print("=" * 70)
    print("EXECUTION SUMMARY")
    print("=" * 70)
    print(f"Target purge date: {results['target_expiration']}")
    print(f"Destinations: {summary['destinations']}")
    print(f"Archives examined: {summary['archives_examined']}")
    if not params.select_all:
        print(f"Null or malformed expiration dates: {summary['malformed_expiration']}")
    print(f"Candidates: {summary['candidates']}")

    if params.dry_run:
        logger.info(
            "This was only a test. %d archives in cold storage would have had their purge dates changed.",
            summary["candidates"],
        )
    else:
        logger.info("Total number of purge dates changed: %d", summary["succeeded"])
        if summary["failed"]:
            logger.warning("Purge date changes that failed: %d", summary["failed"])

    print(f"Results: {csv_path}")
    print()
    logger.info("Done.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
