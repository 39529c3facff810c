"""
Cold Storage Purge Date Engine

################################################################################
# WRITES TO LIVE ARCHIVES
################################################################################
#
# Changes archiveHoldExpireDate (the purge date) of archives in cold storage.
# Every candidate is sent exactly once, in discovery order.
#
# Reads abort the run:   a partial candidate list would be misleading.
# Writes never abort:    a failed PUT is logged with the archive GUID and
#                        still appears in the audit rows with the attempted
#                        (not confirmed) purge date.
#
################################################################################
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone

from coldstore.client import API_COLDSTORAGE, Code42Client
from coldstore.config import RunParameters
from coldstore.dump.destinations import list_destinations
from coldstore.errors import AbortException
from coldstore.plan.select_archives import Candidate, select_candidates
from coldstore.report.results import build_result_rows

logger = logging.getLogger(__name__)

PAYLOAD_DATE_FORMAT = "%Y-%m-%d"

# =============================================================================
# MUTATION EXECUTOR
# =============================================================================


@dataclass(frozen=True)
class MutationOutcome:
    candidate: Candidate
    succeeded: bool
    applied_expiration: date


def purge_date_payload(target_expiration: date) -> dict:
    return {"archiveHoldExpireDate": target_expiration.strftime(PAYLOAD_DATE_FORMAT)}


def change_purge_date(client: Code42Client, guid: str, target_expiration: date) -> bool:
    """PUT a new purge date for one archive."""
    return client.put(
        f"{API_COLDSTORAGE}/{guid}",
        purge_date_payload(target_expiration),
        key=f"archive with GUID={guid}",
        params={"idType": "guid"},
    )


def apply_purge_dates(client: Code42Client, candidates: list, target_expiration: date, dry_run: bool = True) -> list:
    """Change the purge date of every candidate, or preview it when dry_run is set."""
    outcomes = []

    if dry_run:
        for candidate in candidates:
            outcomes.append(MutationOutcome(candidate, True, target_expiration))
        return outcomes

    for candidate in candidates:
        succeeded = change_purge_date(client, candidate.guid, target_expiration)
        if not succeeded:
            logger.warning("Could not change purge date for archive with GUID= %s", candidate.guid)
        outcomes.append(MutationOutcome(candidate, succeeded, target_expiration))

    return outcomes


# =============================================================================
# MAIN PURGE DATE ENGINE
# =============================================================================


class PurgeDateRun:
    """Orchestrates one run: enumerate, select, apply, record."""

    def __init__(self, client: Code42Client, params: RunParameters):
        self.client = client
        self.params = params
        self.outcomes = []
        self.rows = None
        self.results = {
            "execution_mode": "DRY_RUN" if params.dry_run else "APPLY",
            "baseline_date": params.baseline_date.isoformat(),
            "offset_days": params.offset_days,
            "target_expiration": params.target_expiration.isoformat(),
            "start_utc": None,
            "end_utc": None,
            "duration_seconds": 0,
            "aborted": False,
            "abort_reason": None,
            "summary": {
                "destinations": 0,
                "archives_examined": 0,
                "malformed_expiration": 0,
                "missing_guid": 0,
                "candidates": 0,
                "succeeded": 0,
                "failed": 0,
                "limit_reached": False,
            },
        }

    def run(self) -> dict:
        """Execute the full workflow. Read failures and unexpected errors abort and leave no rows."""
        start_time = datetime.now(timezone.utc)
        self.results["start_utc"] = start_time.isoformat()

        try:
            destinations = list_destinations(self.client, self.params.skip_zero_cold_bytes)
            self.results["summary"]["destinations"] = len(destinations)

            selection = select_candidates(self.client, destinations, self.params)
            self._record_selection(selection)

            self.outcomes = self._apply(selection.candidates)
            self.rows = build_result_rows(self.outcomes)

        except AbortException as e:
            self.results["aborted"] = True
            self.results["abort_reason"] = str(e)
            self.outcomes = []
            self.rows = None
            logger.error("ABORTED: %s", e)

        except Exception as e:
            self.results["aborted"] = True
            self.results["abort_reason"] = f"Unexpected error: {e}"
            self.outcomes = []
            self.rows = None
            logger.exception("ERROR: %s", e)

        return self._finalize_results(start_time)

    def _record_selection(self, selection):
        summary = self.results["summary"]
        summary["archives_examined"] = selection.archives_examined
        summary["malformed_expiration"] = selection.malformed_count
        summary["missing_guid"] = selection.missing_guid_count
        summary["candidates"] = len(selection.candidates)
        summary["limit_reached"] = selection.limit_reached

    def _apply(self, candidates: list) -> list:
        target = self.params.target_expiration
        if self.params.dry_run:
            logger.info("Dry run: previewing purge date %s for %d archives.", target, len(candidates))
        else:
            logger.info("Starting to change archive expiration dates to %s.", target)
        return apply_purge_dates(self.client, candidates, target, dry_run=self.params.dry_run)

    def _finalize_results(self, start_time: datetime) -> dict:
        end_time = datetime.now(timezone.utc)
        self.results["end_utc"] = end_time.isoformat()
        self.results["duration_seconds"] = (end_time - start_time).total_seconds()

        succeeded = sum(1 for o in self.outcomes if o.succeeded)
        self.results["summary"]["succeeded"] = succeeded
        self.results["summary"]["failed"] = len(self.outcomes) - succeeded

        return self.results
