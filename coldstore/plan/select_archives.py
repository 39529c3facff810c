"""
Cold storage archive selection.

Pages through every destination's cold storage archives and picks the ones
whose purge date (archiveHoldExpireDate) should be changed.

Two policies:
    select_all=True    every archive is a candidate
    select_all=False   only archives expiring strictly after the target
                       date are candidates; purge dates are only ever
                       pulled earlier

The target date is compared as midnight in the archive's own UTC offset
(the server's wall clock). An archive already set to the target date is
therefore never selected again, whichever way the baseline was given.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Optional

from coldstore.client import API_COLDSTORAGE, Code42Client
from coldstore.config import RunParameters
from coldstore.dump.pager import data_member, iter_pages
from coldstore.errors import ReadFailure

logger = logging.getLogger(__name__)

# Millisecond precision and a +HH:MM offset only; no "Z", no "+0700".
ARCHIVE_TIME_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}[+-]\d{2}:\d{2}")
ARCHIVE_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S.%f%z"


@dataclass(frozen=True)
class Archive:
    guid: str
    byte_size: int
    raw_expiration: str
    expiration: Optional[datetime]
    destination_id: int


@dataclass(frozen=True)
class Candidate:
    guid: str
    original_expiration: str
    destination_id: int


@dataclass
class SelectionResult:
    candidates: list = field(default_factory=list)
    malformed_count: int = 0
    missing_guid_count: int = 0
    archives_examined: int = 0
    archives_by_destination: dict = field(default_factory=dict)
    limit_reached: bool = False


def parse_code42_timestamp(value) -> Optional[datetime]:
    """Parse a Code42 timestamp such as 2016-07-01T00:00:00.000-07:00."""
    if not value or not isinstance(value, str):
        return None
    value = value.strip()
    if not ARCHIVE_TIME_PATTERN.fullmatch(value):
        return None
    try:
        return datetime.strptime(value, ARCHIVE_TIME_FORMAT)
    except ValueError:
        return None


def parse_archive(row: dict, destination_id: int) -> Archive:
    if not isinstance(row, dict):
        raise ReadFailure(f"Cold storage row in destination {destination_id} is not an object: {row!r}")
    raw_expiration = row.get("archiveHoldExpireDate") or ""
    try:
        byte_size = int(row.get("archiveBytes") or 0)
    except (TypeError, ValueError):
        byte_size = 0

    return Archive(
        guid=(row.get("archiveGuid") or "").strip(),
        byte_size=byte_size,
        raw_expiration=raw_expiration,
        expiration=parse_code42_timestamp(raw_expiration),
        destination_id=destination_id,
    )


def expires_after(expiration: datetime, target: date) -> bool:
    """True when expiration is strictly later than midnight of target, in expiration's own zone."""
    target_midnight = datetime.combine(target, time(0), tzinfo=expiration.tzinfo)
    return expiration > target_midnight


def iter_archives(client: Code42Client, destination_id: int):
    """Yield archives of one destination in page order."""
    pages = iter_pages(
        client,
        API_COLDSTORAGE,
        params={"destinationId": destination_id},
        items=data_member("coldStorageRows"),
    )
    for page in pages:
        for row in page:
            yield parse_archive(row, destination_id)


def select_candidates(client: Code42Client, destinations: list, params: RunParameters) -> SelectionResult:
    """Collect candidates across destinations in discovery order."""
    result = SelectionResult()
    target = params.target_expiration

    for destination in destinations:
        if params.item_limit is not None and result.archives_examined >= params.item_limit:
            result.limit_reached = True
            break

        logger.info("Retrieving list of cold storage archives from destination Id: %s", destination.id)
        examined_here = 0

        for archive in iter_archives(client, destination.id):
            if params.item_limit is not None and result.archives_examined >= params.item_limit:
                result.limit_reached = True
                break

            result.archives_examined += 1
            examined_here += 1

            if not archive.guid:
                logger.warning("Archive without a GUID in destination %s. Skipping.", destination.id)
                result.missing_guid_count += 1
                continue

            if not params.select_all:
                if archive.expiration is None:
                    logger.warning(
                        "Expiration date missing or malformed for archive %s: %r. Skipping.",
                        archive.guid,
                        archive.raw_expiration,
                    )
                    result.malformed_count += 1
                    continue
                if not expires_after(archive.expiration, target):
                    continue

            result.candidates.append(
                Candidate(
                    guid=archive.guid,
                    original_expiration=archive.raw_expiration,
                    destination_id=destination.id,
                )
            )

        result.archives_by_destination[destination.id] = examined_here
        logger.info("Destination %s: %d archives examined.", destination.id, examined_here)

        if result.limit_reached:
            break

    if result.limit_reached:
        logger.info("Item limit of %d reached; remaining archives were not examined.", params.item_limit)
    if not params.select_all:
        logger.info(
            "%d archives had a null or malformed expiration date. See log for archive GUIDs.",
            result.malformed_count,
        )
    logger.info("%d archives selected for a new purge date.", len(result.candidates))
    return result
