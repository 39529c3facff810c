"""
Destination enumeration.

The Destination resource reports coldBytes as a string for PROVIDER
destinations and as a number for every other type. The value is normalized
to a non-negative int here and the raw wire value goes no further.
"""

import logging
from dataclasses import dataclass
from typing import Any

from coldstore.client import API_DESTINATION, Code42Client
from coldstore.dump.pager import data_object, require_rows
from coldstore.errors import ReadFailure

logger = logging.getLogger(__name__)

PROVIDER = "PROVIDER"
CLUSTER = "CLUSTER"


@dataclass(frozen=True)
class Destination:
    id: int
    guid: str
    name: str
    kind: str
    cold_bytes: int


def normalize_cold_bytes(kind: str, value: Any) -> int:
    """Convert a coldBytes wire value to a non-negative int."""
    if kind == PROVIDER:
        if not isinstance(value, str):
            return 0
        try:
            converted = int(value.strip())
        except ValueError:
            return 0
    else:
        # bool is an int subclass but never a byte count
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return 0
        converted = int(value)

    return max(converted, 0)


def parse_destination(row: dict) -> Destination:
    if not isinstance(row, dict):
        raise ReadFailure(f"Destination record is not an object: {row!r}")
    kind = row.get("type") or ""
    try:
        destination_id = int(row["destinationId"])
    except (KeyError, TypeError, ValueError) as e:
        raise ReadFailure(f"Destination record without a usable destinationId: {row!r}") from e

    return Destination(
        id=destination_id,
        guid=row.get("guid") or "",
        name=row.get("destinationName") or "",
        kind=kind,
        cold_bytes=normalize_cold_bytes(kind, row.get("coldBytes")),
    )


def list_destinations(client: Code42Client, skip_zero_cold_bytes: bool = False) -> list:
    """Fetch all destinations, optionally dropping those reporting zero cold bytes.

    Reported cold bytes are not reliable (destinations with archives in cold
    storage sometimes report zero), so every destination is kept by default.
    """
    document = client.get_json(API_DESTINATION)
    rows = require_rows(data_object(document).get("destinations"), "data.destinations")

    destinations = []
    for row in rows:
        destination = parse_destination(row)
        if skip_zero_cold_bytes:
            logger.info("Destination %s cold bytes= %s", destination.id, destination.cold_bytes)
            if destination.cold_bytes == 0:
                continue
        destinations.append(destination)

    logger.info("%d destinations have archives in cold storage.", len(destinations))
    return destinations
