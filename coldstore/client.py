"""
Code42 API Client

Thin authenticated wrapper over the Code42 REST API used by the cold
storage and reporting tools.

Reads are fail-fast: any transport error, non-2xx status or undecodable
body raises ReadFailure, because every caller needs the complete data set.
Writes are fail-soft: put() reports success as a boolean and logs the key
of the record it tried to change.
"""

import json
import logging
from typing import Optional

import requests
import urllib3

from coldstore.errors import ReadFailure

logger = logging.getLogger(__name__)

# =============================================================================
# API RESOURCES
# =============================================================================

API_DESTINATION = "/api/Destination"
API_COLDSTORAGE = "/api/ColdStorage"
API_DEVICE_BACKUP_REPORT = "/api/DeviceBackupReport"
API_COMPUTER = "/api/Computer"
API_USER = "/api/User"


# =============================================================================
# CODE42 API CLIENT
# =============================================================================


class Code42Client:
    """Code42 API client for read and write operations."""

    def __init__(self, base_url: str, username: str, password: str, session: requests.Session = None):
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.session.auth = (username, password)
        # Master servers commonly run with self-signed certificates.
        self.session.verify = False
        urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def get(self, path: str, params: Optional[dict] = None) -> bytes:
        """GET a resource and return the raw body."""
        url = self._url(path)
        try:
            response = self.session.get(url, params=params)
        except requests.RequestException as e:
            raise ReadFailure(f"GET {path} failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise ReadFailure(f"API error {response.status_code} on GET {path}: {response.text}")

        return response.content

    def get_json(self, path: str, params: Optional[dict] = None) -> dict:
        """GET a resource and decode its JSON body."""
        contents = self.get(path, params)
        try:
            data = json.loads(contents)
        except ValueError as e:
            raise ReadFailure(f"Could not decode JSON from GET {path}: {e}") from e

        if not isinstance(data, dict):
            raise ReadFailure(f"Unexpected JSON document from GET {path}: {type(data).__name__}")
        return data

    def put(self, path: str, body: dict, key: str, params: Optional[dict] = None) -> bool:
        """PUT a JSON body. Returns False instead of raising on failure."""
        url = self._url(path)
        try:
            response = self.session.put(url, params=params, json=body)
        except requests.RequestException as e:
            logger.error("Error making PUT request for %s: %s", key, e)
            return False

        if not 200 <= response.status_code < 300:
            logger.error("PUT for %s returned %s: %s", key, response.status_code, response.text)
            return False

        return True
