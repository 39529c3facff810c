from __future__ import annotations

import json
import logging

import pytest
import requests

from coldstore.client import Code42Client

BASE_URL = "https://master.example.com:4285"


class FakeResponse:
    def __init__(self, document=None, status_code: int = 200, content: bytes | None = None):
        self.status_code = status_code
        if content is None:
            content = json.dumps(document).encode("utf-8")
        self.content = content

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")


class FakeSession:
    """Stands in for requests.Session; routes GETs by path and records every call."""

    def __init__(self, routes: dict | None = None, put_status: dict | None = None, put_errors=()):
        self.routes = routes or {}
        self.put_status = put_status or {}
        self.put_errors = set(put_errors)
        self.get_calls = []
        self.put_calls = []
        self.auth = None
        self.verify = True

    def _path(self, url: str) -> str:
        assert url.startswith(BASE_URL), url
        return url[len(BASE_URL):]

    def get(self, url, params=None):
        path = self._path(url)
        self.get_calls.append((path, dict(params or {})))
        route = self.routes.get(path)
        if route is None:
            return FakeResponse({"error": "not found"}, status_code=404)
        result = route(dict(params or {})) if callable(route) else route
        if isinstance(result, FakeResponse):
            return result
        return FakeResponse(result)

    def put(self, url, params=None, json=None):
        path = self._path(url)
        self.put_calls.append((path, dict(params or {}), json))
        guid = path.rsplit("/", 1)[-1]
        if guid in self.put_errors:
            raise requests.ConnectionError("connection reset")
        return FakeResponse({}, status_code=self.put_status.get(guid, 200))


def paged(pages: list, member: str | None = None):
    """Route serving pages[pgNum - 1], then empty pages."""

    def route(params):
        index = int(params["pgNum"]) - 1
        rows = pages[index] if index < len(pages) else []
        if member is None:
            return {"data": rows}
        return {"data": {member: rows}}

    return route


def cold_storage(pages_by_destination: dict):
    """Route for /api/ColdStorage keyed by destinationId."""

    def route(params):
        pages = pages_by_destination.get(int(params["destinationId"]), [])
        return paged(pages, "coldStorageRows")(params)

    return route


def archive(guid: str, expires: str | None, size: int = 1024) -> dict:
    return {"archiveGuid": guid, "archiveBytes": size, "archiveHoldExpireDate": expires}


@pytest.fixture
def make_client():
    def factory(session: FakeSession) -> Code42Client:
        return Code42Client(BASE_URL, "admin", "secret", session=session)

    return factory


@pytest.fixture
def restore_root_logging():
    """Undo configure_logging's changes to the root logger after a test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
