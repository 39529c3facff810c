"""
Page-number pagination for Code42 collection resources.

Pages are requested with pgNum=1, 2, ... and the first page whose item list
is empty ends the sequence. The empty page is fetched but never yielded.

A decoded document whose `data` or rows do not have the shape the resource
promises is a ReadFailure, the same as a body that is not JSON.
"""

from typing import Callable, Iterator, Optional

from coldstore.client import Code42Client
from coldstore.errors import ReadFailure


def data_object(document: dict) -> dict:
    """The `data` member of a resource that returns an object."""
    data = document.get("data") or {}
    if not isinstance(data, dict):
        raise ReadFailure(f"Expected an object under 'data', got {type(data).__name__}")
    return data


def require_rows(rows, where: str) -> list:
    """rows as a list of JSON objects; None counts as empty."""
    if rows is None:
        return []
    if not isinstance(rows, list):
        raise ReadFailure(f"Expected a list under {where}, got {type(rows).__name__}")
    for row in rows:
        if not isinstance(row, dict):
            raise ReadFailure(f"Expected objects under {where}, got {type(row).__name__}: {row!r}")
    return rows


def data_list(document: dict) -> list:
    """Items of a resource whose `data` member is the list itself."""
    return require_rows(document.get("data"), "data")


def data_member(name: str) -> Callable[[dict], list]:
    """Items of a resource that nests its list under data.<name>."""

    def extract(document: dict) -> list:
        return require_rows(data_object(document).get(name), f"data.{name}")

    return extract


def iter_pages(
    client: Code42Client,
    resource: str,
    params: Optional[dict] = None,
    items: Callable[[dict], list] = data_list,
    page_size: Optional[int] = None,
) -> Iterator[list]:
    """Yield one list of items per page until an empty page is returned."""
    page = 1
    while True:
        query = dict(params or {})
        if page_size:
            query["pgSize"] = page_size
        query["pgNum"] = page

        page_items = items(client.get_json(resource, query))
        if not isinstance(page_items, list):
            raise ReadFailure(f"Expected a list of items from {resource} page {page}")
        if not page_items:
            return

        yield page_items
        page += 1
