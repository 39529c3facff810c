from __future__ import annotations

import pytest

from conftest import FakeResponse, FakeSession, paged
from coldstore.dump.pager import data_member, iter_pages
from coldstore.errors import ReadFailure


def test_pages_until_empty_page(make_client) -> None:
    pages = [[{"n": 1}, {"n": 2}], [{"n": 3}, {"n": 4}], [{"n": 5}]]
    session = FakeSession({"/api/Things": paged(pages)})
    client = make_client(session)

    result = list(iter_pages(client, "/api/Things", {"kind": "x"}))

    assert result == pages
    assert len(session.get_calls) == len(pages) + 1
    assert [params["pgNum"] for _, params in session.get_calls] == [1, 2, 3, 4]
    assert all(params["kind"] == "x" for _, params in session.get_calls)


def test_empty_first_page_yields_nothing(make_client) -> None:
    session = FakeSession({"/api/Things": paged([])})

    assert list(iter_pages(make_client(session), "/api/Things")) == []
    assert len(session.get_calls) == 1


def test_pages_are_fetched_lazily(make_client) -> None:
    session = FakeSession({"/api/Things": paged([[{"n": 1}], [{"n": 2}], [{"n": 3}]])})
    pages = iter_pages(make_client(session), "/api/Things")

    assert next(pages) == [{"n": 1}]
    assert len(session.get_calls) == 1


def test_page_size_and_nested_member(make_client) -> None:
    session = FakeSession({"/api/ColdStorage": paged([[{"a": 1}]], "coldStorageRows")})

    result = list(iter_pages(make_client(session), "/api/ColdStorage",
                             items=data_member("coldStorageRows"), page_size=100))

    assert result == [[{"a": 1}]]
    assert session.get_calls[0][1] == {"pgSize": 100, "pgNum": 1}


def test_read_failure_mid_paging_propagates(make_client) -> None:
    def route(params):
        if params["pgNum"] == 2:
            return FakeResponse(content=b"not json")
        return {"data": [{"n": 1}]}

    session = FakeSession({"/api/Things": route})

    with pytest.raises(ReadFailure):
        list(iter_pages(make_client(session), "/api/Things"))


@pytest.mark.parametrize(
    "document",
    [
        {"data": ["not-an-object"]},
        {"data": {"rows": 3}},
        {"data": [{"ok": 1}, 7]},
    ],
)
def test_rows_that_are_not_objects_are_read_failures(make_client, document) -> None:
    session = FakeSession({"/api/Things": document})

    with pytest.raises(ReadFailure, match="Expected"):
        list(iter_pages(make_client(session), "/api/Things"))


def test_nested_member_requires_data_object(make_client) -> None:
    session = FakeSession({"/api/ColdStorage": {"data": [{"archiveGuid": "a"}]}})

    with pytest.raises(ReadFailure, match="object under 'data'"):
        list(iter_pages(make_client(session), "/api/ColdStorage", items=data_member("coldStorageRows")))
