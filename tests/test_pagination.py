from __future__ import annotations

import pytest

from adapters.network import PortQuery
from conftest import NETWORK_ROOT, port_record
from core.domain.network import PortSortKey
from core.errors import HttpError, ResourceNotFound, TooManyItems
from core.interfaces.executor import RawResponse
from core.query import Query, Sort
from core.pagination import ResourceIterator

PORTS_URL = NETWORK_ROOT + "ports"


def _paged_ports(ids):
    records = [port_record(port_id) for port_id in ids]

    def handler(query, body):
        params = dict(query)
        start = 0
        if "marker" in params:
            start = next(i for i, r in enumerate(records) if r["id"] == params["marker"]) + 1
        limit = int(params.get("limit", len(records)))
        return RawResponse(200, {"ports": records[start : start + limit]})

    return handler


def test_automatic_pagination_follows_markers(executor, session):
    executor.add_handler("GET", PORTS_URL, _paged_ports(["p1", "p2", "p3", "p4", "p5"]))
    session.page_size = 2

    ports = PortQuery(session).all()

    assert [p.id for p in ports] == ["p1", "p2", "p3", "p4", "p5"]
    assert [c.query for c in executor.calls_to("GET", PORTS_URL)] == [
        [("limit", "2")],
        [("limit", "2"), ("marker", "p2")],
        [("limit", "2"), ("marker", "p4")],
    ]


def test_full_last_page_needs_an_empty_page_to_finish(executor, session):
    executor.add_handler("GET", PORTS_URL, _paged_ports(["p1", "p2", "p3", "p4"]))
    session.page_size = 2

    assert len(PortQuery(session).all()) == 4
    assert len(executor.calls_to("GET", PORTS_URL)) == 3


def test_manual_limit_disables_pagination(executor, session):
    executor.add_handler("GET", PORTS_URL, _paged_ports(["p1", "p2", "p3", "p4", "p5"]))

    query = PortQuery(session).with_limit(3)
    ports = query.all()

    assert not query.can_paginate
    assert [p.id for p in ports] == ["p1", "p2", "p3"]
    (call,) = executor.calls_to("GET", PORTS_URL)
    assert call.query == [("limit", "3")]


def test_manual_marker_disables_pagination(executor, session):
    executor.add_handler("GET", PORTS_URL, _paged_ports(["p1", "p2", "p3"]))

    ports = PortQuery(session).with_marker("p1").all()

    assert [p.id for p in ports] == ["p2", "p3"]
    (call,) = executor.calls_to("GET", PORTS_URL)
    assert call.query == [("marker", "p1")]


def test_one_with_no_results(executor, session):
    executor.add("GET", PORTS_URL, 200, {"ports": []})

    with pytest.raises(ResourceNotFound):
        PortQuery(session).with_name("missing").one()


def test_one_with_two_results_makes_a_single_small_request(executor, session):
    executor.add_handler("GET", PORTS_URL, _paged_ports(["p1", "p2", "p3"]))

    with pytest.raises(TooManyItems):
        PortQuery(session).with_device_id("server-1").one()

    (call,) = executor.calls_to("GET", PORTS_URL)
    assert call.query == [("device_id", "server-1"), ("limit", "2")]


def test_one_with_exactly_one_result(executor, session):
    executor.add("GET", PORTS_URL, 200, {"ports": [port_record("p1")]})

    assert PortQuery(session).with_name("port-name").one().id == "p1"


def test_first(executor, session):
    executor.add_handler("GET", PORTS_URL, _paged_ports(["p1", "p2"]))

    assert PortQuery(session).first().id == "p1"
    assert len(executor.calls_to("GET", PORTS_URL)) == 1

    assert ResourceIterator(lambda query: [], Query()).first() is None


def test_collect_all_raises_when_a_page_fails(executor, session):
    executor.add("GET", PORTS_URL, 200, {"ports": [port_record("p1"), port_record("p2")]})
    executor.add("GET", PORTS_URL, 500, {"NeutronError": {"message": "boom"}})
    session.page_size = 2

    with pytest.raises(HttpError):
        PortQuery(session).all()


def test_no_request_until_iteration(executor, session):
    executor.add_handler("GET", PORTS_URL, _paged_ports(["p1"]))

    iterator = PortQuery(session).with_name("x").into_iter()

    assert executor.calls_to("GET", PORTS_URL) == []
    assert [p.id for p in iterator] == ["p1"]
    assert iterator.exhausted


def test_query_parameters_keep_insertion_order(executor, session):
    executor.add("GET", PORTS_URL, 200, {"ports": []})

    (
        PortQuery(session)
        .with_name("web")
        .with_admin_state_up(True)
        .sort_by(Sort.desc(PortSortKey.NAME))
        .all()
    )

    (call,) = executor.calls_to("GET", PORTS_URL)
    assert call.query == [
        ("name", "web"),
        ("admin_state_up", "true"),
        ("sort_key", "name"),
        ("sort_dir", "desc"),
        ("limit", "50"),
    ]


def test_iterator_rejects_non_positive_page_size():
    with pytest.raises(ValueError):
        ResourceIterator(lambda query: [], page_size=0)
