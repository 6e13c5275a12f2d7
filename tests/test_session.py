from __future__ import annotations

import pytest

from conftest import NETWORK_ENDPOINT, NETWORK_ROOT, FakeExecutor, version_document
from core.domain.versions import ApiVersion, Exact, Latest, Minimum
from core.errors import EndpointNotFound, HttpError, IncompatibleApiVersion, ResourceNotFound
from core.session import COMPUTE, NETWORK, Session

COMPUTE_ENDPOINT = "https://cloud.test:8774/v2.1/project-1"
COMPUTE_ROOT = "https://cloud.test:8774/v2.1/"


@pytest.fixture
def compute_session() -> tuple[FakeExecutor, Session]:
    executor = FakeExecutor()
    executor.add(
        "GET",
        COMPUTE_ROOT,
        200,
        {"version": version_document(COMPUTE_ROOT, id="v2.1", version="2.79", min_version="2.1")},
    )
    return executor, Session(executor, {"compute": COMPUTE_ENDPOINT})


def test_service_info_is_cached(executor, session):
    first = session.get_service_info(NETWORK)
    second = session.get_service_info(NETWORK)

    assert first is second
    assert first.root_url == NETWORK_ROOT
    assert len(executor.calls_to("GET", NETWORK_ENDPOINT)) == 1


def test_missing_catalog_entry(session):
    with pytest.raises(EndpointNotFound) as excinfo:
        session.get_service_info(COMPUTE)

    assert excinfo.value.service_type == "compute"


def test_not_found_is_classified(session):
    with pytest.raises(ResourceNotFound) as excinfo:
        session.get_json(NETWORK, ["ports", "nope"])

    assert excinfo.value.status_code == 404


def test_other_failures_keep_status_and_body(executor, session):
    executor.add("DELETE", NETWORK_ROOT + "ports/port-1", 409, {"NeutronError": {"message": "in use"}})

    with pytest.raises(HttpError) as excinfo:
        session.delete(NETWORK, ["ports", "port-1"])

    assert excinfo.value.status_code == 409
    assert excinfo.value.body == {"NeutronError": {"message": "in use"}}
    assert "in use" in str(excinfo.value)


def test_path_segments_are_escaped(executor, session):
    executor.add("GET", NETWORK_ROOT + "ports/a%2Fb", 200, {"port": {}})

    assert session.get_json(NETWORK, ["ports", "a/b"]) == {"port": {}}


def test_negotiated_version_is_sent_as_header(compute_session):
    executor, session = compute_session
    executor.add("GET", COMPUTE_ROOT + "servers", 200, {"servers": []})

    assert session.set_api_version(COMPUTE, Latest()) == ApiVersion(2, 79)
    session.get_json(COMPUTE, ["servers"])

    (call,) = executor.calls_to("GET", COMPUTE_ROOT + "servers")
    assert call.headers == {"X-OpenStack-Nova-API-Version": "2.79"}
    assert session.api_version(COMPUTE) == ApiVersion(2, 79)


def test_discovery_walks_up_from_project_scoped_endpoint(compute_session):
    executor, session = compute_session

    info = session.get_service_info(COMPUTE)

    assert info.minimum_version == ApiVersion(2, 1)
    assert [c.url for c in executor.calls] == [COMPUTE_ENDPOINT, COMPUTE_ROOT]


def test_pick_api_version(compute_session):
    _, session = compute_session

    assert session.pick_api_version(COMPUTE, Minimum()) == ApiVersion(2, 1)
    assert session.pick_api_version(COMPUTE, Exact(ApiVersion(2, 80))) is None


def test_incompatible_api_version(session):
    with pytest.raises(IncompatibleApiVersion):
        session.set_api_version(NETWORK, Latest())

    assert session.api_version(NETWORK) is None
    assert session.service_headers(NETWORK) == {}
