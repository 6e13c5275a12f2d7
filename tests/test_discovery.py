from __future__ import annotations

import pytest

from conftest import FakeExecutor, version_document
from core.domain.versions import ApiVersion
from core.errors import EndpointNotFound, HttpError, InvalidResponse
from core.services.discovery import fetch_service_info


def test_single_version_document():
    executor = FakeExecutor()
    executor.add(
        "GET",
        "https://cloud.test/compute/v2.1",
        200,
        {"version": version_document("https://cloud.test/compute/v2.1/", id="v2.1", version="2.79", min_version="2.1")},
    )

    info = fetch_service_info("https://cloud.test/compute/v2.1", executor, "compute", "v2.1")

    assert info.root_url == "https://cloud.test/compute/v2.1/"
    assert info.current_version == ApiVersion(2, 79)
    assert info.minimum_version == ApiVersion(2, 1)
    assert len(executor.calls) == 1


def test_collection_picks_major_version_and_treats_empty_versions_as_absent():
    executor = FakeExecutor()
    executor.add(
        "GET",
        "http://cloud.test:9696/",
        200,
        {
            "versions": [
                version_document("http://cloud.test:9696/v1.0/", id="v1.0"),
                version_document("http://cloud.test:9696/v2.0/", id="v2.0", version="", min_version=""),
            ]
        },
    )

    info = fetch_service_info("http://cloud.test:9696/", executor, "network", "v2.0")

    assert info.root_url == "http://cloud.test:9696/v2.0/"
    assert info.current_version is None
    assert info.minimum_version is None


def test_collection_without_requested_major_version():
    executor = FakeExecutor()
    executor.add("GET", "https://cloud.test/", 200, {"versions": [version_document("https://cloud.test/v1/", id="v1.0")]})

    with pytest.raises(EndpointNotFound):
        fetch_service_info("https://cloud.test/", executor, "network", "v2.0")


def test_missing_self_link_is_fatal_and_not_retried():
    executor = FakeExecutor()
    document = version_document("https://cloud.test/v2/")
    document["links"] = [{"href": "https://docs.test/", "rel": "describedby"}]
    executor.add("GET", "https://cloud.test/v2/x", 200, {"version": document})

    with pytest.raises(InvalidResponse):
        fetch_service_info("https://cloud.test/v2/x", executor, "compute", "v2.1")
    assert len(executor.calls) == 1


def test_walks_up_the_path_on_not_found():
    executor = FakeExecutor()
    executor.add("GET", "https://cloud.test/v2/x/y", 404)
    executor.add("GET", "https://cloud.test/v2/x/", 404)
    executor.add(
        "GET",
        "https://cloud.test/v2/",
        200,
        {"version": version_document("https://cloud.test/v2/", id="v2.1", version="2.24", min_version="2.1")},
    )

    info = fetch_service_info("https://cloud.test/v2/x/y", executor, "compute", "v2.1")

    assert info.current_version == ApiVersion(2, 24)
    assert [c.url for c in executor.calls] == [
        "https://cloud.test/v2/x/y",
        "https://cloud.test/v2/x/",
        "https://cloud.test/v2/",
    ]


def test_not_found_up_to_the_root():
    executor = FakeExecutor()

    with pytest.raises(EndpointNotFound) as excinfo:
        fetch_service_info("https://cloud.test/v2/x", executor, "compute", "v2.1")

    assert excinfo.value.service_type == "compute"
    assert [c.url for c in executor.calls] == [
        "https://cloud.test/v2/x",
        "https://cloud.test/v2/",
        "https://cloud.test/",
    ]


def test_other_errors_are_not_retried():
    executor = FakeExecutor()
    executor.add("GET", "https://cloud.test/v2/x", 503, {"message": "maintenance"})

    with pytest.raises(HttpError) as excinfo:
        fetch_service_info("https://cloud.test/v2/x", executor, "compute", "v2.1")

    assert excinfo.value.status_code == 503
    assert len(executor.calls) == 1


def test_secure_endpoint_forces_secure_root_url():
    executor = FakeExecutor()
    executor.add(
        "GET",
        "https://cloud.test:8774/",
        200,
        {"versions": [version_document("http://cloud.test:8774/v2.1/", id="v2.1", version="2.60", min_version="2.1")]},
    )

    info = fetch_service_info("https://cloud.test:8774/", executor, "compute", "v2.1")

    assert info.root_url == "https://cloud.test:8774/v2.1/"


def test_insecure_endpoint_keeps_reported_scheme():
    executor = FakeExecutor()
    executor.add("GET", "http://cloud.test:9696/", 200, {"versions": [version_document("http://cloud.test:9696/v2.0/")]})

    info = fetch_service_info("http://cloud.test:9696/", executor, "network", "v2.0")

    assert info.root_url.startswith("http://")


def test_unexpected_document_shape():
    executor = FakeExecutor()
    executor.add("GET", "https://cloud.test/", 200, {"something": "else"})

    with pytest.raises(InvalidResponse):
        fetch_service_info("https://cloud.test/", executor, "network", "v2.0")
