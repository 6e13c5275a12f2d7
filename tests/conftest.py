from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

import pytest

from core.interfaces.executor import RawResponse
from core.session import Session

NETWORK_ENDPOINT = "https://cloud.test:9696/"
NETWORK_ROOT = "https://cloud.test:9696/v2.0/"

Handler = Callable[[list[tuple[str, str]], Any], RawResponse]


@dataclass
class Call:
    method: str
    url: str
    query: list[tuple[str, str]]
    body: Any = None
    headers: dict[str, str] = field(default_factory=dict)


class FakeExecutor:
    """In-memory executor: scripted responses per (method, url), recorded calls."""

    def __init__(self) -> None:
        self.calls: list[Call] = []
        self._routes: dict[tuple[str, str], list[Union[RawResponse, Handler]]] = {}

    def add(self, method: str, url: str, status: int = 200, body: Any = None) -> None:
        self._routes.setdefault((method, url), []).append(RawResponse(status, body))

    def replace(self, method: str, url: str, status: int = 200, body: Any = None) -> None:
        self._routes[(method, url)] = [RawResponse(status, body)]

    def add_handler(self, method: str, url: str, handler: Handler) -> None:
        self._routes.setdefault((method, url), []).append(handler)

    def send(self, method, url, query=(), json_body=None, headers=None) -> RawResponse:
        query = list(query)
        self.calls.append(Call(method, url, query, json_body, dict(headers or {})))
        queue = self._routes.get((method, url))
        if not queue:
            return RawResponse(404, {"NeutronError": {"message": f"{url} not found"}})
        # The last scripted response stays; earlier ones are consumed in order.
        entry = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(entry, RawResponse):
            return entry
        return entry(query, json_body)

    def calls_to(self, method: str, url: str) -> list[Call]:
        return [c for c in self.calls if c.method == method and c.url == url]


def version_document(
    href: str,
    *,
    id: str = "v2.0",
    version: Optional[str] = "",
    min_version: Optional[str] = "",
) -> dict[str, Any]:
    return {
        "id": id,
        "status": "CURRENT",
        "links": [{"href": href, "rel": "self"}],
        "version": version,
        "min_version": min_version,
    }


def port_record(port_id: str = "port-1", **overrides: Any) -> dict[str, Any]:
    record = {
        "id": port_id,
        "network_id": "net-1",
        "name": "port-name",
        "description": "",
        "admin_state_up": True,
        "device_id": "",
        "device_owner": "",
        "dns_domain": "",
        "dns_name": "",
        "extra_dhcp_opts": [],
        "fixed_ips": [{"ip_address": "10.0.0.5", "subnet_id": "subnet-1"}],
        "mac_address": "FA:16:3E:00:00:01",
        "security_groups": ["default"],
        "status": "ACTIVE",
        "project_id": "project-1",
        "created_at": "2024-01-02T03:04:05Z",
        "updated_at": "2024-01-02T03:04:05Z",
    }
    record.update(overrides)
    return record


def network_record(network_id: str = "net-1", **overrides: Any) -> dict[str, Any]:
    record = {
        "id": network_id,
        "name": "private",
        "admin_state_up": True,
        "router:external": False,
        "shared": False,
        "mtu": 1450,
        "status": "ACTIVE",
        "subnets": ["subnet-1"],
        "project_id": "project-1",
    }
    record.update(overrides)
    return record


def subnet_record(subnet_id: str = "subnet-1", **overrides: Any) -> dict[str, Any]:
    record = {
        "id": subnet_id,
        "name": "private-subnet",
        "network_id": "net-1",
        "cidr": "10.0.0.0/24",
        "ip_version": 4,
        "gateway_ip": "10.0.0.1",
        "enable_dhcp": True,
        "allocation_pools": [{"start": "10.0.0.2", "end": "10.0.0.254"}],
        "ipv6_address_mode": None,
        "ipv6_ra_mode": "",
    }
    record.update(overrides)
    return record


@pytest.fixture
def executor() -> FakeExecutor:
    fake = FakeExecutor()
    fake.add("GET", NETWORK_ENDPOINT, 200, {"versions": [version_document(NETWORK_ROOT)]})
    return fake


@pytest.fixture
def session(executor: FakeExecutor) -> Session:
    return Session(executor, {"network": NETWORK_ENDPOINT})
