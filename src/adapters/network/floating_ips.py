"""IPs flotantes (Networking API)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence

from adapters.network import api
from adapters.network.networks import Network
from core.domain import network as protocol
from core.pagination import ResourceQuery
from core.query import Query
from core.resources import InnerField, Resource
from core.session import Session

if TYPE_CHECKING:
    from adapters.network.ports import Port


class FloatingIp(Resource[protocol.FloatingIp]):
    """Una IP flotante."""

    description = InnerField("Floating IP description.")
    floating_ip_address = InnerField("Floating IP address (if allocated).")
    fixed_ip_address = InnerField("IP address of the port associated with the IP (if any).")
    floating_network_id = InnerField("ID of the network the IP is allocated from.")
    port_id = InnerField("ID of the associated port (if any).")
    router_id = InnerField("ID of the router (if any).")
    status = InnerField("Status of the floating IP.")
    dns_domain = InnerField("DNS domain for the floating IP (if available).")
    dns_name = InnerField("DNS name for the floating IP (if available).")
    project_id = InnerField("Owning project.")
    created_at = InnerField("Creation date and time (if available).")
    updated_at = InnerField("Last update date and time (if available).")

    @classmethod
    def load(cls, session: Session, floating_ip_id: str) -> "FloatingIp":
        return cls(session, api.get_floating_ip(session, floating_ip_id))

    def _fetch(self) -> protocol.FloatingIp:
        return api.get_floating_ip(self._session, self._inner.id)

    def is_associated(self) -> bool:
        return self._inner.port_id is not None

    def floating_network(self) -> Network:
        return Network.load(self._session, self._inner.floating_network_id)

    def port(self) -> Optional["Port"]:
        if self._inner.port_id is None:
            return None
        from adapters.network.ports import Port  # noqa: PLC0415

        return Port.load(self._session, self._inner.port_id)


class FloatingIpQuery(ResourceQuery[FloatingIp]):
    """Consulta de IPs flotantes."""

    def _fetch_page(self, query: Query) -> Sequence[FloatingIp]:
        return [FloatingIp(self._session, item) for item in api.list_floating_ips(self._session, query)]

    def with_floating_ip_address(self, value: str) -> "FloatingIpQuery":
        return self._filter("floating_ip_address", value)

    def with_fixed_ip_address(self, value: str) -> "FloatingIpQuery":
        return self._filter("fixed_ip_address", value)

    def with_floating_network_id(self, value: str) -> "FloatingIpQuery":
        return self._filter("floating_network_id", value)

    def with_port_id(self, value: str) -> "FloatingIpQuery":
        return self._filter("port_id", value)

    def with_router_id(self, value: str) -> "FloatingIpQuery":
        return self._filter("router_id", value)

    def with_status(self, value: protocol.FloatingIpStatus) -> "FloatingIpQuery":
        return self._filter("status", value)
