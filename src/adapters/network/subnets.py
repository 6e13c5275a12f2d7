"""Subredes (Networking API)."""

from __future__ import annotations

from typing import Sequence

from adapters.network import api
from adapters.network.networks import Network
from core.domain import network as protocol
from core.pagination import ResourceQuery
from core.query import Query
from core.refs import ResourceRef
from core.resources import InnerField, Resource
from core.session import Session


class Subnet(Resource[protocol.Subnet]):
    """Una subred IPv4/IPv6 dentro de una red."""

    name = InnerField("Subnet name.")
    description = InnerField("Subnet description.")
    network_id = InnerField("ID of the network this subnet belongs to.")
    cidr = InnerField("CIDR of the subnet.")
    ip_version = InnerField("IP protocol version.")
    gateway_ip = InnerField("Gateway IP address (if any).")
    enable_dhcp = InnerField("Whether DHCP is enabled.")
    dns_nameservers = InnerField("DNS name servers.")
    allocation_pools = InnerField("Allocation pools for IP addresses.")
    host_routes = InnerField("Additional host routes.")
    ipv6_address_mode = InnerField("IPv6 address mode (if applicable).")
    ipv6_ra_mode = InnerField("IPv6 router advertisement mode (if applicable).")
    project_id = InnerField("Owning project.")
    created_at = InnerField("Creation date and time (if available).")
    updated_at = InnerField("Last update date and time (if available).")

    @classmethod
    def load(cls, session: Session, id_or_name: str) -> "Subnet":
        return cls(session, api.get_subnet(session, id_or_name))

    def _fetch(self) -> protocol.Subnet:
        return api.get_subnet(self._session, self._inner.id)

    def network(self) -> Network:
        return Network.load(self._session, self._inner.network_id)

    def to_ref(self) -> ResourceRef:
        return ResourceRef.from_id(self._inner.id)


class SubnetQuery(ResourceQuery[Subnet]):
    """Consulta de subredes."""

    def __init__(self, session: Session) -> None:
        super().__init__(session)
        self._network: ResourceRef | None = None

    def _fetch_page(self, query: Query) -> Sequence[Subnet]:
        return [Subnet(self._session, item) for item in api.list_subnets(self._session, query)]

    def _prepare(self) -> Query:
        if self._network is None:
            return self._query
        network_id = self._network.resolve(lambda value: api.get_network(self._session, value).id)
        return self._query.copy().push("network_id", network_id)

    def with_name(self, value: str) -> "SubnetQuery":
        return self._filter("name", value)

    def with_cidr(self, value: str) -> "SubnetQuery":
        return self._filter("cidr", value)

    def with_ip_version(self, value: protocol.IpVersion) -> "SubnetQuery":
        return self._filter("ip_version", value)

    def with_enable_dhcp(self, value: bool) -> "SubnetQuery":
        return self._filter("enable_dhcp", value)

    def with_network(self, value: object) -> "SubnetQuery":
        """Filtra por red (nombre, ID o `Network`); el nombre se resuelve al iterar."""

        self._network = ResourceRef.coerce(value)
        return self
