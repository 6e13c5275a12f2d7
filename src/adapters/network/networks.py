"""Redes (Networking API)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from adapters.network import api
from core.domain import network as protocol
from core.pagination import ResourceQuery
from core.query import Query
from core.refs import ResourceRef
from core.resources import InnerField, Resource
from core.session import Session

if TYPE_CHECKING:
    from adapters.network.subnets import Subnet


class Network(Resource[protocol.Network]):
    """Una red virtual."""

    name = InnerField("Network name.")
    description = InnerField("Network description.")
    admin_state_up = InnerField("The administrative state of the network.")
    external = InnerField("Whether the network is external (router:external).")
    shared = InnerField("Whether the network is shared between projects.")
    mtu = InnerField("MTU of the network (if known).")
    status = InnerField("Network status.")
    availability_zones = InnerField("Availability zones of the network.")
    dns_domain = InnerField("DNS domain (if available).")
    project_id = InnerField("Owning project.")
    created_at = InnerField("Creation date and time (if available).")
    updated_at = InnerField("Last update date and time (if available).")

    @classmethod
    def load(cls, session: Session, id_or_name: str) -> "Network":
        return cls(session, api.get_network(session, id_or_name))

    def _fetch(self) -> protocol.Network:
        return api.get_network(self._session, self._inner.id)

    @property
    def subnet_ids(self) -> list[str]:
        return list(self._inner.subnets)

    def subnets(self) -> list["Subnet"]:
        """Carga las subredes de esta red (una petición por subred)."""

        from adapters.network.subnets import Subnet  # noqa: PLC0415

        return [Subnet.load(self._session, subnet_id) for subnet_id in self._inner.subnets]

    def to_ref(self) -> ResourceRef:
        return ResourceRef.from_id(self._inner.id)


class NetworkQuery(ResourceQuery[Network]):
    """Consulta de redes."""

    def _fetch_page(self, query: Query) -> Sequence[Network]:
        return [Network(self._session, item) for item in api.list_networks(self._session, query)]

    def with_name(self, value: str) -> "NetworkQuery":
        return self._filter("name", value)

    def with_admin_state_up(self, value: bool) -> "NetworkQuery":
        return self._filter("admin_state_up", value)

    def with_external(self, value: bool) -> "NetworkQuery":
        return self._filter("router:external", value)

    def with_shared(self, value: bool) -> "NetworkQuery":
        return self._filter("shared", value)

    def with_status(self, value: protocol.NetworkStatus) -> "NetworkQuery":
        return self._filter("status", value)
