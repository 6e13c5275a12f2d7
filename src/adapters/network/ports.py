"""Puertos (NICs virtuales) del Networking API.

Por qué este módulo es el más grande:
- El puerto es el recurso de red actualizable: combina seguimiento de cambios
  (`save`), referencias diferidas (`NewPort.create`) y consultas paginadas.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from ipaddress import IPv4Address, IPv6Address
from typing import Any, Optional, Sequence, Union

from pydantic_core import to_jsonable_python

from adapters.network import api
from adapters.network.networks import Network
from adapters.network.subnets import Subnet
from core.domain import network as protocol
from core.pagination import ResourceQuery
from core.query import Query
from core.refs import ResourceRef
from core.resources import InnerField
from core.session import Session
from core.tracking import MutableResource, PatchDocument, TrackedField

logger = logging.getLogger(__name__)

IpAddress = Union[IPv4Address, IPv6Address]


def _network_lookup(session: Session):
    return lambda value: api.get_network(session, value).id


def _subnet_lookup(session: Session):
    return lambda value: api.get_subnet(session, value).id


@dataclass
class PortIpAddress:
    """Una IP fija de un puerto."""

    ip_address: IpAddress
    subnet_id: str
    session: Session = field(repr=False, compare=False)

    def subnet(self) -> Subnet:
        """Subred a la que pertenece esta IP."""

        return Subnet.load(self.session, self.subnet_id)


@dataclass(frozen=True)
class PortIpRequest:
    """Petición de IP fija para un puerto nuevo.

    Tres formas: una IP concreta de cualquier subred, cualquier IP de una
    subred, o una IP concreta de una subred.
    """

    ip_address: Optional[str] = None
    subnet: Optional[ResourceRef] = None

    @classmethod
    def ip(cls, address: Union[str, IpAddress]) -> "PortIpRequest":
        return cls(ip_address=str(address))

    @classmethod
    def any_from_subnet(cls, subnet: Any) -> "PortIpRequest":
        return cls(subnet=ResourceRef.coerce(subnet))

    @classmethod
    def from_subnet(cls, address: Union[str, IpAddress], subnet: Any) -> "PortIpRequest":
        return cls(ip_address=str(address), subnet=ResourceRef.coerce(subnet))

    def to_body(self, session: Session) -> dict[str, str]:
        body: dict[str, str] = {}
        if self.ip_address is not None:
            body["ip_address"] = self.ip_address
        if self.subnet is not None:
            body["subnet_id"] = self.subnet.resolve(_subnet_lookup(session))
        return body


class Port(MutableResource[protocol.Port]):
    """Un puerto: NIC virtual conectada a una red."""

    admin_state_up = TrackedField("The administrative state of the port.")
    description = TrackedField("Port description.")
    device_id = TrackedField("ID of object (server, router, etc) to which this port is attached.")
    device_owner = TrackedField("Type of object to which this port is attached.")
    dns_domain = TrackedField("DNS domain for the port (if available).")
    dns_name = TrackedField("DNS name for the port (if available).")
    extra_dhcp_opts = TrackedField("DHCP options configured for this port.")
    mac_address = TrackedField("MAC address of the port (updating it is admin-only).")
    name = TrackedField("Port name.")

    network_id = InnerField("ID of the network this port belongs to.")
    status = InnerField("Port status.")
    security_groups = InnerField("IDs of the security groups of the port.")
    project_id = InnerField("Owning project.")
    created_at = InnerField("Creation date and time (if available).")
    updated_at = InnerField("Last update date and time (if available).")

    @classmethod
    def load(cls, session: Session, id_or_name: str) -> "Port":
        return cls(session, api.get_port(session, id_or_name))

    def extra_dhcp_opts_mut(self) -> list[protocol.PortExtraDhcpOption]:
        """Lista editable de opciones DHCP; `save()` envía la lista completa."""

        return self.field_mut("extra_dhcp_opts")

    @property
    def fixed_ips(self) -> list[PortIpAddress]:
        """IPs fijas del puerto."""

        return [
            PortIpAddress(ip_address=ip.ip_address, subnet_id=ip.subnet_id, session=self._session)
            for ip in self._inner.fixed_ips
        ]

    def attached_to_server(self) -> bool:
        """True si `device_owner` es un servidor de Compute."""

        owner = self._inner.device_owner
        return owner is not None and owner.startswith("compute:")

    def network(self) -> Network:
        return Network.load(self._session, self._inner.network_id)

    def to_ref(self) -> ResourceRef:
        return ResourceRef.from_id(self._inner.id)

    def _fetch(self) -> protocol.Port:
        return api.get_port(self._session, self._inner.id)

    def _send_patch(self, patch: PatchDocument) -> protocol.Port:
        return api.update_port(self._session, self._inner.id, patch.to_body())

    def delete(self) -> None:
        """Borra el puerto.

        No espera a que el servidor termine de borrarlo: quien lo necesite
        puede consultar `Port.load` hasta obtener `ResourceNotFound`.
        """

        logger.debug("Deleting port %s", self._inner.id)
        api.delete_port(self._session, self._inner.id)


class PortQuery(ResourceQuery[Port]):
    """Consulta de puertos."""

    def __init__(self, session: Session) -> None:
        super().__init__(session)
        self._network: Optional[ResourceRef] = None

    def _fetch_page(self, query: Query) -> Sequence[Port]:
        return [Port(self._session, item) for item in api.list_ports(self._session, query)]

    def _prepare(self) -> Query:
        if self._network is None:
            return self._query
        network_id = self._network.resolve(_network_lookup(self._session))
        return self._query.copy().push("network_id", network_id)

    def with_admin_state_up(self, value: bool) -> "PortQuery":
        return self._filter("admin_state_up", value)

    def with_description(self, value: str) -> "PortQuery":
        return self._filter("description", value)

    def with_device_id(self, value: str) -> "PortQuery":
        return self._filter("device_id", value)

    def with_device_owner(self, value: str) -> "PortQuery":
        return self._filter("device_owner", value)

    def with_mac_address(self, value: str) -> "PortQuery":
        return self._filter("mac_address", value)

    def with_name(self, value: str) -> "PortQuery":
        return self._filter("name", value)

    def with_status(self, value: protocol.NetworkStatus) -> "PortQuery":
        return self._filter("status", value)

    def with_network(self, value: Any) -> "PortQuery":
        """Filtra por red (nombre, ID o `Network`); el nombre se resuelve al iterar."""

        self._network = ResourceRef.coerce(value)
        return self


class NewPort:
    """Petición de creación de un puerto.

    La red y las subredes pueden darse por nombre o ID: se verifican en
    `create()`, no antes.
    """

    def __init__(self, session: Session, network: Any) -> None:
        self._session = session
        self._network = ResourceRef.coerce(network)
        self._fields: dict[str, Any] = {"admin_state_up": True}
        self._fixed_ips: list[PortIpRequest] = []

    @property
    def network(self) -> ResourceRef:
        return self._network

    def _set(self, name: str, value: Any) -> "NewPort":
        self._fields[name] = value
        return self

    def with_admin_state_up(self, value: bool) -> "NewPort":
        return self._set("admin_state_up", value)

    def with_description(self, value: str) -> "NewPort":
        return self._set("description", value)

    def with_device_id(self, value: str) -> "NewPort":
        return self._set("device_id", value)

    def with_device_owner(self, value: str) -> "NewPort":
        return self._set("device_owner", value)

    def with_dns_domain(self, value: str) -> "NewPort":
        return self._set("dns_domain", value)

    def with_dns_name(self, value: str) -> "NewPort":
        return self._set("dns_name", value)

    def with_extra_dhcp_opts(self, value: list[protocol.PortExtraDhcpOption]) -> "NewPort":
        return self._set("extra_dhcp_opts", [protocol.PortExtraDhcpOption.model_validate(v) for v in value])

    def with_mac_address(self, value: str) -> "NewPort":
        return self._set("mac_address", value)

    def with_name(self, value: str) -> "NewPort":
        return self._set("name", value)

    def add_fixed_ip(self, request: PortIpRequest) -> None:
        self._fixed_ips.append(request)

    def with_fixed_ip(self, request: PortIpRequest) -> "NewPort":
        self.add_fixed_ip(request)
        return self

    def build_body(self) -> dict[str, Any]:
        """Resuelve las referencias y arma el cuerpo de creación."""

        body: dict[str, Any] = to_jsonable_python(self._fields)
        body["network_id"] = self._network.resolve(_network_lookup(self._session))
        if self._fixed_ips:
            body["fixed_ips"] = [request.to_body(self._session) for request in self._fixed_ips]
        return body

    def create(self) -> Port:
        """Pide la creación del puerto."""

        body = self.build_body()
        logger.debug("Creating port in network %s", body["network_id"])
        return Port(self._session, api.create_port(self._session, body))
