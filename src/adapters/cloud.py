"""Punto de entrada de alto nivel.

Por qué una fachada:
- Un único objeto para la CLI y los scripts: construye la sesión desde la
  configuración y expone consultas/cargas por tipo de recurso.
"""

from __future__ import annotations

from typing import Any, Optional

from adapters.http_client import HttpxExecutor
from adapters.network import (
    FloatingIp,
    FloatingIpQuery,
    Network,
    NetworkQuery,
    NewPort,
    Port,
    PortQuery,
    Subnet,
    SubnetQuery,
)
from core.config import AppSettings
from core.domain.models import ServiceInfo
from core.domain.versions import ApiVersion, ApiVersionRequest
from core.session import NETWORK, ServiceType, Session


class Cloud:
    """Conexión a una nube: sesión + atajos por recurso."""

    def __init__(self, session: Session) -> None:
        self._session = session

    @classmethod
    def from_settings(cls, settings: Optional[AppSettings] = None) -> "Cloud":
        settings = settings or AppSettings()
        executor = HttpxExecutor.from_settings(settings)
        return cls(Session(executor, settings.endpoints, page_size=settings.page_size))

    @property
    def session(self) -> Session:
        return self._session

    def service_info(self, service: ServiceType = NETWORK) -> ServiceInfo:
        return self._session.get_service_info(service)

    def set_api_version(self, service: ServiceType, request: ApiVersionRequest) -> ApiVersion:
        return self._session.set_api_version(service, request)

    def find_networks(self) -> NetworkQuery:
        return NetworkQuery(self._session)

    def find_ports(self) -> PortQuery:
        return PortQuery(self._session)

    def find_subnets(self) -> SubnetQuery:
        return SubnetQuery(self._session)

    def find_floating_ips(self) -> FloatingIpQuery:
        return FloatingIpQuery(self._session)

    def list_networks(self) -> list[Network]:
        return self.find_networks().all()

    def list_ports(self) -> list[Port]:
        return self.find_ports().all()

    def list_subnets(self) -> list[Subnet]:
        return self.find_subnets().all()

    def list_floating_ips(self) -> list[FloatingIp]:
        return self.find_floating_ips().all()

    def get_network(self, id_or_name: str) -> Network:
        return Network.load(self._session, id_or_name)

    def get_port(self, id_or_name: str) -> Port:
        return Port.load(self._session, id_or_name)

    def get_subnet(self, id_or_name: str) -> Subnet:
        return Subnet.load(self._session, id_or_name)

    def get_floating_ip(self, floating_ip_id: str) -> FloatingIp:
        return FloatingIp.load(self._session, floating_ip_id)

    def new_port(self, network: Any) -> NewPort:
        """Prepara un puerto nuevo; `network` puede ser nombre, ID o `Network`."""

        return NewPort(self._session, network)

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "Cloud":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
