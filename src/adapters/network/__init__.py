"""Networking API (Neutron v2.0).

Por qué un paquete:
- Agrupa llamadas REST (`api`) y objetos de recurso por tipo.
"""

from adapters.network.floating_ips import FloatingIp, FloatingIpQuery
from adapters.network.networks import Network, NetworkQuery
from adapters.network.ports import NewPort, Port, PortIpAddress, PortIpRequest, PortQuery
from adapters.network.subnets import Subnet, SubnetQuery

__all__ = [
    "FloatingIp",
    "FloatingIpQuery",
    "Network",
    "NetworkQuery",
    "NewPort",
    "Port",
    "PortIpAddress",
    "PortIpRequest",
    "PortQuery",
    "Subnet",
    "SubnetQuery",
]
