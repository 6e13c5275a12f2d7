"""Registros del Networking API v2.0 (Pydantic v2).

Por qué modelos separados de los objetos de recurso:
- Describen el JSON del servidor; los objetos de `adapters.network` añaden
  sesión, seguimiento de cambios y navegación entre recursos.
- Los enums son estrictos: un valor desconocido del servidor es un error de
  parseo, no un "desconocido" silencioso.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, Field, IPvAnyAddress, field_validator
from pydantic.config import ConfigDict


class NetworkStatus(str, Enum):
    """Estado de una red o de un puerto."""

    ACTIVE = "ACTIVE"
    BUILD = "BUILD"
    DOWN = "DOWN"
    ERROR = "ERROR"


class FloatingIpStatus(str, Enum):
    ACTIVE = "ACTIVE"
    DOWN = "DOWN"
    ERROR = "ERROR"


class IpVersion(int, Enum):
    V4 = 4
    V6 = 6


class Ipv6Mode(str, Enum):
    DHCPV6_STATEFUL = "dhcpv6-stateful"
    DHCPV6_STATELESS = "dhcpv6-stateless"
    SLAAC = "slaac"


class NetworkSortKey(str, Enum):
    CREATED_AT = "created_at"
    ID = "id"
    NAME = "name"
    UPDATED_AT = "updated_at"


class PortSortKey(str, Enum):
    ADMIN_STATE_UP = "admin_state_up"
    DEVICE_ID = "device_id"
    DEVICE_OWNER = "device_owner"
    ID = "id"
    MAC_ADDRESS = "mac_address"
    NAME = "name"
    NETWORK_ID = "network_id"
    STATUS = "status"


class SubnetSortKey(str, Enum):
    CIDR = "cidr"
    ID = "id"
    IP_VERSION = "ip_version"
    NAME = "name"
    NETWORK_ID = "network_id"


class FloatingIpSortKey(str, Enum):
    FIXED_IP_ADDRESS = "fixed_ip_address"
    FLOATING_IP_ADDRESS = "floating_ip_address"
    FLOATING_NETWORK_ID = "floating_network_id"
    ID = "id"
    ROUTER_ID = "router_id"
    STATUS = "status"


def _empty_as_none(value: Any) -> Any:
    if value == "":
        return None
    return value


# Neutron devuelve "" en vez de null en varios campos opcionales.
OptionalStr = Annotated[Optional[str], BeforeValidator(_empty_as_none)]
OptionalAddress = Annotated[Optional[IPvAnyAddress], BeforeValidator(_empty_as_none)]


class _Record(BaseModel):
    model_config = ConfigDict(extra="ignore", validate_assignment=True, populate_by_name=True)


class Network(_Record):
    id: str
    name: Optional[str] = None
    description: Optional[str] = None
    admin_state_up: bool = True
    external: Optional[bool] = Field(default=None, alias="router:external")
    shared: bool = False
    mtu: Optional[int] = None
    status: NetworkStatus
    subnets: list[str] = Field(default_factory=list)
    availability_zones: list[str] = Field(default_factory=list)
    dns_domain: OptionalStr = None
    project_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AllocationPool(BaseModel):
    start: IPvAnyAddress
    end: IPvAnyAddress


class HostRoute(BaseModel):
    destination: str
    nexthop: IPvAnyAddress


class Subnet(_Record):
    id: str
    name: Optional[str] = None
    description: Optional[str] = None
    network_id: str
    cidr: str
    ip_version: IpVersion
    gateway_ip: OptionalAddress = None
    enable_dhcp: bool = True
    dns_nameservers: list[str] = Field(default_factory=list)
    allocation_pools: list[AllocationPool] = Field(default_factory=list)
    host_routes: list[HostRoute] = Field(default_factory=list)
    ipv6_address_mode: Annotated[Optional[Ipv6Mode], BeforeValidator(_empty_as_none)] = None
    ipv6_ra_mode: Annotated[Optional[Ipv6Mode], BeforeValidator(_empty_as_none)] = None
    project_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class FixedIp(BaseModel):
    ip_address: IPvAnyAddress
    subnet_id: str


class PortExtraDhcpOption(BaseModel):
    """Opción DHCP extra configurada en un puerto."""

    model_config = ConfigDict(extra="ignore")

    opt_name: str = Field(..., min_length=1)
    opt_value: str
    ip_version: Optional[IpVersion] = None


class Port(_Record):
    id: str
    network_id: str
    name: Optional[str] = None
    description: Optional[str] = None
    admin_state_up: bool = True
    device_id: OptionalStr = None
    device_owner: OptionalStr = None
    dns_domain: OptionalStr = None
    dns_name: OptionalStr = None
    extra_dhcp_opts: list[PortExtraDhcpOption] = Field(default_factory=list)
    fixed_ips: list[FixedIp] = Field(default_factory=list)
    mac_address: Optional[str] = None
    security_groups: list[str] = Field(default_factory=list)
    status: NetworkStatus
    project_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("mac_address")
    @classmethod
    def _lower_mac(cls, value: Optional[str]) -> Optional[str]:
        return value.lower() if value else value


class FloatingIp(_Record):
    id: str
    description: Optional[str] = None
    floating_ip_address: Optional[IPvAnyAddress] = None
    fixed_ip_address: OptionalAddress = None
    floating_network_id: str
    port_id: Optional[str] = None
    router_id: Optional[str] = None
    status: FloatingIpStatus
    dns_domain: OptionalStr = None
    dns_name: OptionalStr = None
    project_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
