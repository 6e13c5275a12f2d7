"""Llamadas REST del Networking API v2.0.

Estas funciones están en adapters porque son I/O puro: reciben la sesión,
devuelven registros de `core.domain.network` y traducen JSON inválido a
`InvalidResponse`.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from core.domain import network as protocol
from core.errors import InvalidResponse, ResourceNotFound, TooManyItems
from core.query import Query
from core.session import NETWORK, Session

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


def _parse(model: type[RecordT], data: Any) -> RecordT:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise InvalidResponse(f"Invalid {model.__name__} record: {exc}") from exc


def _unwrap(body: Any, key: str) -> Any:
    if not isinstance(body, dict) or key not in body:
        raise InvalidResponse(f"Expected a {key!r} object in the response, got {body!r}")
    return body[key]


def _get(session: Session, collection: str, key: str, model: type[RecordT], resource_id: str) -> RecordT:
    body = session.get_json(NETWORK, [collection, resource_id])
    return _parse(model, _unwrap(body, key))


def _list(session: Session, collection: str, model: type[RecordT], query: Optional[Query]) -> list[RecordT]:
    body = session.get_json(NETWORK, [collection], query)
    items = _unwrap(body, collection)
    if not isinstance(items, list):
        raise InvalidResponse(f"Expected a list of {collection}, got {items!r}")
    return [_parse(model, item) for item in items]


def _get_by_id_or_name(
    session: Session,
    collection: str,
    key: str,
    model: type[RecordT],
    id_or_name: str,
) -> RecordT:
    """GET por ID; si da 404, busca por nombre y exige exactamente un resultado."""

    try:
        return _get(session, collection, key, model, id_or_name)
    except ResourceNotFound:
        logger.debug("No %s with ID %s, trying it as a name", key, id_or_name)

    found = _list(session, collection, model, Query().push("name", id_or_name))
    if not found:
        raise ResourceNotFound(f"No {key} with ID or name {id_or_name}")
    if len(found) > 1:
        raise TooManyItems(f"Too many {collection} with name {id_or_name}")
    return found[0]


def get_network(session: Session, id_or_name: str) -> protocol.Network:
    return _get_by_id_or_name(session, "networks", "network", protocol.Network, id_or_name)


def list_networks(session: Session, query: Optional[Query] = None) -> list[protocol.Network]:
    return _list(session, "networks", protocol.Network, query)


def get_subnet(session: Session, id_or_name: str) -> protocol.Subnet:
    return _get_by_id_or_name(session, "subnets", "subnet", protocol.Subnet, id_or_name)


def list_subnets(session: Session, query: Optional[Query] = None) -> list[protocol.Subnet]:
    return _list(session, "subnets", protocol.Subnet, query)


def get_port(session: Session, id_or_name: str) -> protocol.Port:
    return _get_by_id_or_name(session, "ports", "port", protocol.Port, id_or_name)


def list_ports(session: Session, query: Optional[Query] = None) -> list[protocol.Port]:
    return _list(session, "ports", protocol.Port, query)


def create_port(session: Session, body: dict[str, Any]) -> protocol.Port:
    result = session.post_json(NETWORK, ["ports"], {"port": body})
    return _parse(protocol.Port, _unwrap(result, "port"))


def update_port(session: Session, port_id: str, changes: dict[str, Any]) -> protocol.Port:
    # Neutron usa PUT con semántica de actualización parcial.
    result = session.put_json(NETWORK, ["ports", port_id], {"port": changes})
    return _parse(protocol.Port, _unwrap(result, "port"))


def delete_port(session: Session, port_id: str) -> None:
    session.delete(NETWORK, ["ports", port_id])


def get_floating_ip(session: Session, floating_ip_id: str) -> protocol.FloatingIp:
    # Las IPs flotantes no tienen nombre: solo por ID.
    return _get(session, "floatingips", "floatingip", protocol.FloatingIp, floating_ip_id)


def list_floating_ips(session: Session, query: Optional[Query] = None) -> list[protocol.FloatingIp]:
    return _list(session, "floatingips", protocol.FloatingIp, query)
