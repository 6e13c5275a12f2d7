"""Referencias a recursos verificadas al usarse.

Por qué diferido:
- El llamador puede enlazar recursos por nombre o por ID sin pagar la
  consulta de red hasta que la petición (create/update) se construye.
- El resultado se memoriza en la propia referencia.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)


class ResourceRef:
    """Nombre-o-ID (no verificado) o ID canónico (verificado).

    La transición `no verificado -> verificado` ocurre una sola vez, en el
    primer `resolve` exitoso.
    """

    __slots__ = ("_value", "_verified")

    def __init__(self, value: str, *, verified: bool = False) -> None:
        if not isinstance(value, str) or not value:
            raise ValueError("A resource reference needs a non-empty name or ID")
        self._value = value
        self._verified = verified

    @classmethod
    def from_id(cls, resource_id: str) -> "ResourceRef":
        """Referencia ya verificada (p.ej. construida a partir de un recurso cargado)."""

        return cls(resource_id, verified=True)

    @classmethod
    def coerce(cls, value: Any) -> "ResourceRef":
        """Acepta `ResourceRef`, un string (nombre o ID) o un recurso con `.id`."""

        if isinstance(value, ResourceRef):
            return value
        if isinstance(value, str):
            return cls(value)
        resource_id = getattr(value, "id", None)
        if isinstance(resource_id, str) and resource_id:
            return cls.from_id(resource_id)
        raise TypeError(f"Cannot build a resource reference from {value!r}")

    @property
    def value(self) -> str:
        return self._value

    @property
    def verified(self) -> bool:
        return self._verified

    def resolve(self, lookup: Callable[[str], str]) -> str:
        """Devuelve el ID canónico, consultando `lookup` como mucho una vez.

        Si `lookup` falla, el error se propaga y la referencia sigue sin
        verificar.
        """

        if self._verified:
            return self._value

        resource_id = lookup(self._value)
        logger.debug("Verified reference %s as %s", self._value, resource_id)
        self._value = resource_id
        self._verified = True
        return resource_id

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        state = "verified" if self._verified else "unverified"
        return f"ResourceRef({self._value!r}, {state})"
