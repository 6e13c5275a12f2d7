"""Errores del cliente.

Por qué una jerarquía propia:
- Los llamadores capturan `NimbusError` sin conocer httpx ni pydantic.
- Cada tipo corresponde a una política distinta (reintentar, corregir config,
  reportar al usuario).
"""

from __future__ import annotations

from typing import Any


class NimbusError(Exception):
    """Base de todos los errores del cliente."""


class TransportError(NimbusError):
    """Fallo de red/HTTP a nivel transporte (no se interpreta aquí)."""


class InvalidResponse(NimbusError):
    """JSON bien formado pero sin la estructura esperada."""


class EndpointNotFound(NimbusError):
    """No se pudo localizar el endpoint de un servicio."""

    def __init__(self, service_type: str, detail: str | None = None) -> None:
        self.service_type = service_type
        message = f"Endpoint for service {service_type} was not found"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class ResourceNotFound(NimbusError):
    """Cero resultados donde se requería al menos uno (o HTTP 404)."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class TooManyItems(NimbusError):
    """Más de un resultado donde se requería exactamente uno."""


class IncompatibleApiVersion(NimbusError):
    """Ninguna versión de API disponible satisface la petición."""


class HttpError(NimbusError):
    """Estado HTTP no exitoso que no tiene una clase más específica."""

    def __init__(self, status_code: int, body: Any = None, *, url: str | None = None) -> None:
        self.status_code = status_code
        self.body = body
        self.url = url
        target = f" from {url}" if url else ""
        super().__init__(f"HTTP {status_code}{target}: {_describe_body(body)}")


def _describe_body(body: Any) -> str:
    # Neutron/Nova envuelven el mensaje en {"NeutronError": {"message": ...}} o similar.
    if isinstance(body, dict):
        for value in body.values():
            if isinstance(value, dict) and isinstance(value.get("message"), str):
                return value["message"]
        if isinstance(body.get("message"), str):
            return body["message"]
    if body is None:
        return "no details"
    text = str(body)
    return text if len(text) <= 200 else text[:199] + "…"
