"""Contrato del ejecutor HTTP.

Por qué Protocol:
- El Core no conoce httpx: solo necesita "enviar una petición y recibir
  estado + cuerpo".
- Permite sustituir el transporte por un stub en tests sin herencia rígida.
"""

from __future__ import annotations

from typing import Any, Mapping, NamedTuple, Optional, Protocol, Sequence, runtime_checkable


class RawResponse(NamedTuple):
    """Estado HTTP + cuerpo JSON ya decodificado (o `None` si vacío)."""

    status_code: int
    body: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


@runtime_checkable
class Executor(Protocol):
    """Ejecuta una petición HTTP autenticada.

    Reglas de diseño:
    - Nunca lanza por estados HTTP: los devuelve tal cual en `RawResponse`.
    - Fallos de red se reportan como `core.errors.TransportError`.
    """

    def send(
        self,
        method: str,
        url: str,
        query: Sequence[tuple[str, str]] = (),
        json_body: Any = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> RawResponse:
        ...
