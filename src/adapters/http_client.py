"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers y verificación TLS para todos los servicios.
- Implementa el contrato `Executor` del Core: el resto del código nunca ve
  objetos de httpx.
- Facilita testeo: se puede inyectar un `httpx.MockTransport`.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

import httpx

from core.config import AppSettings
from core.errors import InvalidResponse, TransportError
from core.interfaces.executor import RawResponse

logger = logging.getLogger(__name__)


def build_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Crea un `httpx.Client` con defaults seguros.

    Por qué un builder:
    - Centraliza timeouts/headers para que todos los servicios se comporten igual.
    - El token (si existe) se adjunta aquí; obtenerlo no es cosa de este cliente.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if settings.auth_token:
        headers["X-Auth-Token"] = settings.auth_token
    if extra_headers:
        headers.update(extra_headers)
    return httpx.Client(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        verify=settings.verify_tls,
        transport=transport,
    )


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError as exc:
        if response.is_success:
            raise InvalidResponse(f"Expected JSON from {response.request.url}, got {response.text[:200]!r}") from exc
        # Los errores a veces llegan como HTML/texto plano.
        return response.text


class HttpxExecutor:
    """Ejecutor HTTP sobre `httpx.Client` (implementa `core.interfaces.Executor`)."""

    def __init__(self, client: httpx.Client) -> None:
        self._client = client

    @classmethod
    def from_settings(cls, settings: AppSettings | None = None) -> "HttpxExecutor":
        return cls(build_client(settings))

    def send(
        self,
        method: str,
        url: str,
        query: Sequence[tuple[str, str]] = (),
        json_body: Any = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> RawResponse:
        params = list(query) or None
        try:
            response = self._client.request(
                method,
                url,
                params=params,
                json=json_body,
                headers=dict(headers) if headers else None,
            )
        except httpx.HTTPError as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc

        logger.debug("HTTP %s %s -> %s", method, response.request.url, response.status_code)
        return RawResponse(response.status_code, _decode_body(response))

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpxExecutor":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
