"""Sesión: catálogo + descubrimiento cacheado + peticiones a servicios.

Por qué aquí:
- Es el único estado compartido entre recursos (solo lectura para ellos).
- Centraliza la clasificación de estados HTTP en errores del cliente.

Nota: la sesión no introduce locks; para uso multi-hilo el ejecutor y la
caché de `ServiceInfo` deben protegerse fuera.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from core.domain.models import ServiceInfo
from core.domain.versions import ApiVersion, ApiVersionRequest
from core.errors import EndpointNotFound, HttpError, IncompatibleApiVersion, ResourceNotFound
from core.interfaces.executor import Executor, RawResponse
from core.pagination import DEFAULT_LIMIT
from core.query import Query
from core.services.discovery import fetch_service_info
from core import urls

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServiceType:
    """Servicio lógico del catálogo y su versión major."""

    catalog_type: str
    major_version: str
    version_header: Optional[str] = None


NETWORK = ServiceType("network", "v2.0")
COMPUTE = ServiceType("compute", "v2.1", "X-OpenStack-Nova-API-Version")


class Session:
    """Acceso autenticado a los servicios del plano de control."""

    def __init__(
        self,
        executor: Executor,
        endpoints: Mapping[str, str],
        *,
        page_size: int = DEFAULT_LIMIT,
    ) -> None:
        self._executor = executor
        self._endpoints = dict(endpoints)
        self.page_size = page_size
        self._service_info: dict[ServiceType, ServiceInfo] = {}
        self._api_versions: dict[ServiceType, ApiVersion] = {}

    @property
    def executor(self) -> Executor:
        return self._executor

    def get_catalog_endpoint(self, service: ServiceType) -> str:
        try:
            return self._endpoints[service.catalog_type]
        except KeyError:
            raise EndpointNotFound(service.catalog_type, "no catalog entry") from None

    def get_service_info(self, service: ServiceType) -> ServiceInfo:
        """Descubre el servicio una vez por sesión y cachea el resultado."""

        info = self._service_info.get(service)
        if info is None:
            info = fetch_service_info(
                self.get_catalog_endpoint(service),
                self._executor,
                service.catalog_type,
                service.major_version,
            )
            self._service_info[service] = info
        return info

    def pick_api_version(self, service: ServiceType, request: ApiVersionRequest) -> Optional[ApiVersion]:
        return self.get_service_info(service).pick_api_version(request)

    def set_api_version(self, service: ServiceType, request: ApiVersionRequest) -> ApiVersion:
        """Negocia una micro-versión que se enviará en cada petición al servicio."""

        version = self.pick_api_version(service, request)
        if version is None:
            info = self.get_service_info(service)
            raise IncompatibleApiVersion(
                f"No API version of {service.catalog_type} satisfies {request!r} "
                f"(supported: {info.minimum_version} - {info.current_version})"
            )
        logger.debug("Using API version %s for %s", version, service.catalog_type)
        self._api_versions[service] = version
        return version

    def api_version(self, service: ServiceType) -> Optional[ApiVersion]:
        return self._api_versions.get(service)

    def service_headers(self, service: ServiceType) -> dict[str, str]:
        version = self._api_versions.get(service)
        if version is None or service.version_header is None:
            return {}
        return {service.version_header: str(version)}

    def get_endpoint(self, service: ServiceType, path: Iterable[str]) -> str:
        return urls.extend(self.get_service_info(service).root_url, path)

    def request(
        self,
        method: str,
        service: ServiceType,
        path: Iterable[str],
        *,
        query: Optional[Query] = None,
        json: Any = None,
    ) -> Any:
        url = self.get_endpoint(service, path)
        params = list(query) if query is not None else []
        headers = self.service_headers(service)
        logger.debug("Sending HTTP %s request to %s with %s", method, url, params)
        response = self._executor.send(method, url, params, json, headers)
        return _check(response, url)

    def get_json(self, service: ServiceType, path: Iterable[str], query: Optional[Query] = None) -> Any:
        return self.request("GET", service, path, query=query)

    def post_json(self, service: ServiceType, path: Iterable[str], body: Any) -> Any:
        return self.request("POST", service, path, json=body)

    def put_json(self, service: ServiceType, path: Iterable[str], body: Any) -> Any:
        return self.request("PUT", service, path, json=body)

    def delete(self, service: ServiceType, path: Iterable[str]) -> None:
        self.request("DELETE", service, path)

    def close(self) -> None:
        close = getattr(self._executor, "close", None)
        if callable(close):
            close()


def _check(response: RawResponse, url: str) -> Any:
    if response.ok:
        return response.body
    if response.status_code == 404:
        raise ResourceNotFound(f"Resource not found at {url}", status_code=404)
    raise HttpError(response.status_code, response.body, url=url)
