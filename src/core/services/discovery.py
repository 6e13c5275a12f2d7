"""Descubrimiento de servicios versionados.

Por qué un servicio aparte:
- El catálogo a veces apunta a una ruta con proyecto o versión; hay que subir
  por el path hasta encontrar el documento de versiones.
- Solo un HTTP 404 provoca la subida; cualquier otro fallo llega intacto al
  llamador.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional
from urllib.parse import urlsplit

from core.domain.models import ServiceInfo, parse_version_root
from core.errors import EndpointNotFound, HttpError
from core.interfaces.executor import Executor
from core import urls

logger = logging.getLogger(__name__)


def fetch_service_info(
    endpoint: str,
    executor: Executor,
    service_type: str,
    major_version: str,
    *,
    headers: Optional[Mapping[str, str]] = None,
) -> ServiceInfo:
    """Resuelve `endpoint` en un `ServiceInfo` para `major_version`.

    Reglas:
    - 404 en un path que no es raíz: se reintenta en el path padre.
    - 404 en la raíz: `EndpointNotFound`.
    - Un endpoint de catálogo https fuerza `https` en la URL raíz resuelta
      (servicios antiguos anuncian enlaces `http` aun detrás de TLS).
    """

    secure = urlsplit(endpoint).scheme == "https"
    current = endpoint

    while True:
        logger.debug("Fetching %s service info from %s", service_type, current)
        response = executor.send("GET", current, headers=headers)

        if response.status_code == 404:
            if urls.is_root(current):
                raise EndpointNotFound(service_type)
            parent = urls.pop_segment(current)
            logger.debug("Got HTTP 404 from %s, trying parent endpoint %s", current, parent)
            current = parent
            continue

        if not response.ok:
            raise HttpError(response.status_code, response.body, url=current)

        document = parse_version_root(
            response.body,
            service_type=service_type,
            major_version=major_version,
        )
        info = document.into_service_info()
        if secure and urlsplit(info.root_url).scheme != "https":
            info = info.model_copy(update={"root_url": urls.force_scheme(info.root_url, "https")})

        logger.debug("Received %r for %s service from %s", info, service_type, current)
        return info
