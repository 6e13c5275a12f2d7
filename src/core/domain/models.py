"""Modelos del dominio (Pydantic v2) para descubrimiento de servicios.

Por qué Pydantic en el dominio:
- Nos da validación estricta del documento de versiones sin acoplar el Core
  a librerías de I/O.
- Normaliza rarezas del servidor (strings vacíos como "ausente").

Nota:
- Estos modelos describen *qué* anuncia el servicio, no *cómo* se obtiene.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic.config import ConfigDict

from core.domain.versions import (
    ApiVersion,
    ApiVersionRequest,
    pick_api_version,
)
from core.errors import EndpointNotFound, InvalidResponse


class Link(BaseModel):
    model_config = ConfigDict(extra="ignore")

    href: str = Field(..., min_length=1, description="URL del enlace.")
    rel: str = Field(..., description="Relación del enlace (p.ej. 'self').")


class VersionDocument(BaseModel):
    """Documento de versión tal como lo publica el endpoint raíz de un servicio."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., description="Versión major, p.ej. 'v2.0' o 'v2.1'.")
    links: list[Link] = Field(default_factory=list)
    status: str = Field(default="", description="CURRENT/SUPPORTED/...; no se interpreta.")
    version: Optional[ApiVersion] = Field(
        default=None,
        description="Micro-versión máxima (vacía = no soporta micro-versiones).",
    )
    min_version: Optional[ApiVersion] = Field(
        default=None,
        description="Micro-versión mínima (vacía = desconocida).",
    )

    @field_validator("version", "min_version", mode="before")
    @classmethod
    def _empty_as_none(cls, value: Any) -> Any:
        if value is None or value == "":
            return None
        if isinstance(value, str):
            return ApiVersion.parse(value)
        return value

    def into_service_info(self) -> "ServiceInfo":
        link = next((x for x in self.links if x.rel == "self"), None)
        if link is None:
            raise InvalidResponse("Invalid version - missing self link")
        return ServiceInfo(
            root_url=link.href,
            current_version=self.version,
            minimum_version=self.min_version,
        )


class ServiceInfo(BaseModel):
    """Información de un endpoint versionado; inmutable tras el descubrimiento."""

    model_config = ConfigDict(frozen=True)

    root_url: str = Field(..., min_length=1, description="URL raíz del servicio.")
    current_version: Optional[ApiVersion] = Field(
        default=None,
        description="Micro-versión actual (si el servicio la soporta).",
    )
    minimum_version: Optional[ApiVersion] = Field(
        default=None,
        description="Micro-versión mínima (si el servicio la soporta).",
    )

    def pick_api_version(self, request: ApiVersionRequest) -> Optional[ApiVersion]:
        return pick_api_version(self.minimum_version, self.current_version, request)


def parse_version_root(data: Any, *, service_type: str, major_version: str) -> VersionDocument:
    """Acepta `{"version": {...}}` o `{"versions": [...]}`.

    En la forma colección se elige el documento cuyo `id` coincide con
    `major_version`; si no existe es un fallo de descubrimiento.
    """

    if not isinstance(data, dict):
        raise InvalidResponse(f"Unexpected version document for {service_type}: {data!r}")

    try:
        if isinstance(data.get("version"), dict):
            return VersionDocument.model_validate(data["version"])
        if isinstance(data.get("versions"), list):
            documents = [VersionDocument.model_validate(item) for item in data["versions"]]
        else:
            raise InvalidResponse(f"Unexpected version document for {service_type}: {data!r}")
    except ValidationError as exc:
        raise InvalidResponse(f"Invalid version document for {service_type}: {exc}") from exc

    for document in documents:
        if document.id == major_version:
            return document
    raise EndpointNotFound(service_type, f"no version {major_version} advertised")
