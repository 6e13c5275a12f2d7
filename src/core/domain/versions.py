"""Versiones de API y política de selección.

Por qué en el dominio:
- La selección es pura (sin I/O) y codifica la política de compatibilidad
  con el servicio; la sesión solo la aplica.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Union

from core.errors import InvalidResponse


@dataclass(frozen=True, order=True)
class ApiVersion:
    """Micro-versión (major, minor), ordenada lexicográficamente."""

    major: int
    minor: int

    @classmethod
    def parse(cls, value: str) -> "ApiVersion":
        """Parsea `"2.24"` (y tolera el prefijo `v`, p.ej. `"v2.1"`)."""

        text = value.strip()
        if text[:1] in ("v", "V"):
            text = text[1:]
        parts = text.split(".")
        if len(parts) != 2 or not all(p.isdigit() for p in parts):
            raise InvalidResponse(f"Invalid API version: {value!r}")
        return cls(int(parts[0]), int(parts[1]))

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"


@dataclass(frozen=True)
class Minimum:
    """Pedir la versión mínima soportada."""


@dataclass(frozen=True)
class Latest:
    """Pedir la versión más reciente soportada."""


@dataclass(frozen=True)
class Exact:
    """Pedir exactamente esta versión."""

    version: ApiVersion


@dataclass(frozen=True, init=False)
class Choice:
    """Pedir la mejor versión compatible de una lista."""

    versions: tuple[ApiVersion, ...]

    def __init__(self, versions: Iterable[ApiVersion]) -> None:
        object.__setattr__(self, "versions", tuple(versions))


ApiVersionRequest = Union[Minimum, Latest, Exact, Choice]


def pick_api_version(
    minimum_version: Optional[ApiVersion],
    current_version: Optional[ApiVersion],
    request: ApiVersionRequest,
) -> Optional[ApiVersion]:
    """Elige una versión según la petición y el rango que anuncia el servicio.

    Reglas:
    - `Minimum`/`Latest` devuelven el valor anunciado tal cual (o None).
    - `Exact` requiere versión actual conocida; si no hay mínima, solo se
      acepta la actual.
    - `Choice` devuelve el máximo de los candidatos dentro del rango, o (sin
      mínima) el primero igual a la actual.
    """

    if isinstance(request, Minimum):
        return minimum_version
    if isinstance(request, Latest):
        return current_version
    if isinstance(request, Exact):
        if current_version is None:
            return None
        wanted = request.version
        if minimum_version is not None:
            return wanted if minimum_version <= wanted <= current_version else None
        return wanted if wanted == current_version else None
    if isinstance(request, Choice):
        if not request.versions:
            return None
        if current_version is None:
            return None
        if minimum_version is not None:
            candidates = [v for v in request.versions if minimum_version <= v <= current_version]
            return max(candidates) if candidates else None
        return next((v for v in request.versions if v == current_version), None)
    raise TypeError(f"Unsupported API version request: {request!r}")
