"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (HTTP/sesión) lean config de forma consistente.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "nimbus"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "nimbus"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "nimbus"
    return Path.home() / ".config" / "nimbus"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str | None], env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario.

    Los valores `None` se ignoran: no borran lo que ya estaba guardado.
    """

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# nimbus user config (.env)"]
    for key in sorted(existing.keys()):
        # Comillas simples: los catálogos JSON llevan comillas dobles.
        lines.append(f"{key}='{existing[key]}'")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central del cliente.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="NIMBUS_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default="nimbus-sdk/0.1",
        min_length=1,
        description="User-Agent enviado al plano de control.",
    )
    auth_token: str | None = Field(
        default=None,
        description="Token ya emitido por el servicio de identidad (cabecera X-Auth-Token).",
    )
    endpoints: dict[str, str] = Field(
        default_factory=dict,
        description="Catálogo de servicios: tipo de servicio -> URL del endpoint (JSON).",
    )
    verify_tls: bool = Field(
        default=True,
        description="Verificar certificados TLS.",
    )
    page_size: int = Field(
        default=50,
        ge=1,
        le=1000,
        description="Tamaño de página por defecto para la paginación automática.",
    )
