"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (transportes HTTP, cliente T-Soft) lean config de
  forma consistente.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(ValueError):
    """Falta configuración obligatoria (base URL o token)."""


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "tsoft-client"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "tsoft-client"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "tsoft-client"
    return Path.home() / ".config" / "tsoft-client"


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
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], *, env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# tsoft-client user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central del cliente.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="TSOFT_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    base_url: str | None = Field(
        default=None,
        description="URL base del backend (p.ej. https://<tienda>.tsoft.biz/rest1).",
    )
    api_token: str | None = Field(
        default=None,
        description="Token compartido; se envía como campo de formulario y como header.",
    )
    debug: bool = Field(
        default=False,
        description="Loguea payloads y cuerpos de respuesta (truncados) a nivel DEBUG.",
    )
    log_level: str = Field(
        default="INFO",
        description="Nivel de logging cuando debug está desactivado.",
    )

    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default="tsoft-client/0.1",
        min_length=1,
        description="User-Agent enviado al backend.",
    )

    bulk_max_concurrency: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Concurrencia máxima para sub-fetches masivos (imágenes).",
    )
    enhanced_image_limit: int = Field(
        default=20,
        ge=0,
        description="Máximo de productos a los que se adjunta imagen en la consulta enriquecida.",
    )
    enhanced_image_concurrency: int = Field(
        default=3,
        ge=1,
        le=100,
        description="Concurrencia para imágenes en la consulta enriquecida.",
    )

    def require_connection(self) -> tuple[str, str]:
        """Devuelve `(base_url, token)` o lanza `ConfigurationError`."""

        if not self.base_url:
            raise ConfigurationError("TSOFT_BASE_URL is not configured")
        if not self.api_token:
            raise ConfigurationError("TSOFT_API_TOKEN is not configured")
        return self.base_url.rstrip("/"), self.api_token
