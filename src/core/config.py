"""Configuración de bus-toolkit.

Por qué aquí:
- Un único `AppSettings` (pydantic-settings) para el cliente GitLab y la CLI.
- Los valores salen de variables `BUS_*`, del `.env` del proyecto y del `.env`
  por usuario que escribe `bus doctor setup-token`.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from dotenv import dotenv_values, set_key
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.constants import ApiVersion, TokenType

APP_DIR_NAME = "bus-toolkit"


def get_user_config_dir() -> Path:
    """Per-user config directory (APPDATA, Application Support or XDG)."""

    if sys.platform.startswith("win"):
        return Path(os.environ.get("APPDATA") or Path.home()) / APP_DIR_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_DIR_NAME
    return Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config") / APP_DIR_NAME


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def read_user_env_vars(env_path: Path | None = None) -> dict[str, str]:
    env_path = env_path or get_user_env_file()
    if not env_path.is_file():
        return {}
    return {k: v for k, v in dotenv_values(env_path).items() if v is not None}


def write_user_env_vars(values: dict[str, str | None], env_path: Path | None = None) -> Path:
    """Update `values` in the user `.env`; `None` values leave the key untouched."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)
    if not env_path.exists():
        env_path.write_text("# bus-toolkit user config (.env)\n", encoding="utf-8")

    for key, value in values.items():
        if value is not None:
            set_key(env_path, key, value, quote_mode="never")
    return env_path


class AppSettings(BaseSettings):
    """Settings for the GitLab client and the CLI.

    Los `.env` posteriores pisan a los anteriores: el del usuario gana al del
    proyecto, y las variables de entorno ganan a ambos.
    """

    model_config = SettingsConfigDict(
        env_prefix="BUS_",
        extra="ignore",
        case_sensitive=False,
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    gitlab_url: str = Field(
        default="https://gitlab.com",
        min_length=8,
        description="URL base del servidor GitLab (sin /api/vN).",
    )
    api_version: ApiVersion = Field(
        default=ApiVersion.V4,
        description="Versión de la API REST (v3/v4).",
    )
    auth_token: str | None = Field(
        default=None,
        description="Token de autenticación (private/personal/oauth2).",
    )
    token_type: TokenType = Field(
        default=TokenType.PRIVATE,
        description="Cómo se envía el token: PRIVATE-TOKEN o Authorization: Bearer.",
    )
    secret_token: str | None = Field(
        default=None,
        description="Secret token de webhooks (no se envía en las peticiones).",
    )
    sudo_as_id: int | None = Field(
        default=None,
        ge=1,
        description="Usuario a suplantar (requiere token de administrador).",
    )
    default_per_page: int = Field(
        default=96,
        ge=1,
        le=100,
        description="Elementos por página por defecto para listados paginados.",
    )
    ignore_certificate_errors: bool = Field(
        default=False,
        description="Desactiva la validación TLS (solo para servidores internos).",
    )

    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default="bus-toolkit/0.1 (+https://local)",
        min_length=1,
        description="User-Agent para las peticiones HTTP.",
    )

    log_level: str = Field(
        default="WARNING",
        description="Nivel mínimo de log (DEBUG, INFO, WARNING, ...).",
    )
    log_json: bool = Field(
        default=False,
        description="Renderiza los logs como JSON en vez de consola.",
    )
