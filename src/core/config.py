"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que el resolvedor y el ensamblado del build lean la misma config.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.models import DEFAULT_STORE_TYPE


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "keyprops"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "keyprops"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "keyprops"
    return Path.home() / ".config" / "keyprops"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def write_user_env_vars(values: dict[str, str | None], *, env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        # Sintaxis dotenv (la que lee pydantic-settings), no la de .properties.
        existing = {k: v for k, v in dotenv_values(env_path, encoding="utf-8").items() if v is not None}

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# keyprops user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI y servicios.
    """

    model_config = SettingsConfigDict(
        env_prefix="KEYPROPS_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    project_root: Path = Field(
        default=Path("."),
        description="Raíz del proyecto Gradle (donde vive key.properties).",
    )
    module_dir: str | None = Field(
        default=None,
        description="Módulo contra el que se resuelve storeFile (p.ej. 'app'). None = raíz.",
    )
    properties_filename: str = Field(
        default="key.properties",
        min_length=1,
        description="Nombre del fichero de credenciales en la raíz del proyecto.",
    )
    local_properties_filename: str = Field(
        default="local.properties",
        min_length=1,
        description="Fichero de donde el framework toma versionCode/versionName.",
    )
    store_type: str = Field(
        default=DEFAULT_STORE_TYPE,
        min_length=1,
        description="Tipo de keystore inyectado en la credencial.",
    )
    strict_release: bool = Field(
        default=False,
        description="Fallar si el build release se firmaría con una credencial incompleta.",
    )

    application_id: str = Field(default="app.ecash", min_length=1)
    ndk_version: str | None = Field(default="27.0.12077973")
    java_version: str = Field(default="11", min_length=1)

    log_level: str = Field(
        default="WARNING",
        description="Nivel del logger raíz cuando se ejecuta la CLI.",
    )

    def layout(self) -> "ProjectLayout":
        return ProjectLayout(
            root_dir=self.project_root,
            module_dir=self.module_dir,
            properties_filename=self.properties_filename,
            local_properties_filename=self.local_properties_filename,
        )


@dataclass(frozen=True)
class ProjectLayout:
    """Where the resolver looks for things.

    `key.properties` lives in the root project while `storeFile` is resolved
    against the app module, the same split the Gradle script has.
    """

    root_dir: Path
    module_dir: str | None = None
    properties_filename: str = "key.properties"
    local_properties_filename: str = "local.properties"

    @property
    def properties_path(self) -> Path:
        return self.root_dir / self.properties_filename

    @property
    def local_properties_path(self) -> Path:
        return self.root_dir / self.local_properties_filename

    @property
    def store_base_dir(self) -> Path:
        if self.module_dir:
            return self.root_dir / self.module_dir
        return self.root_dir

    def resolve_store_path(self, value: str) -> Path:
        # Absolute values win over the base dir; `~` is left alone and `..` collapsed, like Gradle's file().
        return Path(os.path.normpath((self.store_base_dir / value).absolute()))
