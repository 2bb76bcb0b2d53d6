"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a la CLI ni al sistema de ficheros.
- `SecretStr` evita que las contraseñas del keystore acaben en logs o JSON.
- Los registros son inmutables (`frozen`), así dos resoluciones del mismo
  fichero producen registros iguales.

Nota:
- Estos modelos describen *qué* es la configuración de firma, no *cómo* se
  obtiene.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Literal, Mapping

from pydantic import BaseModel, Field, SecretStr, SerializationInfo, field_serializer
from pydantic.config import ConfigDict

STORE_FILE_KEY = "storeFile"
STORE_PASSWORD_KEY = "storePassword"
KEY_ALIAS_KEY = "keyAlias"
KEY_PASSWORD_KEY = "keyPassword"

SIGNING_KEYS = (STORE_FILE_KEY, STORE_PASSWORD_KEY, KEY_ALIAS_KEY, KEY_PASSWORD_KEY)

DEFAULT_STORE_TYPE = "pkcs12"


class PropertiesSource(BaseModel):
    """Pares clave/valor leídos de un fichero `.properties`.

    Se guarda como tupla de pares para conservar el orden y no exponer un
    `dict` mutable.
    """

    model_config = ConfigDict(frozen=True)

    path: Path | None = Field(
        default=None,
        description="Fichero del que se cargaron los pares (None si es un origen vacío).",
    )
    entries: tuple[tuple[str, str], ...] = Field(
        default_factory=tuple,
        description="Pares (clave, valor) en orden de aparición.",
    )

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str], *, path: Path | None = None) -> "PropertiesSource":
        return cls(path=path, entries=tuple((str(k), str(v)) for k, v in mapping.items()))

    @classmethod
    def empty(cls) -> "PropertiesSource":
        return cls()

    def get(self, key: str, default: str | None = None) -> str | None:
        for name, value in self.entries:
            if name == key:
                return value
        return default

    def keys(self) -> list[str]:
        return [name for name, _ in self.entries]

    def __contains__(self, key: object) -> bool:
        return any(name == key for name, _ in self.entries)


class DiagnosticCode(str, Enum):
    """Stable identifiers for each resolution step outcome."""

    PROPERTIES_FOUND = "properties_found"
    PROPERTIES_MISSING = "properties_missing"
    PROPERTIES_INVALID = "properties_invalid"
    STORE_FILE_DECLARED = "store_file_declared"
    KEY_MISSING = "key_missing"
    KEYSTORE_FOUND = "keystore_found"
    KEYSTORE_MISSING = "keystore_missing"
    VERSIONS_FOUND = "versions_found"
    VERSIONS_MISSING = "versions_missing"


class Diagnostic(BaseModel):
    """Una línea de diagnóstico emitida durante la resolución.

    Puramente observacional: no cambia el flujo del empaquetador.
    """

    model_config = ConfigDict(frozen=True)

    level: Literal["info", "warning", "error"] = Field(default="info")
    code: DiagnosticCode
    message: str = Field(..., min_length=1)
    path: Path | None = Field(default=None, description="Ruta relacionada con el paso, si aplica.")

    @property
    def ok(self) -> bool:
        return self.level == "info"


class SigningCredential(BaseModel):
    """Credencial de firma de release derivada de `key.properties`.

    Reglas:
    - Cada campo ausente en el origen queda a `None` (construcción parcial).
    - Solo es válida si `store_file` existe en disco; una credencial inválida
      nunca debe firmar en silencio.
    """

    model_config = ConfigDict(frozen=True)

    store_file: Path | None = Field(
        default=None,
        description="Ruta del keystore, ya resuelta contra el directorio del módulo.",
    )
    store_password: SecretStr | None = Field(default=None, description="Contraseña del keystore.")
    key_alias: str | None = Field(default=None, description="Alias de la clave dentro del keystore.")
    key_password: SecretStr | None = Field(default=None, description="Contraseña de la clave.")
    store_type: str = Field(
        default=DEFAULT_STORE_TYPE,
        min_length=1,
        description="Formato del keystore (fijo; pkcs12 por defecto).",
    )
    store_file_exists: bool = Field(
        default=False,
        description="Resultado de la comprobación de existencia de `store_file`.",
    )

    @field_serializer("store_password", "key_password", when_used="json")
    def _dump_secret(self, value: SecretStr | None, info: SerializationInfo) -> str | None:
        if value is None:
            return None
        context = info.context or {}
        if context.get("reveal_secrets"):
            return value.get_secret_value()
        return str(value)

    @property
    def is_valid(self) -> bool:
        return self.store_file is not None and self.store_file_exists

    def missing_fields(self) -> list[str]:
        """Property-file keys whose value could not be resolved."""

        values = {
            STORE_FILE_KEY: self.store_file,
            STORE_PASSWORD_KEY: self.store_password,
            KEY_ALIAS_KEY: self.key_alias,
            KEY_PASSWORD_KEY: self.key_password,
        }
        return [key for key in SIGNING_KEYS if values[key] is None]

    @property
    def is_complete(self) -> bool:
        return self.is_valid and not self.missing_fields()


class FrameworkVersions(BaseModel):
    """Valores opacos que aporta el framework (Flutter) vía `local.properties`."""

    model_config = ConfigDict(frozen=True)

    version_code: int = Field(default=1, ge=1)
    version_name: str = Field(default="1.0", min_length=1)
    min_sdk: int | None = Field(default=None, ge=1)
    target_sdk: int | None = Field(default=None, ge=1)
    compile_sdk: int | None = Field(default=None, ge=1)
    flutter_sdk: Path | None = Field(default=None, description="`flutter.sdk` de local.properties.")


class DefaultConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    application_id: str = Field(..., min_length=1)
    min_sdk: int | None = None
    target_sdk: int | None = None
    version_code: int = Field(default=1, ge=1)
    version_name: str = Field(default="1.0", min_length=1)


class BuildVariant(BaseModel):
    """Perfil de build (`release`, `debug`) y su configuración de firma."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    signing_config: str | None = Field(
        default=None,
        description="Nombre del signing config usado (None = clave debug del framework).",
    )
    minify_enabled: bool = False
    shrink_resources: bool = False
    debuggable: bool = False


class BuildConfiguration(BaseModel):
    """Registro que consume el empaquetador.

    No lo ejecutamos: solo lo describimos para exportarlo o inspeccionarlo.
    """

    model_config = ConfigDict(frozen=True)

    namespace: str = Field(..., min_length=1)
    compile_sdk: int | None = None
    ndk_version: str | None = None
    java_version: str = Field(default="11")
    jvm_target: str = Field(default="11")
    default_config: DefaultConfig
    signing_configs: dict[str, SigningCredential] = Field(default_factory=dict)
    build_types: dict[str, BuildVariant] = Field(default_factory=dict)

    def signing_config_for(self, build_type: str) -> SigningCredential | None:
        variant = self.build_types.get(build_type)
        if variant is None or variant.signing_config is None:
            return None
        return self.signing_configs.get(variant.signing_config)
