"""Ensamblado de la configuración de build.

Por qué aquí:
- Reúne credencial + versiones del framework en el registro que consume el
  empaquetador (`BuildConfiguration`).
- Decide si un release puede firmarse (modo estricto) sin que el resolvedor
  tenga que saberlo.
"""

from __future__ import annotations

from core.config import AppSettings
from core.domain.models import (
    BuildConfiguration,
    BuildVariant,
    DefaultConfig,
    FrameworkVersions,
    SigningCredential,
)
from core.errors import IncompleteSigningError
from core.services.credential_resolver import ResolutionResult

RELEASE = "release"
DEBUG = "debug"


def assemble_build_configuration(
    *,
    credential: SigningCredential,
    settings: AppSettings,
    versions: FrameworkVersions | None = None,
) -> BuildConfiguration:
    """Inyecta la credencial en el signing config `release`.

    El build `release` usa esa firma y desactiva minify/shrink; `debug` se
    queda con la clave debug del framework.
    """

    versions = versions or FrameworkVersions()
    return BuildConfiguration(
        namespace=settings.application_id,
        compile_sdk=versions.compile_sdk,
        ndk_version=settings.ndk_version,
        java_version=settings.java_version,
        jvm_target=settings.java_version,
        default_config=DefaultConfig(
            application_id=settings.application_id,
            min_sdk=versions.min_sdk,
            target_sdk=versions.target_sdk,
            version_code=versions.version_code,
            version_name=versions.version_name,
        ),
        signing_configs={RELEASE: credential},
        build_types={
            RELEASE: BuildVariant(
                name=RELEASE,
                signing_config=RELEASE,
                minify_enabled=False,
                shrink_resources=False,
            ),
            DEBUG: BuildVariant(name=DEBUG, debuggable=True),
        },
    )


def validate_release(result: ResolutionResult, *, strict: bool) -> list[str]:
    """Devuelve los problemas del credencial de release.

    En modo estricto, cualquier problema lanza `IncompleteSigningError`; si no,
    solo se informa (comportamiento histórico del script de Gradle).
    """

    problems = result.problems()
    if strict and problems:
        raise IncompleteSigningError(problems)
    return problems
