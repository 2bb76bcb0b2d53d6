"""Versions supplied by the Flutter Gradle plugin.

The plugin reads `flutter.versionCode` / `flutter.versionName` (and, on newer
templates, the SDK levels) from `local.properties`. These are opaque values:
we only carry them into the build configuration.
"""

from __future__ import annotations

import logging
from pathlib import Path

from core.config import ProjectLayout
from core.domain.models import Diagnostic, DiagnosticCode, FrameworkVersions
from core.errors import MissingPropertiesFileError
from core.properties import PropertiesSyntaxError, load_properties

logger = logging.getLogger(__name__)

_INT_KEYS = {
    "flutter.versionCode": "version_code",
    "flutter.minSdkVersion": "min_sdk",
    "flutter.targetSdkVersion": "target_sdk",
    "flutter.compileSdkVersion": "compile_sdk",
}


def load_framework_versions(
    layout: ProjectLayout,
    *,
    overrides: dict[str, object] | None = None,
) -> tuple[FrameworkVersions, list[Diagnostic]]:
    """Read `local.properties` best-effort; defaults when absent."""

    path = layout.local_properties_path
    diagnostics: list[Diagnostic] = []
    values: dict[str, object] = {}

    try:
        source = load_properties(path)
    except (MissingPropertiesFileError, PropertiesSyntaxError) as exc:
        logger.info("%s unavailable, using framework defaults: %s", layout.local_properties_filename, exc)
        diagnostics.append(
            Diagnostic(
                level="warning",
                code=DiagnosticCode.VERSIONS_MISSING,
                message=f"{layout.local_properties_filename} unavailable, using defaults",
                path=path,
            )
        )
    else:
        for key, field_name in _INT_KEYS.items():
            raw = (source.get(key) or "").strip()
            if not raw:
                continue
            try:
                number = int(raw)
            except ValueError:
                logger.warning("Ignoring non-numeric %s=%r", key, raw)
                diagnostics.append(
                    Diagnostic(
                        level="warning",
                        code=DiagnosticCode.VERSIONS_MISSING,
                        message=f"{key} is not a number: {raw!r}",
                        path=path,
                    )
                )
                continue
            if number < 1:
                logger.warning("Ignoring out-of-range %s=%r", key, raw)
                diagnostics.append(
                    Diagnostic(
                        level="warning",
                        code=DiagnosticCode.VERSIONS_MISSING,
                        message=f"{key} must be >= 1: {raw!r}",
                        path=path,
                    )
                )
                continue
            values[field_name] = number

        version_name = (source.get("flutter.versionName") or "").strip()
        if version_name:
            values["version_name"] = version_name
        sdk = (source.get("flutter.sdk") or "").strip()
        if sdk:
            values["flutter_sdk"] = Path(sdk)

        diagnostics.append(
            Diagnostic(
                level="info",
                code=DiagnosticCode.VERSIONS_FOUND,
                message=f"{layout.local_properties_filename} FOUND at: {path.absolute()}",
                path=path,
            )
        )

    if overrides:
        values.update({k: v for k, v in overrides.items() if v is not None})

    return FrameworkVersions(**values), diagnostics
