"""Exportación JSON de la configuración de build.

Por qué JSON:
- Interoperabilidad con pipelines de CI (p.ej. un paso que valida la firma).
- Las contraseñas salen enmascaradas salvo que se pida lo contrario.
"""

from __future__ import annotations

import json
from pathlib import Path

from core.domain.models import BuildConfiguration


def build_configuration_payload(config: BuildConfiguration, *, reveal_secrets: bool = False) -> dict:
    return config.model_dump(mode="json", context={"reveal_secrets": reveal_secrets})


def export_build_configuration_json(
    *,
    config: BuildConfiguration,
    output_path: Path,
    reveal_secrets: bool = False,
) -> Path:
    """Exporta `BuildConfiguration` a JSON UTF-8 con formato estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = build_configuration_payload(config, reveal_secrets=reveal_secrets)
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
