"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en `resolve`, `check` y `doctor`.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import BuildConfiguration, Diagnostic, SigningCredential

_LEVEL_STYLES = {
    "info": ("✅", "green"),
    "warning": ("⚠️ ", "yellow"),
    "error": ("❌", "red"),
}


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida.

    Se puede desactivar (`--no-banner`) en modos no interactivos (CI).
    """

    title = Text("keyprops", style="bold cyan")
    subtitle = Text("Release signing • key.properties • Gradle", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def format_diagnostic(diagnostic: Diagnostic) -> Text:
    icon, style = _LEVEL_STYLES.get(diagnostic.level, ("-", "white"))
    # Text (no markup): las rutas pueden contener corchetes.
    return Text.assemble((f"{icon} ", style), diagnostic.message)


def print_diagnostic(console: Console, diagnostic: Diagnostic) -> None:
    console.print(format_diagnostic(diagnostic))


def _or_missing(value: object) -> Text:
    if value is None:
        return Text("<missing>", style="red")
    return Text(str(value))


def build_credential_table(credential: SigningCredential) -> Table:
    """Tabla de la credencial; las contraseñas siempre enmascaradas."""

    table = Table(title="Release signing config")
    table.add_column("Field", style="bright_green", no_wrap=True)
    table.add_column("Value", style="white")
    table.add_row("storeFile", _or_missing(credential.store_file))
    table.add_row("storePassword", _or_missing(credential.store_password))
    table.add_row("keyAlias", _or_missing(credential.key_alias))
    table.add_row("keyPassword", _or_missing(credential.key_password))
    table.add_row("storeType", credential.store_type)
    valid = Text("yes", style="green") if credential.is_valid else Text("no", style="red")
    table.add_row("valid", valid)
    return table


def build_build_types_table(config: BuildConfiguration) -> Table:
    table = Table(title=f"Build types ({config.namespace})")
    table.add_column("Variant", style="cyan", no_wrap=True)
    table.add_column("Signing config", style="white")
    table.add_column("Minify", style="dim")
    table.add_column("Shrink", style="dim")
    for name, variant in config.build_types.items():
        table.add_row(
            name,
            variant.signing_config or "(framework debug key)",
            str(variant.minify_enabled).lower(),
            str(variant.shrink_resources).lower(),
        )
    return table
