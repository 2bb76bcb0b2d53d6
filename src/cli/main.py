"""CLI principal (Typer).

Comandos:
- `resolve`: resuelve key.properties y muestra cada paso + la credencial.
- `check`: código de salida según la validez de la firma de release (CI).
- `export`: escribe la configuración de build en JSON.
- `doctor`: diagnóstico del entorno (ver `cli.doctor`).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from adapters.json_exporter import build_configuration_payload, export_build_configuration_json
from cli import doctor
from cli.ui_components import (
    build_build_types_table,
    build_credential_table,
    print_banner,
    print_diagnostic,
)
from core.config import AppSettings
from core.errors import IncompleteSigningError
from core.services.build_config import assemble_build_configuration, validate_release
from core.services.credential_resolver import ResolverHooks, resolve_credential
from core.services.framework_versions import load_framework_versions

app = typer.Typer(
    no_args_is_help=True,
    help="Resolve and validate Android release signing credentials from key.properties.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)


def _project_root_option():
    return typer.Option(
        None,
        "--project-root",
        "-p",
        help="Gradle root project (directory holding key.properties).",
    )


def _module_option():
    return typer.Option(
        None,
        "--module",
        "-m",
        help="Module directory storeFile is resolved against (e.g. 'app').",
    )


def _properties_file_option():
    return typer.Option(
        None,
        "--properties-file",
        help="Name of the signing properties file.",
    )


def _verbose_option():
    return typer.Option(False, "--verbose", "-v", help="Enable debug logging.")


def _no_banner_option():
    return typer.Option(False, "--no-banner", help="Do not print the banner.")


def configure_logging(level: str, *, verbose: bool = False) -> None:
    """Instala RichHandler en el logger raíz (idempotente)."""

    resolved = logging.DEBUG if verbose else getattr(logging, level.upper(), logging.WARNING)
    root = logging.getLogger()
    root.setLevel(resolved)
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(RichHandler(console=_err_console, show_path=False, markup=False))


def load_settings(
    *,
    project_root: Path | None = None,
    module: str | None = None,
    properties_file: str | None = None,
    strict: bool | None = None,
) -> AppSettings:
    """Settings from env/.env with CLI flags taking precedence."""

    overrides: dict[str, object] = {
        "project_root": project_root,
        "module_dir": module,
        "properties_filename": properties_file,
        "strict_release": strict,
    }
    try:
        return AppSettings(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command()
def resolve(
    project_root: Optional[Path] = _project_root_option(),
    module: Optional[str] = _module_option(),
    properties_file: Optional[str] = _properties_file_option(),
    verbose: bool = _verbose_option(),
    no_banner: bool = _no_banner_option(),
) -> None:
    """Resolve key.properties and print each step plus the resulting credential."""

    settings = load_settings(project_root=project_root, module=module, properties_file=properties_file)
    configure_logging(settings.log_level, verbose=verbose)
    if not no_banner:
        print_banner(_console)

    hooks = ResolverHooks(diagnostic=lambda d: print_diagnostic(_console, d))
    result = resolve_credential(settings, hooks=hooks)
    _console.print(build_credential_table(result.credential))


@app.command()
def check(
    project_root: Optional[Path] = _project_root_option(),
    module: Optional[str] = _module_option(),
    properties_file: Optional[str] = _properties_file_option(),
    strict: Optional[bool] = typer.Option(
        None,
        "--strict/--no-strict",
        help="Fail hard when the release credential is incomplete (default from KEYPROPS_STRICT_RELEASE).",
    ),
    verbose: bool = _verbose_option(),
) -> None:
    """Exit 0 when the release credential can sign, 1 when it cannot, 2 in strict mode."""

    settings = load_settings(
        project_root=project_root,
        module=module,
        properties_file=properties_file,
        strict=strict,
    )
    configure_logging(settings.log_level, verbose=verbose)

    result = resolve_credential(settings)
    try:
        problems = validate_release(result, strict=settings.strict_release)
    except IncompleteSigningError as exc:
        _console.print(f"[red]{exc}[/red]", markup=True, highlight=False)
        raise typer.Exit(code=2) from exc

    if problems:
        _console.print("[yellow]Release signing credential is incomplete:[/yellow]")
        for problem in problems:
            _console.print(f"  - {problem}", markup=False)
        raise typer.Exit(code=1)

    _console.print("[green]Release signing credential OK[/green]")


@app.command()
def export(
    output: Path = typer.Option(
        Path("build") / "signing-config.json",
        "--output",
        "-o",
        help="Destination JSON file ('-' for stdout).",
    ),
    project_root: Optional[Path] = _project_root_option(),
    module: Optional[str] = _module_option(),
    properties_file: Optional[str] = _properties_file_option(),
    version_code: Optional[int] = typer.Option(None, "--version-code", min=1, help="Override versionCode."),
    version_name: Optional[str] = typer.Option(None, "--version-name", help="Override versionName."),
    reveal_secrets: bool = typer.Option(
        False,
        "--reveal-secrets",
        help="Write passwords in clear text (masked by default).",
    ),
    verbose: bool = _verbose_option(),
) -> None:
    """Write the assembled build configuration (release signing included) as JSON."""

    settings = load_settings(project_root=project_root, module=module, properties_file=properties_file)
    configure_logging(settings.log_level, verbose=verbose)

    result = resolve_credential(settings)
    try:
        validate_release(result, strict=settings.strict_release)
    except IncompleteSigningError as exc:
        _err_console.print(f"[red]{exc}[/red]", highlight=False)
        raise typer.Exit(code=2) from exc

    versions, _ = load_framework_versions(
        settings.layout(),
        overrides={"version_code": version_code, "version_name": version_name},
    )
    config = assemble_build_configuration(credential=result.credential, settings=settings, versions=versions)

    if str(output) == "-":
        payload = build_configuration_payload(config, reveal_secrets=reveal_secrets)
        typer.echo(json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True))
        return

    path = export_build_configuration_json(config=config, output_path=output, reveal_secrets=reveal_secrets)
    _console.print(build_build_types_table(config))
    _console.print(f"[green]Saved build configuration to:[/green] {path}", highlight=False)


def run() -> None:
    app()
