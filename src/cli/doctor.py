"""Doctor command for environment diagnostics."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from core.config import AppSettings, get_user_env_file, write_user_env_vars
from core.domain.models import STORE_FILE_KEY
from core.services.credential_resolver import CredentialResolver
from core.services.framework_versions import load_framework_versions

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def _status(ok: bool, *, optional: bool = False) -> str:
    if ok:
        return "OK"
    return "OPTIONAL" if optional else "FAIL"


def collect_checks(settings: AppSettings) -> list[tuple[str, str, str]]:
    """Rows of (check, status, details) for the current project."""

    layout = settings.layout()
    result = CredentialResolver.from_settings(settings).resolve()
    credential = result.credential
    rows: list[tuple[str, str, str]] = []

    rows.append((layout.properties_filename, _status(result.properties_found), str(layout.properties_path.absolute())))

    if credential.store_file is None:
        rows.append(("storeFile", "FAIL", "not declared"))
    else:
        rows.append(("Keystore", _status(credential.store_file_exists), str(credential.store_file)))

    missing = [k for k in credential.missing_fields() if k != STORE_FILE_KEY]
    rows.append(("Secrets", _status(not missing), ", ".join(missing) if missing else "storePassword, keyAlias, keyPassword"))
    rows.append(("Store type", "OK", credential.store_type))

    versions, diagnostics = load_framework_versions(layout)
    found = any(d.ok for d in diagnostics)
    details = f"versionCode={versions.version_code} versionName={versions.version_name}"
    if not found:
        details = "missing, framework defaults apply"
    rows.append((layout.local_properties_filename, _status(found, optional=True), details))

    mode = "strict (fail fast)" if settings.strict_release else "lenient (warn only)"
    rows.append(("Release policy", "OK", mode))
    return rows


@app.command()
def run(
    project_root: Optional[Path] = typer.Option(None, "--project-root", "-p", help="Gradle root project."),
    module: Optional[str] = typer.Option(None, "--module", "-m", help="Module storeFile is relative to."),
) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    overrides = {"project_root": project_root, "module_dir": module}
    settings = AppSettings(**{k: v for k, v in overrides.items() if v is not None})

    table = Table(title="keyprops Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    rows = collect_checks(settings)
    for check, status, details in rows:
        table.add_row(check, status, details)
    _console.print(table)

    if any(status == "FAIL" for _, status, _ in rows):
        _console.print(
            "\n[yellow]Note:[/yellow] release builds will not be signed until every FAIL above is fixed."
        )


@app.command()
def setup() -> None:
    """Interactive setup (stores defaults in the user config .env)."""

    project_root = typer.prompt("Gradle root project", default=".", show_default=True).strip()
    module = typer.prompt("Module storeFile is relative to", default="app", show_default=True).strip()
    strict = typer.confirm("Fail release builds with incomplete signing?", default=False)

    if not project_root:
        raise typer.BadParameter("project root is required")

    env_path = write_user_env_vars(
        {
            "KEYPROPS_PROJECT_ROOT": str(Path(project_root).expanduser().absolute()),
            "KEYPROPS_MODULE_DIR": module or None,
            "KEYPROPS_STRICT_RELEASE": "true" if strict else "false",
        },
        env_path=get_user_env_file(),
    )

    _console.print(f"[green]Saved config to:[/green] {env_path}")
