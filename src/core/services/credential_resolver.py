"""Release signing credential resolution.

The flow is linear: load `key.properties`, resolve `storeFile` against the
module directory, assemble a `SigningCredential`. None of the failures along
the way abort the flow; each one becomes a `Diagnostic` that is collected in
the result, handed to an optional hook (for UI layers) and logged. Whether a
half-resolved credential is acceptable is decided later, by
`core.services.build_config.validate_release`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from core.config import AppSettings, ProjectLayout
from core.domain.models import (
    DEFAULT_STORE_TYPE,
    KEY_ALIAS_KEY,
    KEY_PASSWORD_KEY,
    STORE_FILE_KEY,
    STORE_PASSWORD_KEY,
    Diagnostic,
    DiagnosticCode,
    PropertiesSource,
    SigningCredential,
)
from core.errors import MissingKeyError, MissingPropertiesFileError, StoreFileNotFoundError
from core.properties import PropertiesSyntaxError, load_properties

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


@dataclass
class ResolverHooks:
    """Optional callbacks for UI layers."""

    diagnostic: Callable[[Diagnostic], None] | None = None


@dataclass
class ResolutionResult:
    """Output of a resolver invocation."""

    source: PropertiesSource
    credential: SigningCredential
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def properties_found(self) -> bool:
        return self.source.path is not None

    def problems(self) -> list[str]:
        """Human readable reasons why the credential cannot sign a release."""

        problems: list[str] = []
        credential = self.credential
        if credential.store_file is None:
            problems.append(f"{STORE_FILE_KEY} is not set")
        elif not credential.store_file_exists:
            problems.append(f"keystore not found at {credential.store_file}")
        for key in credential.missing_fields():
            if key != STORE_FILE_KEY:
                problems.append(f"{key} is not set")
        return problems


def _value(source: PropertiesSource, key: str) -> str | None:
    # Blank values count as missing.
    value = source.get(key)
    if value is None or not value.strip():
        return None
    return value


class CredentialResolver:
    """Resolves the release `SigningCredential` for one project layout."""

    def __init__(
        self,
        layout: ProjectLayout,
        *,
        store_type: str = DEFAULT_STORE_TYPE,
        hooks: ResolverHooks | None = None,
    ) -> None:
        self._layout = layout
        self._store_type = store_type
        self._hooks = hooks or ResolverHooks()
        self.diagnostics: list[Diagnostic] = []

    @classmethod
    def from_settings(cls, settings: AppSettings, *, hooks: ResolverHooks | None = None) -> "CredentialResolver":
        return cls(settings.layout(), store_type=settings.store_type, hooks=hooks)

    def _emit(
        self,
        level: str,
        code: DiagnosticCode,
        message: str,
        path: Path | None = None,
    ) -> None:
        diagnostic = Diagnostic(level=level, code=code, message=message, path=path)
        self.diagnostics.append(diagnostic)
        logger.log(_LOG_LEVELS[level], message)
        if self._hooks.diagnostic:
            self._hooks.diagnostic(diagnostic)

    def load(self) -> PropertiesSource:
        """Read the properties file.

        Raises `MissingPropertiesFileError` when it does not exist.
        """

        path = self._layout.properties_path
        source = load_properties(path)
        self._emit(
            "info",
            DiagnosticCode.PROPERTIES_FOUND,
            f"{self._layout.properties_filename} FOUND at: {path.absolute()}",
            path,
        )
        return source

    def resolve_store_file(self, source: PropertiesSource) -> Path:
        """Return the absolute keystore path declared by `storeFile`.

        Raises `MissingKeyError` when the key is absent and
        `StoreFileNotFoundError` (carrying the resolved path) when the file
        does not exist.
        """

        raw = _value(source, STORE_FILE_KEY)
        if raw is None:
            raise MissingKeyError(STORE_FILE_KEY)

        self._emit(
            "info",
            DiagnosticCode.STORE_FILE_DECLARED,
            f"{STORE_FILE_KEY} (from {self._layout.properties_filename}): {raw}",
        )

        path = self._layout.resolve_store_path(raw)
        if not path.exists():
            raise StoreFileNotFoundError(path)

        self._emit("info", DiagnosticCode.KEYSTORE_FOUND, f"Keystore FOUND at: {path}", path)
        return path

    def build_credential(self, source: PropertiesSource, *, report_missing: bool = True) -> SigningCredential:
        """Assemble the credential; missing keys become `None` fields.

        `report_missing=False` skips the per-key diagnostics, used when there
        was no properties file to begin with.
        """

        store_file: Path | None = None
        store_file_exists = False
        try:
            store_file = self.resolve_store_file(source)
            store_file_exists = True
        except MissingKeyError as exc:
            if report_missing:
                self._emit(
                    "error",
                    DiagnosticCode.KEY_MISSING,
                    f"{exc.key} is missing from {self._layout.properties_filename}",
                )
        except StoreFileNotFoundError as exc:
            store_file = exc.path
            self._emit("error", DiagnosticCode.KEYSTORE_MISSING, f"Keystore NOT FOUND at: {exc.path}", exc.path)

        values: dict[str, str | None] = {}
        for key in (STORE_PASSWORD_KEY, KEY_ALIAS_KEY, KEY_PASSWORD_KEY):
            values[key] = _value(source, key)
            if values[key] is None and report_missing:
                self._emit(
                    "warning",
                    DiagnosticCode.KEY_MISSING,
                    f"{key} is missing from {self._layout.properties_filename}",
                )

        return SigningCredential(
            store_file=store_file,
            store_password=values[STORE_PASSWORD_KEY],
            key_alias=values[KEY_ALIAS_KEY],
            key_password=values[KEY_PASSWORD_KEY],
            store_type=self._store_type,
            store_file_exists=store_file_exists,
        )

    def resolve(self) -> ResolutionResult:
        """Load, resolve and assemble in one pass. Never raises for signing errors."""

        self.diagnostics = []
        properties_found = True
        try:
            source = self.load()
        except MissingPropertiesFileError as exc:
            self._emit(
                "warning",
                DiagnosticCode.PROPERTIES_MISSING,
                f"{self._layout.properties_filename} NOT found at: {exc.path.absolute()}",
                exc.path,
            )
            source = PropertiesSource.empty()
            properties_found = False
        except PropertiesSyntaxError as exc:
            path = self._layout.properties_path
            self._emit(
                "error",
                DiagnosticCode.PROPERTIES_INVALID,
                f"{self._layout.properties_filename} could not be parsed: {exc}",
                path,
            )
            source = PropertiesSource.empty()
            properties_found = False

        credential = self.build_credential(source, report_missing=properties_found)
        return ResolutionResult(source=source, credential=credential, diagnostics=list(self.diagnostics))


def resolve_credential(settings: AppSettings, *, hooks: ResolverHooks | None = None) -> ResolutionResult:
    """Convenience wrapper used by the CLI."""

    return CredentialResolver.from_settings(settings, hooks=hooks).resolve()
