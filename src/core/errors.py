"""Errores del resolvedor de firma.

Por qué una jerarquía propia:
- El resolvedor convierte casi todos estos errores en diagnósticos (no fatales).
- Solo `IncompleteSigningError` atraviesa hasta la CLI en modo estricto.
"""

from __future__ import annotations

from pathlib import Path


class SigningError(Exception):
    """Base class for every signing-resolution failure."""


class MissingFileError(SigningError):
    """A file the resolver needs does not exist."""

    def __init__(self, path: Path, message: str | None = None) -> None:
        self.path = path
        super().__init__(message or f"File not found: {path}")


class MissingPropertiesFileError(MissingFileError):
    """The signing properties file (`key.properties`) is absent."""

    def __init__(self, path: Path) -> None:
        super().__init__(path, f"Properties file not found at: {path}")


class MissingKeyError(SigningError):
    """A required key is absent from the properties source."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"{key} is missing from the properties file")


class StoreFileNotFoundError(MissingFileError):
    """`storeFile` points at a keystore that does not exist on disk."""

    def __init__(self, path: Path) -> None:
        super().__init__(path, f"Keystore not found at: {path}")


class IncompleteSigningError(SigningError):
    """Raised in strict mode when a release build would be signed with an invalid credential."""

    def __init__(self, problems: list[str]) -> None:
        self.problems = list(problems)
        joined = "; ".join(self.problems)
        super().__init__(f"Release signing credential is incomplete: {joined}")
