"""
Shared fixtures: a throwaway Gradle project layout on disk.
"""

import os
import textwrap
from pathlib import Path

import pytest

from core.config import AppSettings, ProjectLayout


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """No KEYPROPS_* variables or ./.env leak in from the developer machine."""
    for name in list(os.environ):
        if name.startswith("KEYPROPS_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def write_properties(path: Path, body: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


@pytest.fixture
def write_props():
    return write_properties


@pytest.fixture
def android_root(tmp_path):
    """`android/` with an `app/` module, the way Flutter lays it out."""
    root = tmp_path / "android"
    (root / "app").mkdir(parents=True)
    return root


@pytest.fixture
def keystore(android_root):
    path = android_root / "app" / "upload-keystore.p12"
    path.write_bytes(b"\x30\x82fake-pkcs12")
    return path


@pytest.fixture
def layout(android_root):
    return ProjectLayout(root_dir=android_root, module_dir="app")


@pytest.fixture
def full_key_properties(android_root, keystore):
    return write_properties(
        android_root / "key.properties",
        """
        storePassword=s3cret
        keyPassword=k3y-pass
        keyAlias=upload
        storeFile=upload-keystore.p12
        """,
    )


@pytest.fixture
def settings(android_root):
    return AppSettings(_env_file=None, project_root=android_root, module_dir="app")
