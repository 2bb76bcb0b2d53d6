"""
Unit tests for build configuration assembly, release validation and framework versions.
"""

import json

import pytest

from adapters.json_exporter import build_configuration_payload, export_build_configuration_json
from core.domain.models import DiagnosticCode, FrameworkVersions
from core.errors import IncompleteSigningError
from core.services.build_config import assemble_build_configuration, validate_release
from core.services.credential_resolver import CredentialResolver
from core.services.framework_versions import load_framework_versions


@pytest.fixture
def resolved(layout, full_key_properties):
    return CredentialResolver(layout).resolve()


@pytest.mark.unit
def test_release_variant_uses_release_signing_without_shrinking(resolved, settings):
    config = assemble_build_configuration(credential=resolved.credential, settings=settings)

    release = config.build_types["release"]
    assert release.signing_config == "release"
    assert release.minify_enabled is False
    assert release.shrink_resources is False
    assert config.signing_config_for("release") == resolved.credential
    assert config.signing_config_for("debug") is None
    assert config.signing_config_for("profile") is None


@pytest.mark.unit
def test_defaults_mirror_the_gradle_script(resolved, settings):
    config = assemble_build_configuration(credential=resolved.credential, settings=settings)

    assert config.namespace == "app.ecash"
    assert config.default_config.application_id == "app.ecash"
    assert config.ndk_version == "27.0.12077973"
    assert config.java_version == "11"
    assert config.jvm_target == "11"
    assert config.default_config.version_code == 1
    assert config.default_config.version_name == "1.0"


@pytest.mark.unit
def test_framework_versions_flow_into_default_config(resolved, settings):
    versions = FrameworkVersions(version_code=42, version_name="2.3.1", min_sdk=23, target_sdk=35, compile_sdk=35)
    config = assemble_build_configuration(credential=resolved.credential, settings=settings, versions=versions)

    assert config.compile_sdk == 35
    assert config.default_config.min_sdk == 23
    assert config.default_config.target_sdk == 35
    assert config.default_config.version_code == 42
    assert config.default_config.version_name == "2.3.1"


@pytest.mark.unit
def test_validate_release_lenient_returns_problems(layout):
    result = CredentialResolver(layout).resolve()
    problems = validate_release(result, strict=False)
    assert "storeFile is not set" in problems


@pytest.mark.unit
def test_validate_release_strict_fails_fast(layout):
    result = CredentialResolver(layout).resolve()
    with pytest.raises(IncompleteSigningError) as info:
        validate_release(result, strict=True)
    assert "storeFile is not set" in info.value.problems
    assert "incomplete" in str(info.value)


@pytest.mark.unit
def test_validate_release_strict_passes_complete_credential(resolved):
    assert validate_release(resolved, strict=True) == []


@pytest.mark.unit
def test_load_framework_versions_from_local_properties(layout, android_root, write_props):
    write_props(
        android_root / "local.properties",
        """
        sdk.dir=/opt/android-sdk
        flutter.sdk=/opt/flutter
        flutter.versionName=1.4.0
        flutter.versionCode=17
        flutter.minSdkVersion=24
        """,
    )

    versions, diagnostics = load_framework_versions(layout)

    assert versions.version_code == 17
    assert versions.version_name == "1.4.0"
    assert versions.min_sdk == 24
    assert versions.target_sdk is None
    assert str(versions.flutter_sdk) == "/opt/flutter"
    assert all(d.ok for d in diagnostics)


@pytest.mark.unit
def test_load_framework_versions_defaults_when_missing(layout):
    versions, diagnostics = load_framework_versions(layout)
    assert versions == FrameworkVersions()
    assert [d.level for d in diagnostics] == ["warning"]


@pytest.mark.unit
def test_load_framework_versions_ignores_non_numeric(layout, android_root, write_props):
    write_props(android_root / "local.properties", "flutter.versionCode=abc\n")

    versions, diagnostics = load_framework_versions(layout)

    assert versions.version_code == 1
    assert any("not a number" in d.message for d in diagnostics)


@pytest.mark.unit
def test_load_framework_versions_skips_values_below_one(layout, android_root, write_props):
    write_props(
        android_root / "local.properties",
        """
        flutter.versionCode=0
        flutter.minSdkVersion=-3
        flutter.targetSdkVersion=34
        """,
    )

    versions, diagnostics = load_framework_versions(layout)

    assert versions.version_code == 1
    assert versions.min_sdk is None
    assert versions.target_sdk == 34
    skipped = [d.message for d in diagnostics if d.code == DiagnosticCode.VERSIONS_MISSING]
    assert skipped == [
        "flutter.versionCode must be >= 1: '0'",
        "flutter.minSdkVersion must be >= 1: '-3'",
    ]


@pytest.mark.unit
def test_load_framework_versions_overrides_win(layout, android_root, write_props):
    write_props(android_root / "local.properties", "flutter.versionCode=3\n")
    versions, _ = load_framework_versions(layout, overrides={"version_code": 9, "version_name": None})
    assert versions.version_code == 9
    assert versions.version_name == "1.0"


@pytest.mark.unit
def test_json_payload_masks_secrets_by_default(resolved, settings):
    config = assemble_build_configuration(credential=resolved.credential, settings=settings)

    payload = build_configuration_payload(config)
    release = payload["signing_configs"]["release"]

    assert release["store_password"] == "**********"
    assert release["key_password"] == "**********"
    assert release["key_alias"] == "upload"
    assert release["store_type"] == "pkcs12"


@pytest.mark.unit
def test_json_payload_reveals_secrets_on_request(resolved, settings):
    config = assemble_build_configuration(credential=resolved.credential, settings=settings)
    release = build_configuration_payload(config, reveal_secrets=True)["signing_configs"]["release"]
    assert release["store_password"] == "s3cret"
    assert release["key_password"] == "k3y-pass"


@pytest.mark.unit
def test_export_json_writes_stable_file(resolved, settings, tmp_path):
    config = assemble_build_configuration(credential=resolved.credential, settings=settings)
    out = export_build_configuration_json(config=config, output_path=tmp_path / "out" / "signing.json")

    text = out.read_text(encoding="utf-8")
    assert text.endswith("\n")
    data = json.loads(text)
    assert data["build_types"]["release"]["signing_config"] == "release"
    assert "s3cret" not in text
