"""Tests for the dependency manifest model."""

import pytest

from djdock.exceptions import DataValidationError
from djdock.pipeline.config_emitter.manifest import (
    DependencyManifest,
    Requirement,
    build_manifest,
    normalize_name,
)

DENY = ["bcc==0.29.1"]


def test_parse_skips_blanks_and_comments():
    manifest = DependencyManifest.parse("# pinned\n\nasgiref==3.8.1\n  Django>=5.0 \n")
    assert manifest.lines() == ["asgiref==3.8.1", "Django>=5.0"]


def test_requirement_names():
    assert Requirement("Django_Extensions==3.2").name == "django-extensions"
    assert Requirement("-e git+https://x#egg=y").name is None
    assert Requirement("BCC == 0.29.1").canonical() == "bcc==0.29.1"
    assert normalize_name("Zope.Interface") == "zope-interface"


def test_denylisted_entry_removed():
    manifest, removed, added = build_manifest(
        "bcc==0.29.1\nDjango==5.0.6\n", DENY, "Django", lambda: pytest.fail("not needed")
    )
    assert manifest.render() == "Django==5.0.6\n"
    assert [r.line for r in removed] == ["bcc==0.29.1"]
    assert added is None


def test_other_bcc_versions_are_kept():
    manifest, removed, _ = build_manifest("bcc==0.30.0\nDjango==5.0.6\n", DENY, "Django", str)
    assert "bcc==0.30.0" in manifest.lines()
    assert removed == []


def test_framework_line_appended_when_missing():
    manifest, _, added = build_manifest("asgiref==3.8.1\n", DENY, "Django", lambda: "5.0.6")
    assert manifest.lines() == ["asgiref==3.8.1", "Django==5.0.6"]
    assert added == Requirement("Django==5.0.6")
    assert manifest.count("django") == 1


def test_framework_detected_case_insensitively():
    manifest, _, added = build_manifest("django==4.2\n", DENY, "Django", lambda: "9")
    assert added is None and manifest.count("Django") == 1


def test_validate_rejects_duplicates_and_denylisted():
    with pytest.raises(DataValidationError, match="exactly once"):
        DependencyManifest.parse("Django==5.0\ndjango==4.2\n").validate(DENY, "Django")
    with pytest.raises(DataValidationError, match="denylisted"):
        DependencyManifest.parse("Django==5.0\nbcc==0.29.1\n").validate(DENY, "Django")


def test_empty_manifest_renders_empty():
    assert DependencyManifest().render() == ""
    manifest, added = DependencyManifest().ensure("Django", "Django==5.0")
    assert added and manifest.render() == "Django==5.0\n"
