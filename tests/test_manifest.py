"""Tests for the synthetic cabal package."""

import pytest

from cabalenv._src.exceptions import UnrepresentableConstraint
from cabalenv._src.manifest import synthesize_manifest, synthesize_project
from cabalenv._src.version_range import VersionRange


def test_declares_only_requested_dependency():
    manifest = synthesize_manifest({"aeson": VersionRange.parse(">=2.0")})
    assert "name:          fake-package\n" in manifest
    assert "  build-depends:\n    , aeson >=2.0\n" in manifest
    assert manifest.count("    , ") == 1


def test_any_version_is_bare_name():
    manifest = synthesize_manifest({"text": VersionRange.any()})
    assert manifest.endswith("    , text\n")


def test_deterministic():
    one = synthesize_manifest({"b": VersionRange.parse(">=1"), "a": VersionRange.parse("<2")})
    two = synthesize_manifest({"a": VersionRange.parse("<2"), "b": VersionRange.parse(">=1")})
    assert one == two
    assert one.index(", a <2") < one.index(", b >=1")


def test_empty_range_is_written():
    manifest = synthesize_manifest({"pkg": VersionRange.none()})
    assert "    , pkg <0\n" in manifest


def test_no_dependencies():
    assert "build-depends" not in synthesize_manifest({})


@pytest.mark.parametrize("text", [">=1.0rc1", "<2.0.post1", "==1.0+local", ">=1!2.0", ">=1234567890"])
def test_unrepresentable(text):
    with pytest.raises(UnrepresentableConstraint):
        synthesize_manifest({"pkg": VersionRange.parse(text)})


def test_project_pins_compiler():
    project = synthesize_project("ghc-9.6.3")
    assert "packages: .\n" in project
    assert "with-compiler: ghc-9.6.3\n" in project
