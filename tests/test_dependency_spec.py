"""Tests for parsing dependency tokens."""

import pytest

from cabalenv._src.exceptions import InvalidDependency
from cabalenv._src.models.package import DependencySpec
from cabalenv._src.version_range import VersionRange


class TestParse:
    def test_name_and_range(self):
        dep = DependencySpec.parse("aeson >=2.0")
        assert dep.name == "aeson"
        assert dep.version_range == VersionRange.parse(">=2.0")
        assert dep.components == frozenset({"main"})

    def test_no_space_before_range(self):
        assert DependencySpec.parse("aeson>=2.0") == DependencySpec.parse("aeson >=2.0")

    def test_name_only_is_any_version(self):
        dep = DependencySpec.parse("text")
        assert dep.version_range.is_any()
        assert str(dep) == "text"

    def test_hyphenated_name(self):
        dep = DependencySpec.parse("unordered-containers ^>=0.2.19")
        assert dep.name == "unordered-containers"
        assert "0.2.20" in dep.version_range

    def test_own_library_is_main(self):
        dep = DependencySpec.parse("text:text ^>=2.0")
        assert dep.components == frozenset({"main"})

    def test_sublibrary_set(self):
        dep = DependencySpec.parse("lens:{lens, lens-internal}")
        assert dep.components == frozenset({"main", "lens-internal"})

    def test_str(self):
        assert str(DependencySpec.parse("aeson   >=2.0")) == "aeson >=2.0"

    @pytest.mark.parametrize("token", [">=2.0", "123 >=1", "aeson >=x", "text:{} >=1", ""])
    def test_invalid(self, token):
        with pytest.raises(InvalidDependency):
            DependencySpec.parse(token)

    def test_range_from_string(self):
        dep = DependencySpec(name="aeson", version_range=">=2.0")
        assert dep.version_range == VersionRange.parse(">=2.0")

    def test_serializes_range_as_text(self):
        dep = DependencySpec.parse("aeson >=2.0 && <2.3")
        assert dep.model_dump()["version_range"] == ">=2.0 && <2.3"
