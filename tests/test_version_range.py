"""Tests for cabal style version ranges."""

import pytest

from cabalenv._src.version_range import VersionRange, VersionRangeError


class TestParse:
    def test_empty_is_any(self):
        assert VersionRange.parse("") == VersionRange.any()
        assert VersionRange.parse("-any").is_any()

    def test_lower_and_upper(self):
        vr = VersionRange.parse(">=1.0 && <2.0")
        assert "1.0" in vr
        assert "1.5" in vr
        assert "0.9" not in vr
        assert "2.0" not in vr

    def test_exact(self):
        vr = VersionRange.parse("==1.2.3")
        assert "1.2.3" in vr
        assert "1.2.4" not in vr

    def test_major_bound(self):
        vr = VersionRange.parse("^>=2.1.0")
        assert "2.1.0" in vr
        assert "2.1.9" in vr
        assert "2.2" not in vr
        assert "2.0.9" not in vr

    def test_major_bound_single_component(self):
        assert VersionRange.parse("^>=1") == VersionRange.parse(">=1 && <1.1")

    def test_wildcard(self):
        vr = VersionRange.parse("==1.2.*")
        assert "1.2" in vr
        assert "1.2.9.1" in vr
        assert "1.3" not in vr

    def test_or_binds_looser_than_and(self):
        vr = VersionRange.parse(">=1 && <2 || >=3")
        assert "1.5" in vr
        assert "3.5" in vr
        assert "2.5" not in vr

    def test_parentheses(self):
        vr = VersionRange.parse("(>=1 || >=3) && <2")
        assert vr == VersionRange.parse(">=1 && <2")

    def test_none(self):
        assert VersionRange.parse("-none").is_empty()
        assert VersionRange.parse("<0").is_empty()

    @pytest.mark.parametrize("text", [">=", ">= abc", "&& <2", "(>=1", ">=1 <2", "~1.0"])
    def test_invalid(self, text):
        with pytest.raises(VersionRangeError):
            VersionRange.parse(text)


class TestAlgebra:
    def test_intersection(self):
        vr = VersionRange.parse(">=1.0") & VersionRange.parse("<2.0")
        assert vr == VersionRange.parse(">=1.0 && <2.0")

    def test_intersection_is_idempotent(self):
        vr = VersionRange.parse("^>=2.1 || ==3.0")
        assert vr & vr == vr

    def test_disjoint_intersection_is_empty(self):
        vr = VersionRange.parse(">=2") & VersionRange.parse("<1")
        assert vr.is_empty()
        assert str(vr) == "<0"

    def test_adjacent_intervals_merge(self):
        vr = VersionRange.parse(">=1 && <2 || >=2 && <3")
        assert vr == VersionRange.parse(">=1 && <3")

    def test_open_ends_do_not_merge(self):
        vr = VersionRange.parse(">1 && <2 || >2 && <3")
        assert "2" not in vr
        assert len(vr.intervals) == 2

    def test_any_is_identity(self):
        vr = VersionRange.parse(">=0.12")
        assert vr & VersionRange.any() == vr


class TestRender:
    @pytest.mark.parametrize("text, rendered", [
        ("", "-any"),
        (">=1.0 && <2.0", ">=1.0 && <2.0"),
        ("^>=2.1", ">=2.1 && <2.2"),
        ("==1.2.*", ">=1.2 && <1.3"),
        ("==1.2.3", "==1.2.3"),
        ("<2 || >3", "<2 || >3"),
        ("-none", "<0"),
    ])
    def test_canonical_form(self, text, rendered):
        assert str(VersionRange.parse(text)) == rendered

    @pytest.mark.parametrize("text", [
        ">=1.0 && <2.0",
        "^>=2.1 || ==3.0.1",
        ">0.5 && <=0.9",
        "<0",
        "-any",
    ])
    def test_render_parses_back(self, text):
        vr = VersionRange.parse(text)
        assert VersionRange.parse(str(vr)) == vr
