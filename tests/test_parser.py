"""Tests for identity token and range parsing."""

import pytest

from versioning.errors import RangeParseError
from versioning.models import PackageIdentity
from versioning.parser import (
    parse_identity_token,
    parse_range,
    range_includes_prerelease,
    tokenize_rightmost_at,
    _normalize_spec,
)


class TestIdentityParsing:
    """name@version handling, including scoped packages."""

    def test_plain_name_and_version(self):
        assert parse_identity_token("express@4.18.2") == PackageIdentity("express", "4.18.2")

    def test_separate_version_argument(self):
        assert parse_identity_token("express", "4.18.2") == PackageIdentity("express", "4.18.2")

    def test_scoped_name(self):
        identity = parse_identity_token("@types/node@18.0.0")
        assert identity.name == "@types/node"
        assert identity.version == "18.0.0"
        assert identity.key == "@types/node@18.0.0"

    def test_scoped_name_without_version_needs_argument(self):
        assert tokenize_rightmost_at("@types/node") == ("@types/node", None)
        with pytest.raises(ValueError):
            parse_identity_token("@types/node")

    def test_explicit_version_wins(self):
        assert parse_identity_token("lodash@1.0.0", "2.0.0").version == "2.0.0"

    def test_missing_name(self):
        with pytest.raises(ValueError):
            parse_identity_token("", "1.0.0")

    def test_trailing_at_has_no_version(self):
        assert tokenize_rightmost_at("lodash@") == ("lodash", None)


class TestRangeParsing:
    """Range grammar and pre-release opt-in detection."""

    @pytest.mark.parametrize("spec", ["^1.2.0", "~1.2.0", ">=2.0.0 <3.0.0", "1.x", "*", "", "latest"])
    def test_valid_ranges(self, spec):
        assert parse_range(spec, "pkg") is not None

    def test_invalid_range_carries_package(self):
        with pytest.raises(RangeParseError) as exc_info:
            parse_range("::nope::", "pkg")
        assert exc_info.value.package == "pkg"
        assert exc_info.value.range_spec == "::nope::"

    def test_none_range_is_parse_error(self):
        with pytest.raises(RangeParseError):
            parse_range(None, "pkg")  # type: ignore[arg-type]

    def test_normalize_spec_fallbacks(self):
        assert _normalize_spec("1.2.x") == ">=1.2.0,<1.3.0"
        assert _normalize_spec("3.*") == ">=3.0.0,<4.0.0"
        assert _normalize_spec("7") == ">=7.0.0,<8.0.0"
        assert _normalize_spec("v1.2.3") == "==1.2.3"

    @pytest.mark.parametrize("spec,expected", [
        ("^1.0.0", False),
        ("1.0.0 - 2.0.0", False),
        (">=1.1.0-rc.1", True),
        ("^2.0.0-beta.3", True),
        ("", False),
    ])
    def test_range_includes_prerelease(self, spec, expected):
        assert range_includes_prerelease(spec) is expected
