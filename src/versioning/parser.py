"""Token and range parsing utilities for npm packages."""

import re
from typing import Optional, Tuple, Union

import semantic_version

from .errors import RangeParseError
from .models import PackageIdentity

RangeSpec = Union[semantic_version.NpmSpec, semantic_version.SimpleSpec]

# Dependency values that mean "any release" in package.json
_ANY_RELEASE = {"", "*", "x", "latest"}
_PRERELEASE_COMPARATOR = re.compile(r"\d+\.\d+\.\d+-[0-9A-Za-z]")
# Comparator operators; npm tolerates whitespace between operator and version
_OPERATOR_GAP = re.compile(r"(<=|>=|<|>|=|~|\^)\s+")


def tokenize_rightmost_at(s: str) -> Tuple[str, Optional[str]]:
    """Return (name, version or None) using the rightmost-@ rule.

    A leading ``@`` belongs to a scoped name and is never a separator, so
    ``@scope/pkg@1.0.0`` splits into ``@scope/pkg`` and ``1.0.0``.
    """
    s = s.strip()
    idx = s.rfind('@')
    if idx <= 0:
        return s, None
    name = s[:idx].strip()
    version = s[idx + 1:].strip()
    return name, version or None


def parse_identity_token(token: str, version: Optional[str] = None) -> PackageIdentity:
    """Build a PackageIdentity from CLI input.

    Accepts ``name@version`` or a bare name plus a separate version argument.
    An explicit ``version`` argument wins over an inline one.

    Raises:
        ValueError: if either the name or the version is missing
    """
    name, inline_version = tokenize_rightmost_at(token or "")
    chosen = (version or "").strip() or inline_version
    if not name:
        raise ValueError("Package name is required")
    if not chosen:
        raise ValueError(f"Package version is required for {name}")
    return PackageIdentity(name=name, version=chosen)


def _normalize_spec(spec_str: str) -> str:
    """Normalize npm x-ranges and loose versions into SimpleSpec-compatible form."""
    s = spec_str.strip()

    # x-ranges: 1.2.x or 1.x or 1.* -> convert to comparator pairs
    s2 = s.replace('*', 'x').lower().lstrip('v=')
    m = re.match(r'^\s*(\d+)\.(\d+)\.x\s*$', s2)
    if m:
        major, minor = int(m.group(1)), int(m.group(2))
        return f">={major}.{minor}.0,<{major}.{minor + 1}.0"

    m = re.match(r'^\s*(\d+)\.x(\.x)?\s*$', s2)
    if m:
        major = int(m.group(1))
        return f">={major}.0.0,<{major + 1}.0.0"

    # Plain major only (treated similarly to 1.x)
    m = re.match(r'^\s*(\d+)\s*$', s2)
    if m:
        major = int(m.group(1))
        return f">={major}.0.0,<{major + 1}.0.0"

    # Loose exact versions such as "v1.2.3" or "=1.2.3"
    m = re.match(r'^\s*(\d+\.\d+\.\d+\S*)\s*$', s2)
    if m:
        return f"=={m.group(1)}"

    return spec_str


def parse_range(raw: str, package: str = "<unknown>") -> RangeSpec:
    """Parse an npm dependency range into a matchable spec.

    Prefers ``NpmSpec`` which understands ^, ~, hyphen ranges, x-ranges and
    ``||`` unions natively, then falls back to a normalized ``SimpleSpec``.

    Raises:
        RangeParseError: when neither grammar accepts the expression
    """
    if raw is None:
        raise RangeParseError(package, "None", "range is missing")
    spec_str = raw.strip()
    if spec_str.lower() in _ANY_RELEASE:
        spec_str = "*"
    spec_str = _OPERATOR_GAP.sub(r"\1", spec_str.replace("~>", "~"))
    try:
        return semantic_version.NpmSpec(spec_str)
    except ValueError:
        pass
    try:
        return semantic_version.SimpleSpec(_normalize_spec(spec_str))
    except ValueError as e:
        raise RangeParseError(package, raw, str(e)) from e


def range_includes_prerelease(raw: str) -> bool:
    """Return True when a comparator in the range names a pre-release."""
    return bool(raw) and bool(_PRERELEASE_COMPARATOR.search(raw))
