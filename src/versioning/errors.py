"""Errors raised while building a dependency snapshot."""

from typing import Optional


class DepsnapError(Exception):
    """Base class for every failure the resolver core reports."""


class OracleError(DepsnapError):
    """The registry could not answer a dependency or version query."""

    def __init__(self, message: str, package: Optional[str] = None,
                 status_code: Optional[int] = None):
        super().__init__(message)
        self.package = package
        self.status_code = status_code


class RangeParseError(DepsnapError):
    """A declared version range is not a valid constraint expression."""

    def __init__(self, package: str, range_spec: str, reason: Optional[str] = None):
        message = f"Invalid version range '{range_spec}' for {package}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.package = package
        self.range_spec = range_spec


class NoMatchError(DepsnapError):
    """A valid range matched none of the published versions."""

    def __init__(self, package: str, range_spec: str, candidate_count: int = 0):
        super().__init__(
            f"No version found for {package} in range {range_spec} "
            f"({candidate_count} published)"
        )
        self.package = package
        self.range_spec = range_spec
        self.candidate_count = candidate_count
