"""Shared fixtures: an in-memory registry standing in for npm."""

from typing import Dict, Iterable, List, Mapping, Optional, Tuple

import pytest

from common import http_client
from versioning.errors import OracleError
from versioning.oracle import VersionOracle


class FakeOracle(VersionOracle):
    """In-memory oracle that records every query it answers.

    ``dependencies`` is keyed by package name, or by ``name@version`` for
    version-specific answers. Names in ``failing`` raise OracleError.
    """

    def __init__(self, dependencies: Optional[Dict[str, Mapping[str, str]]] = None,
                 versions: Optional[Dict[str, Iterable[str]]] = None,
                 failing: Iterable[str] = ()):
        # Copies, so tests mutating an oracle never touch shared module data
        self.dependencies = {
            k: (dict(v) if v is not None else None) for k, v in (dependencies or {}).items()
        }
        self.versions = {k: list(v) for k, v in (versions or {}).items()}
        self.failing = set(failing)
        self.dependency_calls: List[Tuple[str, Optional[str]]] = []
        self.version_calls: List[str] = []

    def get_direct_dependencies(self, name, version=None):
        self.dependency_calls.append((name, version))
        if name in self.failing:
            raise OracleError(f"lookup failed for {name}", package=name)
        if version is not None and f"{name}@{version}" in self.dependencies:
            return self.dependencies[f"{name}@{version}"]
        return self.dependencies.get(name)

    def get_published_versions(self, name):
        self.version_calls.append(name)
        if name in self.failing:
            raise OracleError(f"lookup failed for {name}", package=name)
        return list(self.versions.get(name, []))


@pytest.fixture
def fake_oracle():
    """Factory for FakeOracle instances."""
    return FakeOracle


@pytest.fixture(autouse=True)
def _clear_http_cache():
    """Keep the module-level HTTP response cache isolated per test."""
    http_client.clear_cache()
    yield
    http_client.clear_cache()
