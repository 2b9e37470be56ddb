"""NPM registry client: packument lookups backing the version oracle."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import quote

from constants import Constants
from common.http_client import get_json
from common.logging_utils import extra_context, is_debug_enabled, Timer, safe_url
from versioning.errors import OracleError
from versioning.oracle import VersionOracle

logger = logging.getLogger(__name__)

PACKUMENT_HEADERS = {"Accept": "application/json"}


def package_url(registry_url: str, name: str) -> str:
    """Return the packument URL for ``name``; scoped names keep their ``@``."""
    base = registry_url if registry_url.endswith("/") else registry_url + "/"
    return base + quote(name, safe="@")


class NpmRegistryClient(VersionOracle):
    """Answers dependency and version queries from npm packuments.

    One packument per package name is fetched; both oracle questions are
    answered from it, and the HTTP layer caches it for repeated lookups.
    """

    def __init__(
        self,
        registry_url: str = Constants.REGISTRY_URL_NPM,
        timeout: float = Constants.REQUEST_TIMEOUT,
        retries: int = Constants.HTTP_RETRY_MAX,
    ):
        self.registry_url = registry_url
        self.timeout = timeout
        self.retries = retries

    @classmethod
    def from_config(cls, config: Any) -> "NpmRegistryClient":
        """Create a client from a SnapshotConfig."""
        return cls(
            registry_url=config.registry_url,
            timeout=config.request_timeout,
            retries=config.retry_max,
        )

    def fetch_packument(self, name: str) -> Dict[str, Any]:
        """Fetch and return the full packument of ``name``.

        Raises:
            OracleError: transport failure, missing package or bad payload
        """
        url = package_url(self.registry_url, name)
        with Timer() as timer:
            status_code, _, data = get_json(
                url,
                headers=PACKUMENT_HEADERS,
                timeout=self.timeout,
                retries=self.retries,
            )

        if status_code == 0:
            raise OracleError(f"Registry unreachable while fetching {name}", package=name)
        if status_code == 404:
            logger.warning(
                "Package not found in registry",
                extra=extra_context(
                    event="http_response",
                    outcome="not_found",
                    status_code=404,
                    target=safe_url(url),
                    package_manager="npm"
                )
            )
            raise OracleError(f"Package {name} not found in registry", package=name, status_code=404)
        if status_code != 200:
            raise OracleError(
                f"Unexpected status code ({status_code}) fetching {name}",
                package=name,
                status_code=status_code,
            )
        if not isinstance(data, dict):
            raise OracleError(f"Couldn't decode registry response for {name}", package=name,
                              status_code=status_code)

        if is_debug_enabled(logger):
            logger.debug(
                "Fetched packument",
                extra=extra_context(
                    event="http_response",
                    outcome="success",
                    status_code=status_code,
                    duration_ms=timer.duration_ms(),
                    package_manager="npm",
                    package=name,
                )
            )
        return data

    def _version_entry(self, packument: Dict[str, Any], name: str, version: Optional[str]) -> Dict[str, Any]:
        """Pick the manifest of ``version``, resolving dist-tags and the default."""
        versions = packument.get("versions") or {}
        tags = packument.get("dist-tags") or {}
        wanted = version or "latest"
        if wanted not in versions and wanted in tags:
            wanted = tags[wanted]
        if wanted not in versions:
            raise OracleError(f"Version {version or 'latest'} of {name} not found in registry",
                              package=name)
        entry = versions[wanted]
        return entry if isinstance(entry, dict) else {}

    def get_direct_dependencies(self, name: str, version: Optional[str] = None) -> Mapping[str, str]:
        """Return the ``dependencies`` of ``name@version`` (default: latest)."""
        logger.debug("Checking package: %s@%s", name, version or "latest")
        entry = self._version_entry(self.fetch_packument(name), name, version)
        deps = entry.get("dependencies") or {}
        if not isinstance(deps, dict):
            raise OracleError(f"Malformed dependencies for {name}@{version or 'latest'}", package=name)
        return {str(k): str(v) for k, v in deps.items()}

    def get_published_versions(self, name: str) -> List[str]:
        """Return every version key of the packument of ``name``."""
        versions = self.fetch_packument(name).get("versions") or {}
        return list(versions.keys())
