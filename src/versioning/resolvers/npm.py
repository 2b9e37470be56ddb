"""NPM range resolver using semantic versioning."""

import logging
from typing import Iterable, List, Optional, Tuple

import semantic_version

from common.logging_utils import extra_context, is_debug_enabled
from ..errors import NoMatchError
from ..oracle import VersionOracle
from ..parser import parse_range, range_includes_prerelease

logger = logging.getLogger(__name__)


class NpmRangeResolver:
    """Resolve npm dependency ranges to the highest published matching version."""

    def __init__(self, oracle: VersionOracle):
        self.oracle = oracle

    def resolve(self, name: str, range_spec: str) -> str:
        """Return the highest published version of ``name`` satisfying ``range_spec``.

        Args:
            name: Package name
            range_spec: Declared npm range, e.g. "^1.2.0"

        Returns:
            The matching version string as published by the registry

        Raises:
            OracleError: published versions could not be fetched
            RangeParseError: the range is not a valid constraint expression
            NoMatchError: no published version satisfies the range
        """
        candidates = list(self.oracle.get_published_versions(name))
        version = self.pick(name, range_spec, candidates)
        if is_debug_enabled(logger):
            logger.debug(
                "Resolved range",
                extra=extra_context(
                    event="resolve",
                    component="resolver",
                    package=name,
                    spec=range_spec,
                    candidate_count=len(candidates),
                    resolved_version=version,
                )
            )
        return version

    def pick(self, name: str, range_spec: str, candidates: Iterable[str]) -> str:
        """Apply npm semver rules to select the highest matching candidate."""
        spec = parse_range(range_spec, package=name)
        include_prerelease = range_includes_prerelease(range_spec)

        candidates = list(candidates)
        matching: List[Tuple[semantic_version.Version, str]] = []
        for raw in candidates:
            ver = _parse_version(raw)
            if ver is None:
                continue  # Skip invalid versions
            # Skip pre-releases unless the range names one
            if ver.prerelease and not include_prerelease:
                continue
            if spec.match(ver):
                matching.append((ver, raw))

        if not matching:
            raise NoMatchError(name, range_spec, len(candidates))

        # Highest by semver precedence, never by string order
        best = max(matching, key=lambda item: item[0])
        return best[1]


def _parse_version(raw: str) -> Optional[semantic_version.Version]:
    """Parse a published version string, tolerating a leading ``v``."""
    if not isinstance(raw, str):
        return None
    text = raw.strip()
    if text[:1] in ("v", "="):
        text = text[1:]
    try:
        return semantic_version.Version(text)
    except ValueError:
        return None
