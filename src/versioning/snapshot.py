"""Assemble snapshot records from a root identity and its closure."""

import logging
from typing import Dict, Mapping

from .models import PackageIdentity, ResolutionMode, Snapshot, freeze
from .resolvers.npm import NpmRangeResolver

logger = logging.getLogger(__name__)


class SnapshotBuilder:
    """Build immutable snapshots, optionally resolving every range first."""

    def __init__(self, resolver: NpmRangeResolver):
        self.resolver = resolver

    def build(self, root: PackageIdentity, closure: Mapping[str, str],
              resolve_versions: bool) -> Snapshot:
        """Return the snapshot for ``root``.

        With ``resolve_versions`` every closure entry is resolved in a
        single sequential pass. The first resolution error propagates and
        no snapshot is produced.
        """
        if not resolve_versions:
            return Snapshot(root.name, root.version, freeze(closure), ResolutionMode.RAW)

        resolved: Dict[str, str] = {}
        for name, range_spec in closure.items():
            resolved[name] = self.resolver.resolve(name, range_spec)
        logger.info("Resolved %d dependency ranges for %s", len(resolved), root.key)
        return Snapshot(root.name, root.version, freeze(resolved), ResolutionMode.RESOLVED)
