"""Breadth-first discovery of a package's transitive dependency closure."""

import logging
from collections import deque
from typing import Deque, Dict, Mapping, Optional, Set, Tuple

from common.logging_utils import extra_context, is_debug_enabled
from .models import PackageIdentity, freeze
from .oracle import VersionOracle

logger = logging.getLogger(__name__)


class ClosureTraversal:
    """Collect every transitive dependency name with its last-seen range.

    Children are queued by name only: the concrete version of a child is
    not known until resolution, so the oracle is asked for the registry's
    default version. A name is queried at most once per traversal, which
    also guarantees termination on cyclic graphs. When several parents
    declare the same dependency, the range written last in FIFO order wins.
    """

    def __init__(self, oracle: VersionOracle, direct_only: bool = False):
        self.oracle = oracle
        self.direct_only = direct_only
        self.oracle_calls = 0

    def traverse(self, root: PackageIdentity) -> Mapping[str, str]:
        """Return the read-only closure map (name -> declared range) of ``root``.

        Raises:
            OracleError: any dependency lookup failed
        """
        self.oracle_calls = 0
        closure: Dict[str, str] = {}
        visited: Set[str] = set()
        queue: Deque[Tuple[str, Optional[str]]] = deque([(root.name, root.version)])

        while queue:
            name, version = queue.popleft()
            if name in visited:
                continue
            visited.add(name)

            deps = self._query(name, version)
            for dep_name, dep_range in deps.items():
                closure[dep_name] = dep_range
                if not self.direct_only and dep_name not in visited:
                    queue.append((dep_name, None))

            if self.direct_only:
                break

        logger.info(
            "Discovered %d dependencies of %s (%d registry lookups)",
            len(closure), root.key, self.oracle_calls,
        )
        return freeze(closure)

    def _query(self, name: str, version: Optional[str]) -> Mapping[str, str]:
        self.oracle_calls += 1
        deps = self.oracle.get_direct_dependencies(name, version)
        if is_debug_enabled(logger):
            logger.debug(
                "Fetched direct dependencies",
                extra=extra_context(
                    event="traverse",
                    component="closure",
                    package=name,
                    version=version,
                    count=len(deps or {}),
                )
            )
        return deps or {}
