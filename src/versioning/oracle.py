"""Registry query interface consumed by the traversal and the resolver."""

from abc import ABC, abstractmethod
from typing import Iterable, Mapping, Optional


class VersionOracle(ABC):
    """Answers "what does this package depend on" and "what versions exist".

    Implementations raise ``OracleError`` when the data source cannot be
    queried. An empty dependency mapping is a valid answer, not a failure.
    """

    @abstractmethod
    def get_direct_dependencies(self, name: str, version: Optional[str] = None) -> Mapping[str, str]:
        """Return the declared direct dependencies (name -> range).

        Args:
            name: Package name
            version: Concrete version or tag; None selects the registry default

        Returns:
            Mapping of dependency name to declared range
        """

    @abstractmethod
    def get_published_versions(self, name: str) -> Iterable[str]:
        """Return every published version string for ``name``."""
