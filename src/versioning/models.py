"""Data models for dependency closures and snapshots."""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping


class ResolutionMode(Enum):
    """Shape of a snapshot's dependencies field."""
    RAW = "raw"
    RESOLVED = "resolved"


def freeze(mapping: Mapping[str, str]) -> Mapping[str, str]:
    """Return a read-only copy of a name -> string mapping."""
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class PackageIdentity:
    """A specific published package version."""
    name: str
    version: str

    @property
    def key(self) -> str:
        """Return the ``name@version`` form used by npm."""
        return f"{self.name}@{self.version}"

    def __str__(self) -> str:
        return self.key


@dataclass(frozen=True)
class Snapshot:
    """Closure of a root package, with either raw ranges or resolved versions."""
    name: str
    version: str
    dependencies: Mapping[str, str] = field(default_factory=lambda: freeze({}))
    mode: ResolutionMode = ResolutionMode.RAW

    @property
    def identity(self) -> PackageIdentity:
        """Return the root identity of this snapshot."""
        return PackageIdentity(self.name, self.version)

    def to_dict(self) -> Dict[str, object]:
        """Serialize to the persisted JSON shape.

        Dependency keys are sorted so repeated runs produce identical files.
        """
        return {
            "name": self.name,
            "version": self.version,
            "dependencies": {k: self.dependencies[k] for k in sorted(self.dependencies)},
        }
