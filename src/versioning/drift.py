"""Compare a fresh snapshot with one written by an earlier run."""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Tuple

from .models import Snapshot


@dataclass
class SnapshotDiff:
    """Dependency-level differences between two snapshots of the same root."""
    added: Dict[str, str] = field(default_factory=dict)
    removed: Dict[str, str] = field(default_factory=dict)
    changed: Dict[str, Tuple[str, str]] = field(default_factory=dict)

    @property
    def has_drift(self) -> bool:
        """Return True when any dependency was added, removed or changed."""
        return bool(self.added or self.removed or self.changed)

    def summary_lines(self) -> List[str]:
        """Human-readable lines, one per difference, sorted by name."""
        lines = [f"+ {k} {v}" for k, v in sorted(self.added.items())]
        lines += [f"- {k} {v}" for k, v in sorted(self.removed.items())]
        lines += [f"~ {k} {old} -> {new}" for k, (old, new) in sorted(self.changed.items())]
        return lines


def load_snapshot(path: str) -> Dict[str, Any]:
    """Read a persisted snapshot.

    Raises:
        OSError: the file cannot be read
        ValueError: the content is not a snapshot with a flat dependency map
    """
    with open(path, "r", encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: snapshot must be a JSON object")
    deps = data.get("dependencies") or {}
    if not isinstance(deps, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in deps.items()
    ):
        raise ValueError(f"{path}: dependencies must map names to strings")
    data["dependencies"] = deps
    return data


def diff_snapshots(previous: Mapping[str, Any], current: Snapshot) -> SnapshotDiff:
    """Return what changed from ``previous`` (a loaded snapshot) to ``current``."""
    old = previous.get("dependencies") or {}
    new = current.dependencies
    diff = SnapshotDiff()
    for name, value in new.items():
        if name not in old:
            diff.added[name] = value
        elif old[name] != value:
            diff.changed[name] = (old[name], value)
    for name, value in old.items():
        if name not in new:
            diff.removed[name] = value
    return diff
