"""depsnap - Transitive npm dependency snapshot tool

    Walks the dependency closure of one published package version, optionally
    resolves every declared range to the highest published matching version,
    and writes the result as a JSON snapshot for reproducibility and drift
    checks.

    Returns:
        int: Exit code
"""
import json
import logging
import os
import sys
from typing import Any, Dict, List, Tuple

from args import parse_args
from cli_config import ConfigError, SnapshotConfig, load_config
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from constants import Constants, ExitCodes, OutputModes
from registry.npm.client import NpmRegistryClient
from versioning.closure import ClosureTraversal
from versioning.drift import diff_snapshots, load_snapshot
from versioning.errors import NoMatchError, OracleError, RangeParseError
from versioning.models import PackageIdentity, ResolutionMode, Snapshot
from versioning.oracle import VersionOracle
from versioning.parser import parse_identity_token
from versioning.resolvers.npm import NpmRangeResolver
from versioning.snapshot import SnapshotBuilder

logger = logging.getLogger(__name__)


def _setup_logging(args) -> None:
    """Configure logging based on CLI arguments."""
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.ENV_LOG_LEVEL] = str(args.LOG_LEVEL).upper()
    configure_logging()

    if getattr(args, "QUIET", False):
        for handler in logging.getLogger().handlers:
            if getattr(handler, "_depsnap_handler", False):
                handler.setLevel(logging.CRITICAL + 1)

    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(Constants.LOG_FILE_FORMAT))
        logging.getLogger().addHandler(file_handler)
        logger.info("Logging to file: %s", log_file)


def _modes_for(mode: str) -> List[ResolutionMode]:
    """Map the CLI output mode onto the snapshot shapes to build."""
    if mode == OutputModes.RAW.value:
        return [ResolutionMode.RAW]
    if mode == OutputModes.BOTH.value:
        return [ResolutionMode.RAW, ResolutionMode.RESOLVED]
    return [ResolutionMode.RESOLVED]


def build_snapshots(oracle: VersionOracle, root: PackageIdentity, modes: List[ResolutionMode],
                    direct_only: bool = False) -> List[Snapshot]:
    """Traverse once and build one snapshot per requested mode.

    Every snapshot is built before any is returned, so a failure leaves
    nothing to persist.
    """
    closure = ClosureTraversal(oracle, direct_only=direct_only).traverse(root)
    builder = SnapshotBuilder(NpmRangeResolver(oracle))
    return [builder.build(root, closure, mode == ResolutionMode.RESOLVED) for mode in modes]


def snapshot_path(config: SnapshotConfig, snapshot: Snapshot, direct_only: bool = False) -> str:
    """Return the file path a snapshot is written to.

    Raw snapshots go to ``name@version.json``, resolved ones to
    ``name@version-latest-all.json`` (``-latest.json`` for direct-only runs).
    """
    if snapshot.mode == ResolutionMode.RAW:
        suffix = Constants.RAW_SUFFIX
    elif direct_only:
        suffix = Constants.RESOLVED_DIRECT_SUFFIX
    else:
        suffix = Constants.RESOLVED_SUFFIX
    file_name = f"{snapshot.identity.key}{suffix}.json".replace("/", "__")
    return os.path.join(config.output_dir, file_name)


def export_json(outputs: List[Tuple[Snapshot, str]]) -> None:
    """Exports snapshots to JSON files.

    Every file is first written next to its target with a ``.tmp`` suffix;
    targets are only replaced once all of them were staged, so a failed
    write leaves no new snapshot behind.

    Args:
        outputs (list): (snapshot, path) pairs to persist.
    """
    staged: List[Tuple[str, str]] = []
    try:
        for snapshot, path in outputs:
            directory = os.path.dirname(path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            tmp_path = path + ".tmp"
            with open(tmp_path, 'w', encoding='utf-8') as file:
                staged.append((tmp_path, path))
                json.dump(snapshot.to_dict(), file, indent=2)
                file.write("\n")
        for tmp_path, path in staged:
            os.replace(tmp_path, path)
            logging.info("JSON file has been successfully exported at: %s", path)
    except OSError as e:
        for tmp_path, _ in staged:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
        logging.error("JSON file couldn't be written to disk: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)


def load_previous(compare_path: str) -> Dict[str, Any]:
    """Load the snapshot to compare against, exiting on unreadable input."""
    try:
        return load_snapshot(compare_path)
    except (OSError, ValueError) as e:
        logging.error("Cannot load snapshot for comparison: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)


def check_drift(previous: Dict[str, Any], snapshot: Snapshot, compare_path: str) -> bool:
    """Compare ``snapshot`` with a stored one; return True when they differ."""
    if (previous.get("name"), previous.get("version")) != (snapshot.name, snapshot.version):
        logging.warning(
            "Comparing against a snapshot of %s@%s",
            previous.get("name"), previous.get("version"),
        )
    diff = diff_snapshots(previous, snapshot)
    if not diff.has_drift:
        logging.info("No drift against %s", compare_path)
        return False
    logging.warning("Drift detected against %s:", compare_path)
    for line in diff.summary_lines():
        logging.warning("  %s", line)
    return True


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    _setup_logging(args)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main")
        )

    try:
        config = load_config(args)
    except ConfigError as e:
        logging.error("Error loading config: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)

    try:
        root = parse_identity_token(args.package, args.version)
    except ValueError as e:
        logging.error("%s. Usage: depsnap <packageName> <version>", e)
        sys.exit(ExitCodes.INPUT_ERROR.value)

    logging.info("Package Name: %s", root.name)
    logging.info("Package Version: %s", root.version)

    # Read before any snapshot is written, the paths may coincide
    previous = load_previous(args.COMPARE) if args.COMPARE else None

    client = NpmRegistryClient.from_config(config)
    try:
        snapshots = build_snapshots(client, root, _modes_for(args.MODE), args.DIRECT_ONLY)
    except OracleError as e:
        logging.error("Registry error: %s", e)
        sys.exit(ExitCodes.CONNECTION_ERROR.value)
    except (RangeParseError, NoMatchError) as e:
        logging.error("Error fetching latest version for %s: %s", e.package, e)
        sys.exit(ExitCodes.RESOLUTION_ERROR.value)

    if args.STDOUT:
        for snapshot in snapshots:
            print(json.dumps(snapshot.to_dict(), indent=2))
    else:
        export_json([(s, snapshot_path(config, s, args.DIRECT_ONLY)) for s in snapshots])

    if previous is not None:
        drift = check_drift(previous, snapshots[-1], args.COMPARE)
        if drift and args.ERROR_ON_DRIFT:
            sys.exit(ExitCodes.DRIFT_DETECTED.value)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI finished",
            extra=extra_context(event="function_exit", component="cli", action="main",
                                outcome="success")
        )
    sys.exit(ExitCodes.SUCCESS.value)


if __name__ == "__main__":
    main()
