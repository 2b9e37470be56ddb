"""Argument parsing functionality for depsnap."""

import argparse
from constants import Constants, OutputModes


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="depsnap",
        description=(
            "depsnap - Snapshot the transitive npm dependency closure of a package version"
        ),
        add_help=True,
    )

    parser.add_argument("package",
                        help="Package name, or name@version",
                        type=str)
    parser.add_argument("version",
                        help="Package version (optional when given as name@version)",
                        nargs="?",
                        type=str)

    parser.add_argument("-m", "--mode",
                        dest="MODE",
                        help="Snapshot contents: raw ranges, resolved versions, or both (default: resolved)",
                        action="store",
                        type=str.lower,
                        choices=Constants.OUTPUT_MODES,
                        default=OutputModes.RESOLVED.value)
    parser.add_argument("--direct-only",
                        dest="DIRECT_ONLY",
                        help="Only record the package's direct dependencies.",
                        action="store_true")

    parser.add_argument("-o", "--output-dir",
                        dest="OUTPUT_DIR",
                        help="Directory snapshot files are written to",
                        action="store",
                        type=str)
    parser.add_argument("--stdout",
                        dest="STDOUT",
                        help="Print snapshot JSON to standard output instead of writing files.",
                        action="store_true")

    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)
    parser.add_argument("--registry",
                        dest="REGISTRY_URL",
                        help="npm registry base URL",
                        action="store",
                        type=str)
    parser.add_argument("--timeout",
                        dest="TIMEOUT",
                        help="Registry request timeout in seconds",
                        action="store",
                        type=float)
    parser.add_argument("--retries",
                        dest="RETRIES",
                        help="Attempts per registry request",
                        action="store",
                        type=int)

    parser.add_argument("--compare",
                        dest="COMPARE",
                        help="Previous snapshot file to compare against for drift",
                        action="store",
                        type=str)
    parser.add_argument("--error-on-drift",
                        dest="ERROR_ON_DRIFT",
                        help="Exit with a non-zero status code if drift is detected.",
                        action="store_true")

    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Do not output to console.",
                        action="store_true")

    return parser.parse_args(argv)
