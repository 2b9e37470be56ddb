"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    DRIFT_DETECTED = 3
    RESOLUTION_ERROR = 4
    INPUT_ERROR = 5


class OutputModes(Enum):
    """Snapshot output modes selectable on the command line.

    Args:
        Enum (string): Output modes for the program.
    """

    RAW = "raw"
    RESOLVED = "resolved"
    BOTH = "both"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for default values; runtime settings live in SnapshotConfig.
    """

    REGISTRY_URL_NPM = "https://registry.npmjs.org/"
    OUTPUT_MODES = [mode.value for mode in OutputModes]
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
    ENV_LOG_LEVEL = "DEPSNAP_LOG_LEVEL"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests

    HTTP_RETRY_MAX = 3
    HTTP_RETRY_BASE_DELAY_SEC = 0.3
    HTTP_CACHE_TTL_SEC = 300

    DEFAULT_OUTPUT_DIR = "testdata"
    DEFAULT_CONFIG_FILES = [
        "depsnap.yml",
        "depsnap.yaml",
        "depsnap.json",
        "~/.config/depsnap/depsnap.yml",
    ]
    RAW_SUFFIX = ""
    RESOLVED_SUFFIX = "-latest-all"
    RESOLVED_DIRECT_SUFFIX = "-latest"
