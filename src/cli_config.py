"""Runtime configuration for depsnap.

Builds a single SnapshotConfig at startup from built-in defaults, an
optional YAML/JSON config file and CLI overrides (highest precedence). The
resulting object is passed explicitly to the registry client and the
snapshot writer; nothing reads configuration from module globals.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

import yaml

from constants import Constants

logger = logging.getLogger(__name__)

# Config file keys accepted as aliases of SnapshotConfig fields
_KEY_ALIASES = {
    "testdata_path": "output_dir",
    "registry": "registry_url",
    "timeout": "request_timeout",
    "retries": "retry_max",
}


class ConfigError(Exception):
    """An explicitly requested config file could not be used."""


@dataclass
class SnapshotConfig:
    """Settings shared by the registry client and the snapshot writer."""

    output_dir: str = Constants.DEFAULT_OUTPUT_DIR
    registry_url: str = Constants.REGISTRY_URL_NPM
    request_timeout: float = float(Constants.REQUEST_TIMEOUT)
    retry_max: int = Constants.HTTP_RETRY_MAX

    def update(self, values: Dict[str, Any]) -> None:
        """Apply known keys from ``values``, coercing to each field's type."""
        known = {f.name: f for f in fields(self)}
        for raw_key, value in values.items():
            key = _KEY_ALIASES.get(raw_key, raw_key)
            if key not in known:
                logger.debug("Ignoring unknown config key: %s", raw_key)
                continue
            if value is None:
                continue
            current = getattr(self, key)
            try:
                setattr(self, key, type(current)(value))
            except (TypeError, ValueError) as exc:
                raise ConfigError(f"Invalid value for {raw_key}: {value!r}") from exc


def _read_config_file(path: str) -> Dict[str, Any]:
    """Load a YAML or JSON mapping from ``path``.

    Raises:
        ConfigError: unreadable file, parse error, or non-mapping content
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            if path.lower().endswith(".json"):
                data = json.load(fh)
            else:
                data = yaml.safe_load(fh)
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Cannot parse config file {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def _find_default_config() -> Optional[str]:
    """Return the first existing default config location, if any."""
    for candidate in Constants.DEFAULT_CONFIG_FILES:
        path = os.path.expanduser(candidate)
        if os.path.isfile(path):
            return path
    return None


def load_config(args: Any = None) -> SnapshotConfig:
    """Build the SnapshotConfig for this run.

    Precedence: CLI flags > config file (--config or a default location) >
    built-in defaults.
    """
    config = SnapshotConfig()

    path = getattr(args, "CONFIG", None)
    if path:
        if not os.path.isfile(path):
            raise ConfigError(f"Config file not found: {path}")
    else:
        path = _find_default_config()

    if path:
        config.update(_read_config_file(path))
        logger.info("Loaded configuration from %s", path)

    config.update({
        "output_dir": getattr(args, "OUTPUT_DIR", None),
        "registry_url": getattr(args, "REGISTRY_URL", None),
        "request_timeout": getattr(args, "TIMEOUT", None),
        "retry_max": getattr(args, "RETRIES", None),
    })
    return config
