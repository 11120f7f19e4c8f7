"""
Configuration loading and auto-discovery.

Layered config with later sources overriding earlier ones:
1. Built-in defaults (DEFAULT_CONFIG)
2. ~/.config/sourcepin/config.toml (user config)
3. ./sourcepin.toml (project config)
4. File named by the SOURCEPIN_CONFIG environment variable
5. SOURCEPIN_ATTRIBUTE_PREFIX environment variable

Config structure:

    [annotate]
    attribute_prefix = "data-sourcepin"
    verbose = false

    [edit]
    backup = false
    backup_dir = ".sourcepin/backups"
"""
import copy
import os
import re
from pathlib import Path
from typing import Any, Dict, Optional

try:  # Python 3.11+
    import tomllib
except ImportError:  # pragma: no cover - fallback for older environments
    import tomli as tomllib

from sourcepin.exceptions import ConfigError
from sourcepin.logging_config import logger
from sourcepin.paths import get_paths


DEFAULT_ATTRIBUTE_PREFIX = "data-sourcepin"

DEFAULT_CONFIG: Dict[str, Any] = {
    "annotate": {
        "attribute_prefix": DEFAULT_ATTRIBUTE_PREFIX,
        "verbose": False,
    },
    "edit": {
        "backup": False,
        "backup_dir": None,
    },
}

# JSX attribute names: identifier start, then letters, digits, '-', '_' or '$'
_ATTRIBUTE_NAME_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$\-]*$")


def validate_attribute_prefix(prefix: str) -> str:
    """
    Validate an attribute prefix and return it.

    Raises:
        ConfigError: If the prefix cannot start a JSX attribute name.
    """
    if not isinstance(prefix, str) or not prefix:
        raise ConfigError("Attribute prefix must be a non-empty string")
    if not _ATTRIBUTE_NAME_RE.match(prefix) or prefix.endswith("-"):
        raise ConfigError(
            f"Attribute prefix '{prefix}' is not a valid JSX attribute name prefix"
        )
    return prefix


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def _read_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Failed to load config from {path}: {e}") from e


def load_config(project_root: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration with hierarchical override.

    Args:
        project_root: Directory holding sourcepin.toml (defaults to CWD)

    Returns:
        Merged configuration dictionary
    """
    paths = get_paths(project_root)
    config = copy.deepcopy(DEFAULT_CONFIG)

    config_paths = [paths.user_config, paths.project_config]
    env_config = os.environ.get("SOURCEPIN_CONFIG")
    if env_config:
        config_paths.append(Path(env_config))

    for path in config_paths:
        if path.exists():
            config = _deep_merge(config, _read_toml(path))
            logger.debug(f"Loaded config from {path}")

    env_prefix = os.environ.get("SOURCEPIN_ATTRIBUTE_PREFIX")
    if env_prefix:
        config["annotate"]["attribute_prefix"] = env_prefix

    validate_attribute_prefix(config["annotate"]["attribute_prefix"])

    if not config["edit"].get("backup_dir"):
        config["edit"]["backup_dir"] = str(paths.backups_dir)

    return config


def get_attribute_prefix(project_root: Optional[Path] = None) -> str:
    """Get the configured attribute prefix."""
    return load_config(project_root)["annotate"]["attribute_prefix"]
