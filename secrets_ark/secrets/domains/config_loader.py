"""Configuration loader for secrets-ark."""
import os
import re
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .models import InvalidInputPolicy, StatusPolicy

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "SECRETS_ARK_CONFIG"

ENV_NAME_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

DEFAULT_KEYS = [
    "SECRET",
    "ANOTHER_SECRET",
    "PROTECTED_SECRET",
    "PROTECTED_ANOTHER_SECRET",
]


class ConfigError(Exception):
    """Configuration error exception."""
    pass


@dataclass
class CheckerConfig:
    """Resolved checker settings."""
    keys: List[str] = field(default_factory=lambda: list(DEFAULT_KEYS))
    policy: StatusPolicy = StatusPolicy.MULTI_KEY_GRADED
    on_invalid_input: InvalidInputPolicy = InvalidInputPolicy.DEFAULT
    source: str = "defaults"


def is_valid_env_name(name: str) -> bool:
    """
    Check a name is usable as an environment variable name.

    Allowed: letters, numbers, underscores, not starting with a number.
    The whole name must match, so a trailing newline is rejected.
    """
    return bool(name) and ENV_NAME_PATTERN.fullmatch(name) is not None


def _default_config_path() -> Path:
    return Path.home() / ".config" / "secrets-ark" / "config.yml"


def _get_config_path(config_path: Optional[Union[str, Path]] = None) -> Optional[str]:
    """
    Get config file path.

    Priority order:
    1. Explicit path (e.g. from --config)
    2. SECRETS_ARK_CONFIG environment variable
    3. Default location: ~/.config/secrets-ark/config.yml

    Returns:
        Absolute path to config file, or None if no file applies

    Raises:
        ConfigError: If an explicitly requested file doesn't exist
    """
    if config_path:
        path = Path(config_path)
        if not path.is_file():
            raise ConfigError(f"Configuration file not found at: {path}")
        logger.info(f"Using config from argument: {path}")
        return str(path)

    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        path = Path(env_path)
        if not path.is_file():
            raise ConfigError(
                f"Configuration file not found at: {path}\n"
                f"Set by the {CONFIG_ENV_VAR} environment variable."
            )
        logger.info(f"Using config from {CONFIG_ENV_VAR}: {path}")
        return str(path)

    default_config = _default_config_path()
    if default_config.is_file():
        logger.info(f"Using default config location: {default_config}")
        return str(default_config)

    return None


def _parse_policy(value: Any, config_path: str) -> StatusPolicy:
    try:
        return StatusPolicy(value)
    except ValueError:
        allowed = ", ".join(p.value for p in StatusPolicy)
        raise ConfigError(
            f"Unsupported 'secrets.policy' in config at {config_path}: {value!r}\n"
            f"Allowed values: {allowed}"
        )


def _parse_on_invalid(value: Any, config_path: str) -> InvalidInputPolicy:
    try:
        return InvalidInputPolicy(value)
    except ValueError:
        allowed = ", ".join(p.value for p in InvalidInputPolicy)
        raise ConfigError(
            f"Unsupported 'input.on_invalid' in config at {config_path}: {value!r}\n"
            f"Allowed values: {allowed}"
        )


def _section(config: Dict[str, Any], name: str, config_path: str) -> Dict[str, Any]:
    section = config.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(f"'{name}' section in config at {config_path} must be a mapping")
    return section


def load_config(config_path: Optional[Union[str, Path]] = None) -> CheckerConfig:
    """
    Load and validate configuration from YAML file.

    Args:
        config_path: Explicit config file path (optional)

    Returns:
        CheckerConfig built from the file, or built-in defaults if no file applies

    Raises:
        ConfigError: If the config file is missing, unreadable, or invalid
    """
    # Resolved on every call so a changed SECRETS_ARK_CONFIG takes effect immediately
    path = _get_config_path(config_path)
    if path is None:
        logger.debug("No config file found, using built-in defaults")
        return CheckerConfig()

    try:
        with open(path, 'r') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML config at {path}: {e}")
    except OSError as e:
        raise ConfigError(f"Failed to read config file at {path}: {e}")

    if config is None:
        logger.warning(f"Config file at {path} is empty, using built-in defaults")
        return CheckerConfig(source=path)

    if not isinstance(config, dict):
        raise ConfigError(f"Config file at {path} must contain a mapping at the top level")

    result = CheckerConfig(source=path)

    secrets_section = _section(config, "secrets", path)
    if "keys" in secrets_section:
        result.keys = validate_keys(secrets_section["keys"], path)
    if "policy" in secrets_section:
        result.policy = _parse_policy(secrets_section["policy"], path)

    input_section = _section(config, "input", path)
    if "on_invalid" in input_section:
        result.on_invalid_input = _parse_on_invalid(input_section["on_invalid"], path)

    logger.info(f"Configuration loaded successfully from {path}")
    logger.debug(f"Checking keys: {', '.join(result.keys)}")
    logger.debug(f"Using status policy: {result.policy.value}")

    return result


def validate_keys(keys: Any, source: str) -> List[str]:
    """
    Validate a configured key list.

    Args:
        keys: Raw value from config or command line
        source: Where the keys came from, used in error messages

    Returns:
        The keys as a list of strings

    Raises:
        ConfigError: If the list is empty, has duplicates, or holds invalid names
    """
    if not isinstance(keys, list) or not keys:
        raise ConfigError(f"'secrets.keys' from {source} must be a non-empty list")

    seen = set()
    for key in keys:
        if not isinstance(key, str) or not is_valid_env_name(key):
            raise ConfigError(
                f"Invalid secret key {key!r} from {source}\n"
                f"Keys must be environment variable names: [A-Za-z_][A-Za-z0-9_]*"
            )
        if key in seen:
            raise ConfigError(f"Duplicate secret key {key!r} from {source}")
        seen.add(key)

    return list(keys)
