"""
Configuration management for gmana.

Settings are kept as a flat JSON record in the gmana home directory.
Anything missing or invalid falls back to the built-in defaults.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from ..exceptions import ConfigError, ValidationError
from ..utils.validation import (
    DEFAULT_PASSWORD_LENGTH,
    get_length_error_message,
    is_strict_int,
    validate_length,
)

logger = logging.getLogger(__name__)

DEFAULT_HOME = Path.home() / ".gmana"
CONFIG_FILENAME = "config.json"

MIN_HISTORY_LIMIT = 0
MAX_HISTORY_LIMIT = 1000
DEFAULT_HISTORY_LIMIT = 100

# Accepted spellings for `config --set key=value`, lowercased
_KEY_ALIASES = {
    "defaultlength": "default_length",
    "length": "default_length",
    "default_length": "default_length",
    "defaultincludeuppercase": "default_include_uppercase",
    "default_include_uppercase": "default_include_uppercase",
    "defaultincludelowercase": "default_include_lowercase",
    "default_include_lowercase": "default_include_lowercase",
    "defaultincludenumbers": "default_include_numbers",
    "default_include_numbers": "default_include_numbers",
    "defaultincludesymbols": "default_include_symbols",
    "default_include_symbols": "default_include_symbols",
    "autocopy": "auto_copy",
    "auto_copy": "auto_copy",
    "savehistory": "save_history",
    "save_history": "save_history",
    "historylimit": "history_limit",
    "history_limit": "history_limit",
}

_INT_KEYS = ("default_length", "history_limit")


@dataclass(frozen=True)
class Config:
    """User defaults and behavior settings."""

    default_length: int = DEFAULT_PASSWORD_LENGTH
    default_include_uppercase: bool = True
    default_include_lowercase: bool = True
    default_include_numbers: bool = True
    default_include_symbols: bool = True
    auto_copy: bool = True
    save_history: bool = False
    history_limit: int = DEFAULT_HISTORY_LIMIT

    def __post_init__(self) -> None:
        if not validate_length(self.default_length):
            raise ValidationError(get_length_error_message(self.default_length))

        if not is_strict_int(self.history_limit) or not (
            MIN_HISTORY_LIMIT <= self.history_limit <= MAX_HISTORY_LIMIT
        ):
            raise ValidationError(
                f"History limit must be between {MIN_HISTORY_LIMIT} and {MAX_HISTORY_LIMIT}"
            )

        for f in fields(self):
            if f.name in _INT_KEYS:
                continue
            value = getattr(self, f.name)
            if not isinstance(value, bool):
                raise ValidationError(
                    f"Setting '{f.name}' must be a boolean, got {type(value).__name__}"
                )

    def to_dict(self) -> Dict[str, Any]:
        """Return the settings as a plain dict."""
        return asdict(self)


def resolve_home(home: Optional[Union[str, Path]] = None) -> Path:
    """Resolve the gmana home directory (argument, GMANA_HOME, then ~/.gmana)."""
    if home:
        return Path(home).expanduser()

    env_home = os.environ.get("GMANA_HOME")
    if env_home:
        return Path(env_home).expanduser()

    return DEFAULT_HOME


class ConfigManager:
    """Loads and saves the gmana configuration file."""

    def __init__(self, home: Optional[Union[str, Path]] = None):
        """
        Initialize config manager.

        Args:
            home: Directory holding config.json (see resolve_home)
        """
        self.home = resolve_home(home)
        self.config_file = self.home / CONFIG_FILENAME

    def load(self) -> Config:
        """
        Load configuration, falling back to defaults.

        Returns:
            Config read from disk, or the defaults if the file is missing
            or invalid
        """
        if not self.config_file.exists():
            logger.debug(f"No config file at {self.config_file}, using defaults")
            return Config()

        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                raw = json.load(f)

            if not isinstance(raw, dict):
                logger.warning("Invalid config file: not an object, using defaults")
                return Config()

            known = {f.name for f in fields(Config)}
            return Config(**{key: value for key, value in raw.items() if key in known})

        except (OSError, ValueError, ValidationError) as e:
            # json.JSONDecodeError is a ValueError
            logger.warning(f"Failed to load config, using defaults: {e}")
            return Config()

    def save(self, **updates: Any) -> Config:
        """
        Merge updates into the current configuration and write it.

        Args:
            **updates: Setting names and new values

        Returns:
            The saved Config

        Raises:
            ConfigError: If an update names an unknown setting
            ValidationError: If a value is invalid
        """
        known = {f.name for f in fields(Config)}
        unknown = set(updates) - known
        if unknown:
            raise ConfigError(f"Unknown configuration key: {', '.join(sorted(unknown))}")

        merged = self.load().to_dict()
        merged.update(updates)
        config = Config(**merged)

        self.home.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, "w", encoding="utf-8") as f:
            json.dump(config.to_dict(), f, indent=2)
            f.write("\n")

        logger.debug(f"Config saved to {self.config_file}")
        return config

    def reset(self) -> Config:
        """
        Overwrite the configuration with the defaults.

        Returns:
            The default Config
        """
        return self.save(**Config().to_dict())

    def set_value(self, key: str, value: str) -> Config:
        """
        Set a single setting from its command-line string form.

        Args:
            key: Setting name (camelCase or snake_case, case-insensitive)
            value: String value; booleans are true only for "true"

        Returns:
            The saved Config

        Raises:
            ConfigError: If the key is unknown or a number cannot be parsed
            ValidationError: If the value is out of range
        """
        name = _KEY_ALIASES.get(key.strip().lower())
        if name is None:
            raise ConfigError(f"Unknown configuration key: {key}")

        value = value.strip()
        parsed: Any
        if name in _INT_KEYS:
            try:
                parsed = int(value)
            except ValueError:
                raise ConfigError(f"Value for {key} must be a number, got '{value}'") from None
        else:
            parsed = value.lower() == "true"

        return self.save(**{name: parsed})


def parse_key_value(pair: str) -> Tuple[str, str]:
    """
    Split a `key=value` string.

    Raises:
        ConfigError: If the string has no '=' or an empty key
    """
    key, sep, value = pair.partition("=")
    if not sep or not key.strip():
        raise ConfigError("Invalid format. Use: --set key=value")
    return key.strip(), value


def get_config_manager(home: Optional[Union[str, Path]] = None) -> ConfigManager:
    """
    Get a configured config manager instance.

    Args:
        home: Optional home directory override

    Returns:
        ConfigManager instance
    """
    return ConfigManager(home=home)
