"""Configuration management for zerobudget."""

import json
import os
from pathlib import Path
from typing import Any

from zerobudget.formatting import DATE_FORMATS, DEFAULT_NUMBER_FORMAT, NUMBER_FORMATS

# Default config filename
CONFIG_FILENAME = "config.json"
LOCAL_CONFIG_FILENAME = "zerobudget.json"
DEFAULT_CURRENCY_CODE = "USD"
DEFAULT_DATE_FORMAT = "YYYY-MM-DD"
DEFAULT_LEDGER_FILENAME = "ledger.json"


def get_config_dir() -> Path:
    """Get the config directory path (XDG compliant)."""
    xdg_config_home = os.getenv("XDG_CONFIG_HOME", str(Path.home() / ".config"))
    return Path(xdg_config_home) / "zerobudget"


def get_config_path() -> Path:
    """Get the default config file path."""
    return get_config_dir() / CONFIG_FILENAME


def find_config_file() -> Path | None:
    """Find the config file in standard locations.

    Searches for config in the following order:
    1. zerobudget.json in current directory
    2. XDG config: ~/.config/zerobudget/config.json
    """
    config_paths = [
        Path(LOCAL_CONFIG_FILENAME),
        get_config_path(),
    ]

    for path in config_paths:
        if path.exists():
            return path

    return None


def load_json_config(config_path: Path) -> dict[str, Any]:
    """Load configuration from a JSON file."""
    with open(config_path) as f:
        return json.load(f)  # type: ignore[no-any-return]


def save_json_config(config: dict[str, Any], config_path: Path | None = None) -> Path:
    """Save configuration to a JSON file.

    Args:
        config: Configuration dictionary to save
        config_path: Path to save to (defaults to XDG config location)

    Returns:
        Path where config was saved
    """
    if config_path is None:
        config_path = get_config_path()

    # Ensure directory exists
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        json.dump(config, f, indent=2)
        f.write("\n")

    return config_path


def load_config(config_path: Path | None = None) -> dict[str, Any] | None:
    """Load configuration from config file.

    Args:
        config_path: Explicit path to a config file

    Returns:
        Loaded config dict or None if not found
    """
    if config_path:
        return load_json_config(config_path)

    config_file = find_config_file()
    if config_file:
        return load_json_config(config_file)

    return None


def config_exists() -> bool:
    """Check if any config file exists."""
    return find_config_file() is not None


def get_currency_code(config: dict[str, Any] | None = None, override: str | None = None) -> str:
    """Get the ISO currency code used for display."""
    if override:
        return override.upper()
    if config and (code := config.get("currency_code")):
        return str(code).upper()
    return DEFAULT_CURRENCY_CODE


def get_number_format(config: dict[str, Any] | None = None) -> str:
    """Get the number format, falling back to the default for unknown values."""
    if config:
        number_format = config.get("number_format")
        if number_format in NUMBER_FORMATS:
            return number_format  # type: ignore[no-any-return]
    return DEFAULT_NUMBER_FORMAT


def get_date_format(config: dict[str, Any] | None = None) -> str:
    """Get the date format for transaction dates, falling back to the default."""
    if config:
        date_format = config.get("date_format")
        if date_format in DATE_FORMATS:
            return date_format  # type: ignore[no-any-return]
    return DEFAULT_DATE_FORMAT


def get_ledger_path(
    config: dict[str, Any] | None = None,
    override: Path | None = None,
) -> Path:
    """Get the ledger snapshot path.

    Args:
        config: Loaded JSON config
        override: Path given on the command line

    Returns:
        Override, then configured ledger_path, then ledger.json in the
        config directory
    """
    if override:
        return override
    if config and (path := config.get("ledger_path")):
        return Path(path).expanduser()
    return get_config_dir() / DEFAULT_LEDGER_FILENAME


def create_default_config() -> dict[str, Any]:
    """Create a default configuration."""
    return {
        "ledger_path": None,
        "currency_code": DEFAULT_CURRENCY_CODE,
        "number_format": DEFAULT_NUMBER_FORMAT,
        "date_format": DEFAULT_DATE_FORMAT,
    }
