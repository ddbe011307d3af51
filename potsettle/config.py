"""Configuration file management for potsettle."""

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tomli_w

from potsettle.domain.models import UserId
from potsettle.domain.money import DEFAULT_CURRENCY

DEFAULT_USER = "default"


@dataclass(frozen=True)
class Settings:
    """Settings read from the config file."""

    user: UserId = UserId(DEFAULT_USER)
    currency: str = DEFAULT_CURRENCY


def get_xdg_config_home() -> Path:
    """Get XDG config directory, with fallback to ~/.config."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config)
    return Path.home() / ".config"


def get_config_path() -> Path:
    """Get the config file path (XDG compliant).

    Returns:
        Path to the config file.
    """
    return get_xdg_config_home() / "potsettle" / "config.toml"


def create_default_config(config_path: Path | None = None) -> None:
    """Create default config file with secure permissions.

    Args:
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    default_config: dict[str, Any] = {
        "user": DEFAULT_USER,
        "currency": DEFAULT_CURRENCY,
    }
    save_config(default_config, config_path)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If the file is not valid TOML.
    """
    if config_path is None:
        config_path = get_config_path()

    with open(config_path, "rb") as f:
        return tomllib.load(f)


def save_config(config: dict[str, Any], config_path: Path | None = None) -> None:
    """Save configuration to TOML file.

    Args:
        config: Configuration dictionary.
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)

    os.chmod(config_path, 0o600)


def load_settings(config_path: Path | None = None) -> Settings:
    """Load settings, falling back to defaults when the file is missing.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Settings with any missing keys defaulted.

    Raises:
        ValueError: If a configured value has the wrong type.
    """
    try:
        config = load_config(config_path)
    except FileNotFoundError:
        return Settings()

    user = config.get("user", DEFAULT_USER)
    currency = config.get("currency", DEFAULT_CURRENCY)
    if not isinstance(user, str) or not user.strip():
        raise ValueError("Config 'user' must be a non-empty string")
    if not isinstance(currency, str):
        raise ValueError("Config 'currency' must be a string")

    return Settings(user=UserId(user.strip()), currency=currency)
