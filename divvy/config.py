"""Configuration file management for divvy."""

import os
import tomllib
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Any

import tomli_w

from divvy.dates import format_duration, parse_duration
from divvy.domain.assignment import CHOICE_KEYS
from divvy.domain.models import PersonName
from divvy.domain.reconcile import OrphanFilter

DEFAULT_PEOPLE = ["Anne", "Mark"]
DEFAULT_TRANSACTIONS = "transactions.csv"
DEFAULT_SETTLEMENT_PERIOD = timedelta(hours=168)
MAX_SETTLEMENT_PERIOD = timedelta(days=36500)


class ConfigError(ValueError):
    """The configuration file holds an invalid value."""


def get_xdg_config_home() -> Path:
    """Get XDG config directory, with fallback to ~/.config."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config)
    return Path.home() / ".config"


def get_xdg_data_home() -> Path:
    """Get XDG data directory, with fallback to ~/.local/share."""
    xdg_data = os.environ.get("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data)
    return Path.home() / ".local" / "share"


def get_config_path() -> Path:
    """Get the config file path (XDG compliant).

    Returns:
        Path to the config file.
    """
    return get_xdg_config_home() / "divvy" / "config.toml"


def get_default_ledger_dir() -> Path:
    """Get the default ledger directory (XDG compliant)."""
    return get_xdg_data_home() / "divvy" / "history"


@dataclass(frozen=True)
class Settings:
    """Resolved configuration values."""

    people: list[PersonName] = field(default_factory=lambda: [PersonName(p) for p in DEFAULT_PEOPLE])
    ledger_dir: Path = field(default_factory=get_default_ledger_dir)
    transactions_path: Path = field(default_factory=lambda: Path(DEFAULT_TRANSACTIONS))
    settlement_period: timedelta = DEFAULT_SETTLEMENT_PERIOD
    orphan_filter: OrphanFilter = field(default_factory=lambda: OrphanFilter(hide_skipped=True))


def default_config() -> dict[str, Any]:
    """Default configuration as written by `divvy init`."""
    return {
        "people": list(DEFAULT_PEOPLE),
        "ledger_dir": str(get_default_ledger_dir()),
        "transactions": DEFAULT_TRANSACTIONS,
        "settlement_period": format_duration(DEFAULT_SETTLEMENT_PERIOD),
        "check": {
            "ignore_descriptions": [],
            "ignore_accounts": [],
            "ignore_categories": [],
            "hide_skipped": True,
        },
    }


def create_default_config(config_path: Path | None = None) -> None:
    """Create default config file with secure permissions.

    Args:
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)
    save_config(default_config(), config_path)


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


def _string_list(config: dict[str, Any], key: str) -> list[str]:
    value = config.get(key, [])
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"'{key}' must be a list of strings")
    return value


def parse_people(config: dict[str, Any]) -> list[PersonName]:
    """Validate the configured people.

    Raises:
        ConfigError: If the list is empty, has duplicates, or is too long
            for the choice menu.
    """
    people = _string_list(config, "people") if "people" in config else list(DEFAULT_PEOPLE)
    if not people:
        raise ConfigError("'people' must name at least one person")
    if len(set(people)) != len(people):
        raise ConfigError("'people' must not contain duplicates")
    if len(people) > len(CHOICE_KEYS) - 2:
        raise ConfigError(f"'people' can hold at most {len(CHOICE_KEYS) - 2} names")
    return [PersonName(p) for p in people]


def parse_settlement_period(value: Any) -> timedelta:
    """Validate a settlement period given as a duration string.

    Raises:
        ConfigError: If the value is not a duration between zero and
            MAX_SETTLEMENT_PERIOD.
    """
    if not isinstance(value, str):
        raise ConfigError("'settlement_period' must be a duration string such as '168h'")
    try:
        period = parse_duration(value)
    except ValueError as e:
        raise ConfigError(str(e)) from e
    if period < timedelta(0):
        raise ConfigError("settlement period cannot be negative")
    if period > MAX_SETTLEMENT_PERIOD:
        raise ConfigError(f"settlement period cannot exceed {format_duration(MAX_SETTLEMENT_PERIOD)}")
    return period


def parse_orphan_filter(check: Any) -> OrphanFilter:
    """Build the check-report filter from the [check] table."""
    if not isinstance(check, dict):
        raise ConfigError("'check' must be a table")
    hide_skipped = check.get("hide_skipped", True)
    if not isinstance(hide_skipped, bool):
        raise ConfigError("'check.hide_skipped' must be true or false")
    return OrphanFilter(
        descriptions=frozenset(_string_list(check, "ignore_descriptions")),
        accounts=frozenset(_string_list(check, "ignore_accounts")),
        categories=frozenset(_string_list(check, "ignore_categories")),
        hide_skipped=hide_skipped,
    )


def settings_from_config(config: dict[str, Any]) -> Settings:
    """Resolve a configuration dictionary into Settings, filling defaults.

    Raises:
        ConfigError: If any value is invalid.
    """
    ledger_dir = config.get("ledger_dir")
    transactions = config.get("transactions", DEFAULT_TRANSACTIONS)
    if ledger_dir is not None and not isinstance(ledger_dir, str):
        raise ConfigError("'ledger_dir' must be a path string")
    if not isinstance(transactions, str):
        raise ConfigError("'transactions' must be a path string")

    settlement = config.get("settlement_period")
    return Settings(
        people=parse_people(config),
        ledger_dir=Path(ledger_dir).expanduser() if ledger_dir else get_default_ledger_dir(),
        transactions_path=Path(transactions).expanduser(),
        settlement_period=(
            parse_settlement_period(settlement) if settlement is not None else DEFAULT_SETTLEMENT_PERIOD
        ),
        orphan_filter=parse_orphan_filter(config.get("check", {})),
    )


def load_settings(config_path: Path | None = None) -> Settings:
    """Load settings from the config file, or defaults if there is none.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Resolved Settings.

    Raises:
        ConfigError: If the file holds invalid values or invalid TOML.
    """
    try:
        config = load_config(config_path)
    except FileNotFoundError:
        return settings_from_config({})
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid config file: {e}") from e
    return settings_from_config(config)
