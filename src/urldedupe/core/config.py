"""Configuration for urldedupe.

This module defines the immutable ``DedupeConfig`` value handed to the
engine, and the functions that load an optional YAML configuration file and
merge it with command-line flags (flags take precedence).
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Optional

import yaml

from urldedupe.core.constants import (
    CONFIG_ENV_VAR,
    DEFAULT_LANGUAGE_CODES,
    STATIC_EXTENSIONS,
    Mode,
)
from urldedupe.core.exceptions import ConfigError


# ============================================================================
# Configuration Value
# ============================================================================

@dataclass(frozen=True)
class DedupeConfig:
    """Normalization options resolved once at startup.

    Extensions are stored lowercased and without a leading dot. When
    ``match_extensions`` is non-empty it is the only extension policy in
    effect and ``filter_extensions`` is ignored.
    """
    query_string_only: bool = False
    filter_extensions: frozenset[str] = frozenset()
    match_extensions: frozenset[str] = frozenset()
    regex_normalize: bool = False
    lang_country_normalize: bool = False
    language_codes: frozenset[str] = field(default=DEFAULT_LANGUAGE_CODES)

    def __post_init__(self) -> None:
        # Accept any iterable from callers but always hold frozensets
        object.__setattr__(self, "filter_extensions", frozenset(parse_extensions(self.filter_extensions)))
        object.__setattr__(self, "match_extensions", frozenset(parse_extensions(self.match_extensions)))
        codes = self.language_codes
        if isinstance(codes, str):
            codes = parse_csv(codes)
        object.__setattr__(
            self,
            "language_codes",
            frozenset(code.strip().lower() for code in codes if code.strip()),
        )


def parse_extensions(value: str | Iterable[str] | None) -> list[str]:
    """Normalize a CSV string or list of extensions.

    Args:
        value: ``"png,.JPG"``, ``["png", "jpg"]`` or None

    Returns:
        Lowercased extensions without leading dots, empties dropped
    """
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(",")
    else:
        items = list(value)

    extensions = []
    for item in items:
        ext = str(item).strip().lower().lstrip(".")
        if ext and ext not in extensions:
            extensions.append(ext)
    return extensions


def parse_csv(value: str | None) -> list[str]:
    """Split a comma-separated option into stripped, non-empty items."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


# ============================================================================
# Configuration File Loader
# ============================================================================

# Recognized keys and the types accepted for each
CONFIG_KEYS: dict[str, tuple[type, ...]] = {
    "query_string_only": (bool,),
    "filter_extensions": (list, str),
    "match_extensions": (list, str),
    "regex_normalize": (bool,),
    "lang_country_normalize": (bool,),
    "language_codes": (list, str),
    "modes": (list, str),
    "input": (str,),
    "output": (str,),
}


def find_default_config() -> Optional[Path]:
    """Locate a config file when none was given explicitly.

    Returns:
        Path from ``$URLDEDUPE_CONFIG``, else ``~/.config/urldedupe/config.yaml``
        if it exists, else None
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)

    default_path = Path.home() / ".config" / "urldedupe" / "config.yaml"
    if default_path.exists():
        return default_path
    return None


def load_config_file(config_file: Path | str) -> dict[str, Any]:
    """Load and validate a YAML configuration file.

    Args:
        config_file: Path to the YAML file

    Returns:
        Dictionary of recognized options (may be empty)

    Raises:
        ConfigError: If the file is missing, unreadable, not valid YAML,
            or contains unknown keys or values of the wrong type
    """
    config_path = Path(config_file)

    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with config_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse config YAML: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config file: {e}") from e

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigError("Config file must contain a mapping of options")

    for key, value in data.items():
        if key not in CONFIG_KEYS:
            valid = ", ".join(sorted(CONFIG_KEYS))
            raise ConfigError(f"Unknown config key '{key}'. Valid keys: {valid}")
        if not isinstance(value, CONFIG_KEYS[key]):
            raise ConfigError(f"Invalid value for '{key}': {value!r}")
        if isinstance(value, list) and not all(isinstance(item, str) for item in value):
            raise ConfigError(f"'{key}' must be a list of strings")

    return data


# ============================================================================
# Merging
# ============================================================================

def _as_list(value: str | list[str] | None) -> list[str]:
    if isinstance(value, str):
        return parse_csv(value)
    return list(value or [])


def apply_modes(modes: Iterable[str], options: dict[str, Any]) -> dict[str, Any]:
    """Expand ``--mode`` presets into option values.

    Args:
        modes: Preset names (r, s, qs, ne, l)
        options: Option dictionary to update

    Returns:
        The updated options dictionary

    Raises:
        ConfigError: If a preset is not recognized
    """
    for name in modes:
        try:
            mode = Mode(name.strip().lower())
        except ValueError:
            valid = ", ".join(m.value for m in Mode)
            raise ConfigError(f"Unknown mode '{name}'. Valid modes: {valid}") from None

        if mode in (Mode.REGEX, Mode.SIMILAR):
            options["regex_normalize"] = True
        if mode in (Mode.NO_EXTENSIONS, Mode.SIMILAR):
            options["filter_extensions"] = (
                parse_extensions(options.get("filter_extensions")) + sorted(STATIC_EXTENSIONS)
            )
        if mode == Mode.QUERY_STRINGS:
            options["query_string_only"] = True
        if mode == Mode.LANG_COUNTRY:
            options["lang_country_normalize"] = True

    return options


def build_config(
    file_values: Optional[dict[str, Any]] = None,
    *,
    query_string_only: Optional[bool] = None,
    filter_extensions: Optional[str] = None,
    match_extensions: Optional[str] = None,
    regex_normalize: Optional[bool] = None,
    lang_country_normalize: Optional[bool] = None,
    language_codes: Optional[str] = None,
    modes: Optional[str] = None,
) -> DedupeConfig:
    """Merge config-file values with command-line flags.

    A flag left as None keeps the file's value; an explicit True or False
    wins over both the file and any mode preset. List flags replace the
    file's list when given.

    Returns:
        Immutable DedupeConfig
    """
    file_values = file_values or {}

    explicit_flags = {
        name: value
        for name, value in (
            ("query_string_only", query_string_only),
            ("regex_normalize", regex_normalize),
            ("lang_country_normalize", lang_country_normalize),
        )
        if value is not None
    }

    options: dict[str, Any] = {
        "query_string_only": file_values.get("query_string_only", False),
        "regex_normalize": file_values.get("regex_normalize", False),
        "lang_country_normalize": file_values.get("lang_country_normalize", False),
        "filter_extensions": (
            filter_extensions if filter_extensions is not None
            else file_values.get("filter_extensions")
        ),
        "match_extensions": (
            match_extensions if match_extensions is not None
            else file_values.get("match_extensions")
        ),
    }

    mode_names = _as_list(file_values.get("modes")) + parse_csv(modes)
    apply_modes(mode_names, options)
    options.update(explicit_flags)

    codes = _as_list(language_codes) if language_codes is not None else _as_list(
        file_values.get("language_codes")
    )

    return DedupeConfig(
        query_string_only=options["query_string_only"],
        filter_extensions=frozenset(parse_extensions(options["filter_extensions"])),
        match_extensions=frozenset(parse_extensions(options["match_extensions"])),
        regex_normalize=options["regex_normalize"],
        lang_country_normalize=options["lang_country_normalize"],
        language_codes=frozenset(codes) if codes else DEFAULT_LANGUAGE_CODES,
    )
