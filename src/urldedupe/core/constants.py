"""Constants used throughout urldedupe.

This module contains placeholder tokens, built-in language/region codes,
mode presets and I/O defaults shared by the engine and the CLI.
"""

from enum import Enum


class Mode(str, Enum):
    """Shortcut presets accepted by ``--mode``."""
    REGEX = "r"
    SIMILAR = "s"
    QUERY_STRINGS = "qs"
    NO_EXTENSIONS = "ne"
    LANG_COUNTRY = "l"


# Placeholder tokens substituted into normalized paths
GUID_PLACEHOLDER = "{guid}"
INT_PLACEHOLDER = "{int}"
LANG_PLACEHOLDER = "{lang}"


# Explicit ports stripped from the host before key construction
DEFAULT_PORTS = {80, 443}


# Image/font extensions excluded by the "ne" and "s" presets
STATIC_EXTENSIONS = frozenset({
    "png", "jpg", "jpeg", "gif", "woff", "woff2", "ttf", "otf", "svg", "ico",
})


# Path segments treated as language or language-region markers
DEFAULT_LANGUAGE_CODES = frozenset({
    # ISO 639-1 languages
    "ar", "bg", "bn", "cs", "da", "de", "el", "en", "es", "et", "fa", "fi",
    "fr", "he", "hi", "hr", "hu", "id", "it", "ja", "ko", "lt", "lv", "ms",
    "nl", "no", "pl", "pt", "ro", "ru", "sk", "sl", "sr", "sv", "th", "tr",
    "uk", "vi", "zh",
    # Language-region locales
    "ar-ae", "ar-sa", "de-at", "de-ch", "de-de", "en-au", "en-ca", "en-gb",
    "en-ie", "en-in", "en-nz", "en-us", "en-za", "es-ar", "es-es", "es-mx",
    "es-us", "fr-be", "fr-ca", "fr-ch", "fr-fr", "it-it", "ja-jp", "ko-kr",
    "nl-be", "nl-nl", "pt-br", "pt-pt", "ru-ru", "sv-se", "zh-cn", "zh-hk",
    "zh-tw",
    # Underscore spellings
    "en_gb", "en_us", "es_es", "fr_fr", "de_de", "pt_br", "zh_cn", "zh_tw",
})


# Read/write buffer for input and output streams (1 MiB)
IO_BUFFER_SIZE = 1024 * 1024


# Update check
VERSION_URL = "https://raw.githubusercontent.com/urldedupe/urldedupe/main/VERSION"
PROJECT_URL = "https://github.com/urldedupe/urldedupe"
UPDATE_TIMEOUT = 10.0


# Environment variable pointing at a config file
CONFIG_ENV_VAR = "URLDEDUPE_CONFIG"
