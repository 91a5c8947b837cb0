"""URL normalization for deduplication.

This module turns a raw URL line into a canonical deduplication key. Two
lines with equal keys are considered the same resource. Normalization:
- Lowercases scheme and host
- Strips explicit ports 80 and 443
- Applies the extension filter to the original path
- Removes a single trailing slash (except for the root path)
- Optionally replaces GUIDs and integers in the path with placeholders
- Optionally replaces the first language/region path segment
- Applies the query-string-only filter
- Drops the fragment and all query values, keeping sorted parameter names
"""

import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import parse_qsl, urlsplit

from urldedupe.core.config import DedupeConfig
from urldedupe.core.constants import (
    DEFAULT_PORTS,
    GUID_PLACEHOLDER,
    INT_PLACEHOLDER,
    LANG_PLACEHOLDER,
)
from urldedupe.engine.filters import passes_extension_policy, passes_query_policy


GUID_PATTERN = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
)
INT_PATTERN = re.compile(r"\b\d+\b", re.ASCII)


@dataclass(frozen=True)
class ParsedURL:
    """Components of a URL relevant to deduplication (fragment dropped)."""
    scheme: str
    host: str
    path: str
    query_params: tuple[tuple[str, str], ...] = ()

    @property
    def query_names(self) -> list[str]:
        """Sorted, unique query parameter names."""
        return sorted({name for name, _ in self.query_params})


class URLNormalizer:
    """Compute canonical deduplication keys for raw URL lines.

    The order of operations is fixed: the extension filter sees the path as
    written, trailing-slash removal happens before regex and language
    normalization, and the query-string filter looks at the parsed query.

    Example:
        >>> normalizer = URLNormalizer(DedupeConfig())
        >>> normalizer.normalize("http://a.com/x?b=2&a=1#top")
        ('http://a.com/x?a&b', True)
    """

    def __init__(self, config: Optional[DedupeConfig] = None):
        """Initialize URLNormalizer.

        Args:
            config: Normalization options (defaults to DedupeConfig())
        """
        self.config = config or DedupeConfig()

    def parse(self, raw: str) -> Optional[ParsedURL]:
        """Parse a raw URL into its components.

        Args:
            raw: URL string, already trimmed

        Returns:
            ParsedURL, or None if the string cannot be parsed as a URL
        """
        try:
            parts = urlsplit(raw)
            # Accessing .port validates it (non-numeric or out of range raises)
            port = parts.port
        except ValueError:
            return None

        host = self._normalize_host(parts.netloc, port)
        query_params = tuple(parse_qsl(parts.query, keep_blank_values=True))

        return ParsedURL(
            scheme=parts.scheme,
            host=host,
            path=parts.path,
            query_params=query_params,
        )

    def normalize(self, raw: str) -> tuple[str, bool]:
        """Compute the canonical key for a raw URL.

        Args:
            raw: URL string, already trimmed

        Returns:
            ``(key, True)`` if the URL is kept, ``("", False)`` if it cannot
            be parsed or is excluded by a filter
        """
        parsed = self.parse(raw)
        if parsed is None:
            return "", False

        if not passes_extension_policy(parsed.path, self.config):
            return "", False

        path = self.normalize_path(parsed.path)

        if not passes_query_policy(parsed.query_params, self.config):
            return "", False

        return self.build_key(parsed, path), True

    def normalize_path(self, path: str) -> str:
        """Apply trailing-slash, regex and language normalization to a path."""
        if len(path) > 1 and path.endswith("/"):
            path = path[:-1]

        if self.config.regex_normalize:
            path = self._replace_patterns(path)

        if self.config.lang_country_normalize:
            path = self._replace_language(path)

        return path

    @staticmethod
    def build_key(parsed: ParsedURL, path: str) -> str:
        """Build ``scheme://host<path>[?name1&name2]`` from parsed parts."""
        key = f"{parsed.scheme}://{parsed.host}{path}"
        if parsed.query_params:
            key += "?" + "&".join(parsed.query_names)
        return key

    def _normalize_host(self, netloc: str, port: Optional[int]) -> str:
        """Drop userinfo, lowercase, and strip ports 80/443.

        Args:
            netloc: Network location from urlsplit
            port: Port already validated by urlsplit, or None

        Returns:
            Host with a non-default port kept as written
        """
        host = netloc.rpartition("@")[2].lower()
        if port in DEFAULT_PORTS:
            host = host[:host.rfind(":")]
        elif port is None and host.endswith(":"):
            # Empty explicit port, e.g. "a.com:"
            host = host[:-1]
        return host

    def _replace_patterns(self, path: str) -> str:
        # GUIDs first so their digit groups are not seen as integers
        path = GUID_PATTERN.sub(GUID_PLACEHOLDER, path)
        return INT_PATTERN.sub(INT_PLACEHOLDER, path)

    def _replace_language(self, path: str) -> str:
        segments = path.split("/")
        for index, segment in enumerate(segments):
            if segment.lower() in self.config.language_codes:
                segments[index] = LANG_PLACEHOLDER
                return "/".join(segments)
        return path


def normalize(raw: str, config: DedupeConfig) -> tuple[str, bool]:
    """Compute the canonical key for ``raw`` under ``config``."""
    return URLNormalizer(config).normalize(raw)
