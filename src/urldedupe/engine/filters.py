"""Filter predicates applied while normalizing a URL.

Each predicate is a pure function of a URL component and the config, so it
can be tested on its own. A predicate returning False excludes the line.
"""

from typing import Iterable, Sequence

from urldedupe.core.config import DedupeConfig


def has_extension(path: str, extensions: Iterable[str]) -> bool:
    """Check whether a path ends with ``.<ext>`` for any given extension.

    Args:
        path: URL path (not normalized)
        extensions: Lowercased extensions without leading dots

    Returns:
        True if the path case-insensitively ends with one of them
    """
    lowered = path.lower()
    return any(lowered.endswith("." + ext) for ext in extensions)


def passes_extension_policy(path: str, config: DedupeConfig) -> bool:
    """Apply the single extension policy in effect for this run.

    ``match_extensions`` (include-only) wins when non-empty; otherwise
    ``filter_extensions`` excludes matching paths.
    """
    if config.match_extensions:
        return has_extension(path, config.match_extensions)
    if config.filter_extensions:
        return not has_extension(path, config.filter_extensions)
    return True


def passes_query_policy(query_params: Sequence[tuple[str, str]], config: DedupeConfig) -> bool:
    """Reject parameterless URLs when ``query_string_only`` is set."""
    if config.query_string_only:
        return len(query_params) > 0
    return True
