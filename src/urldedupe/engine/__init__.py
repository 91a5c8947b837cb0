"""URL normalization and streaming deduplication.

This package provides the deduplication engine:
- URLNormalizer: Compute canonical keys for raw URL lines
- SeenSet: Thread-safe set with atomic check-and-insert
- StreamingDeduper: Order-preserving first-seen filter over a line stream
"""

from urldedupe.engine.normalizer import ParsedURL, URLNormalizer, normalize
from urldedupe.engine.seen import SeenSet
from urldedupe.engine.deduper import DedupeStats, StreamingDeduper, open_input, open_output

__all__ = [
    "ParsedURL",
    "URLNormalizer",
    "normalize",
    "SeenSet",
    "DedupeStats",
    "StreamingDeduper",
    "open_input",
    "open_output",
]
