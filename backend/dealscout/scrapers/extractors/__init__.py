"""Extraction strategies.

Each module implements a BaseExtractor for one content shape:
JSON-LD structured data, Next.js embedded state, or a direct JSON feed.
"""

from .structured_data import StructuredDataExtractor
from .embedded_state import EmbeddedStateExtractor, StateShape
from .direct_api import DirectApiExtractor, normalize_nike_feed

__all__ = [
    "StructuredDataExtractor",
    "EmbeddedStateExtractor",
    "StateShape",
    "DirectApiExtractor",
    "normalize_nike_feed",
]
