"""Extraction system for turning retailer content into canonical products.

This package provides:
- Canonical data structures and the BaseExtractor interface
- Extraction strategies for JSON-LD, Next.js state and direct feeds
- The retailer registry and the extraction dispatcher
- An HTTP fetcher supplying raw content
"""

from .base import (
    BaseExtractor,
    CanonicalProduct,
    Deal,
    ExtractionStrategy,
)
from .registry import (
    Retailer,
    RetailerProfile,
    RetailerRegistry,
    build_default_registry,
    get_retailer_registry,
)
from .dispatcher import ExtractionDispatcher, ExtractionResult, ExtractionStatus

__all__ = [
    # Base classes
    "BaseExtractor",
    # Data structures
    "CanonicalProduct",
    "Deal",
    "ExtractionStrategy",
    # Registry
    "Retailer",
    "RetailerProfile",
    "RetailerRegistry",
    "build_default_registry",
    "get_retailer_registry",
    # Dispatch
    "ExtractionDispatcher",
    "ExtractionResult",
    "ExtractionStatus",
]
