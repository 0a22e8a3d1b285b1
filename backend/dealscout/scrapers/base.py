"""Base extractor interface and the canonical data structures.

All extraction strategies inherit from BaseExtractor and return
CanonicalProduct lists; the deal engine turns those into Deals.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Dict, List, Optional

import structlog


class ExtractionStrategy(StrEnum):
    """Procedures capable of producing CanonicalProducts from raw content."""

    STRUCTURED_DATA = "structured_data"
    EMBEDDED_STATE = "embedded_state"
    DIRECT_API = "direct_api"


@dataclass(frozen=True)
class CanonicalProduct:
    """Retailer-agnostic product record returned by every extractor.

    A missing price is None, never 0 or NaN. A product with no prices is
    still valid; it simply never qualifies as a deal.
    """

    name: str
    category: str
    original_price: Optional[float] = None
    sale_price: Optional[float] = None
    currency: str = "USD"
    image_url: str = ""
    product_url: str = ""
    product_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "category": self.category,
            "originalPrice": self.original_price,
            "salePrice": self.sale_price,
            "currency": self.currency,
            "imageUrl": self.image_url,
            "productUrl": self.product_url,
            "productId": self.product_id,
        }


@dataclass(frozen=True)
class Deal:
    """A CanonicalProduct that cleared the discount threshold."""

    id: str
    name: str
    category: str
    retailer: str
    original_price: float
    sale_price: float
    discount_pct: float
    image_url: str = ""
    product_url: str = ""

    def __post_init__(self):
        """Validate data after initialization."""
        if not self.id:
            raise ValueError("id is required")
        if self.sale_price <= 0 or self.original_price <= 0:
            raise ValueError("deal prices must be positive")
        if self.sale_price >= self.original_price:
            raise ValueError("sale_price must be lower than original_price")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "retailer": self.retailer,
            "originalPrice": self.original_price,
            "salePrice": self.sale_price,
            "discountPct": self.discount_pct,
            "imageUrl": self.image_url,
            "productUrl": self.product_url,
        }


class BaseExtractor(ABC):
    """Abstract base class for all extraction strategies.

    Extractors are pure: they receive everything as arguments, never
    perform I/O and never raise for malformed content. A page or feed
    without recognizable product data yields an empty list.
    """

    strategy: ExtractionStrategy

    def __init__(self):
        self.logger = structlog.get_logger(__name__).bind(strategy=str(self.strategy))

    @abstractmethod
    def extract(self, content: Any, category: str) -> List[CanonicalProduct]:
        """Extract canonical products from raw content.

        Args:
            content: HTML string or parsed JSON value, depending on strategy
            category: Category assigned to every extracted product

        Returns:
            List of CanonicalProduct in source order (possibly empty)
        """
        pass
