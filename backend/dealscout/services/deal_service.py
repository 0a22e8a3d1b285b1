"""Deal computation engine.

Turns canonical products into Deals: a product qualifies when both
prices are present and positive, the sale price is strictly lower than
the original, and the discount clears the threshold. The engine is pure
and stateless; every call returns freshly built Deal records in input
order.
"""

import math
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Set

import structlog

from dealscout.config import settings
from dealscout.scrapers.base import CanonicalProduct, Deal
from dealscout.scrapers.dispatcher import ExtractionDispatcher, ExtractionResult

logger = structlog.get_logger(__name__)

DEFAULT_THRESHOLD_PCT = settings.DEFAULT_MIN_DISCOUNT_PCT


def compute_discount_pct(original: float, sale: float) -> float:
    """Discount percentage rounded to one decimal place.

    Rounds half up on the per-mille value, so 1 - 77/100 gives exactly
    23.0 even though the float product is 229.99999999999997.
    """
    per_mille = (1 - sale / original) * 1000
    return math.floor(per_mille + 0.5) / 10


class DealEngine:
    """Computes qualifying deals from canonical products."""

    def __init__(self):
        self.logger = logger.bind(service="deal_engine")

    def compute_deals(
        self,
        products: Iterable[CanonicalProduct],
        retailer: str,
        category: str = "",
        threshold_pct: Optional[float] = None,
    ) -> List[Deal]:
        """Filter products down to deals at or above the threshold.

        Args:
            products: Canonical products in source order
            retailer: Retailer tag stamped on every deal
            category: Fallback category for products without one
            threshold_pct: Minimum discount percentage (default 30)

        Returns:
            Deals in the same relative order as the input products
        """
        threshold = DEFAULT_THRESHOLD_PCT if threshold_pct is None else threshold_pct
        deals: List[Deal] = []
        used_ids: Set[str] = set()
        seen = 0

        for product in products:
            seen += 1
            original = product.original_price
            sale = product.sale_price
            if original is None or sale is None:
                continue
            if sale <= 0 or original <= 0 or sale >= original:
                continue

            discount_pct = compute_discount_pct(original, sale)
            if discount_pct < threshold:
                continue

            # Repeated retailer ids within one batch get a fresh UUID
            deal_id = product.product_id
            if not deal_id or deal_id in used_ids:
                deal_id = str(uuid.uuid4())
            used_ids.add(deal_id)

            deals.append(Deal(
                id=deal_id,
                name=product.name,
                category=product.category or category,
                retailer=retailer,
                original_price=original,
                sale_price=sale,
                discount_pct=discount_pct,
                image_url=product.image_url,
                product_url=product.product_url,
            ))

        self.logger.info(
            "deals_computed",
            retailer=retailer,
            category=category,
            products=seen,
            deals_found=len(deals),
            min_discount_pct=threshold,
        )
        return deals


@dataclass(frozen=True)
class ScanResult:
    """Extraction outcome plus the deals computed from it."""

    extraction: ExtractionResult
    deals: List[Deal] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.extraction.ok

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "success": self.ok,
            "retailer": self.extraction.retailer,
            "status": str(self.extraction.status),
            "strategy": str(self.extraction.strategy) if self.extraction.strategy else None,
            "productsFound": len(self.extraction.products),
            "dealsFound": len(self.deals),
            "deals": [d.to_dict() for d in self.deals],
        }
        if not self.ok:
            body["error"] = self.extraction.message
        return body


def scan_deals(
    raw_content: Any,
    retailer: str,
    category: str = "",
    threshold_pct: Optional[float] = None,
    dispatcher: Optional[ExtractionDispatcher] = None,
    engine: Optional[DealEngine] = None,
) -> ScanResult:
    """Run extraction and deal computation for one page or feed.

    Args:
        raw_content: HTML string or JSON value produced by the fetcher
        retailer: Retailer id (any case)
        category: Category for extracted products
        threshold_pct: Minimum discount percentage (default 30)
        dispatcher: Optional dispatcher carrying a custom registry
        engine: Optional deal engine

    Returns:
        ScanResult; deals is empty whenever extraction did not succeed
    """
    dispatcher = dispatcher or ExtractionDispatcher()
    engine = engine or DealEngine()

    extraction = dispatcher.extract(raw_content, retailer, category)
    if not extraction.ok:
        return ScanResult(extraction=extraction)

    deals = engine.compute_deals(extraction.products, retailer, category, threshold_pct)
    return ScanResult(extraction=extraction, deals=deals)
