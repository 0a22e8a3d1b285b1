"""Extraction dispatcher.

Chooses and runs extraction strategies for one piece of raw content:

  HTML  -> structured data (JSON-LD), then embedded state (__NEXT_DATA__),
           in the order the retailer profile lists them
  JSON  -> the retailer's direct-feed normalizer

The first strategy that returns products wins. Expected failures come
back as a tagged ExtractionResult rather than an exception.
"""

import json
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Dict, List, Optional

import structlog

from dealscout.scrapers.base import CanonicalProduct, ExtractionStrategy
from dealscout.scrapers.registry import RetailerProfile, RetailerRegistry, get_retailer_registry

logger = structlog.get_logger(__name__)


class ExtractionStatus(StrEnum):
    SUCCESS = "success"
    NO_PRODUCT_DATA = "no_product_data"
    UNKNOWN_RETAILER = "unknown_retailer"
    PARSE_FAILURE = "parse_failure"


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of one dispatch: which strategy won and what it produced."""

    status: ExtractionStatus
    retailer: str
    profile: RetailerProfile
    strategy: Optional[ExtractionStrategy] = None
    products: List[CanonicalProduct] = field(default_factory=list)
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status is ExtractionStatus.SUCCESS

    def products_as_dicts(self) -> List[Dict[str, Any]]:
        return [p.to_dict() for p in self.products]


def looks_like_json(content: str) -> bool:
    """True when a string payload is a JSON document rather than markup."""
    stripped = content.lstrip()
    return stripped.startswith(("{", "["))


class ExtractionDispatcher:
    """Runs the retailer's extraction strategies in fixed fallback order."""

    def __init__(self, registry: Optional[RetailerRegistry] = None):
        self.registry = registry or get_retailer_registry()
        self.logger = logger.bind(component="extraction_dispatcher")

    def extract(self, raw_content: Any, retailer: str, category: str) -> ExtractionResult:
        """Extract canonical products from raw page or feed content.

        Args:
            raw_content: HTML string, JSON string, or parsed JSON value
            retailer: Retailer id as supplied by the caller (any case)
            category: Category assigned to every extracted product

        Returns:
            ExtractionResult tagged with the outcome status
        """
        profile = self.registry.resolve(retailer)
        log = self.logger.bind(retailer=retailer, profile=str(profile.retailer), category=category)

        content = raw_content
        if isinstance(content, str) and looks_like_json(content):
            try:
                content = json.loads(content)
            except json.JSONDecodeError as e:
                log.warning("raw_content_invalid_json", error=str(e))
                return self._result(
                    ExtractionStatus.PARSE_FAILURE, retailer, profile,
                    message=f"content is not valid JSON: {e.msg}",
                )

        if isinstance(content, (dict, list)):
            return self._extract_feed(content, retailer, category, profile, log)

        if not isinstance(content, str) or not content.strip():
            return self._result(
                ExtractionStatus.PARSE_FAILURE, retailer, profile,
                message="content must be an HTML document or a JSON value",
            )

        for extractor in self.registry.html_extractors(profile):
            products = extractor.extract(content, category)
            if products:
                log.info("extraction_succeeded", strategy=str(extractor.strategy), count=len(products))
                return self._result(
                    ExtractionStatus.SUCCESS, retailer, profile,
                    strategy=extractor.strategy, products=products,
                )

        log.info("no_product_data_found", strategies=[str(s) for s in profile.html_strategies])
        return self._result(
            ExtractionStatus.NO_PRODUCT_DATA, retailer, profile,
            message="no product data found",
        )

    def _extract_feed(self, content, retailer, category, profile, log) -> ExtractionResult:
        extractor = self.registry.feed_extractor(profile)
        if extractor is None:
            log.warning("feed_normalizer_not_registered")
            return self._result(
                ExtractionStatus.UNKNOWN_RETAILER, retailer, profile,
                message=f"no feed normalizer registered for retailer '{retailer}'",
            )

        products = extractor.extract(content, category)
        if not products:
            return self._result(
                ExtractionStatus.NO_PRODUCT_DATA, retailer, profile,
                strategy=extractor.strategy, message="no product data found",
            )

        log.info("extraction_succeeded", strategy=str(extractor.strategy), count=len(products))
        return self._result(
            ExtractionStatus.SUCCESS, retailer, profile,
            strategy=extractor.strategy, products=products,
        )

    @staticmethod
    def _result(status, retailer, profile, strategy=None, products=None, message="") -> ExtractionResult:
        return ExtractionResult(
            status=status,
            retailer=retailer,
            profile=profile,
            strategy=strategy,
            products=list(products or []),
            message=message,
        )
