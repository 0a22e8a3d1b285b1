"""parse_deals tool: compute qualifying deals from fetch_page products."""

import json
import math
from typing import Any, Dict, List, Optional

import structlog
from pydantic import ValidationError

from dealscout.config import settings
from dealscout.core.exceptions import (
    DealScoutException,
    InputMissingError,
    ParseFailureError,
    error_response,
)
from dealscout.schemas.tools import product_list_adapter
from dealscout.scrapers.base import CanonicalProduct
from dealscout.services.deal_service import DealEngine

logger = structlog.get_logger(__name__)


def _describe(e: ValidationError) -> str:
    first = e.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return f"item {location}: {first['msg']}"


def load_products(content: str, category: str) -> List[CanonicalProduct]:
    """Decode the products array produced by fetch_page.

    Also accepts the whole fetch_page result object, since agents often
    pass it through unchanged.

    Raises:
        ParseFailureError: If content is not a valid products array
    """
    prefix = "content must be the products array from fetch_page"
    try:
        parsed: Any = json.loads(content)
    except json.JSONDecodeError as e:
        raise ParseFailureError(f"{prefix}: {e.msg}") from e

    if isinstance(parsed, dict) and isinstance(parsed.get("products"), list):
        parsed = parsed["products"]
    if not isinstance(parsed, list):
        raise ParseFailureError(f"{prefix}: not an array")

    try:
        items = product_list_adapter.validate_python(parsed)
    except ValidationError as e:
        raise ParseFailureError(f"{prefix}: {_describe(e)}") from e

    return [item.to_canonical(category) for item in items]


def parse_threshold(raw: Optional[str]) -> float:
    if raw is None or not str(raw).strip():
        return settings.DEFAULT_MIN_DISCOUNT_PCT
    try:
        value = float(raw)
    except ValueError as e:
        raise ParseFailureError(f"min_discount_pct must be a number, got '{raw}'") from e
    if not math.isfinite(value):
        raise ParseFailureError(f"min_discount_pct must be a number, got '{raw}'")
    return value


async def parse_deals(params: Dict[str, str], engine: Optional[DealEngine] = None) -> str:
    content = params.get("content") or ""
    retailer = params.get("retailer") or ""
    category = params.get("category") or ""

    try:
        if not content:
            raise InputMissingError("content")
        if not retailer:
            raise InputMissingError("retailer")
        min_discount = parse_threshold(params.get("min_discount_pct"))
        products = load_products(content, category)
    except DealScoutException as e:
        return error_response(e.message, e.kind)

    deals = (engine or DealEngine()).compute_deals(products, retailer, category, min_discount)

    logger.info(
        "parse_deals_complete",
        retailer=retailer,
        category=category,
        deals_found=len(deals),
        min_discount_pct=min_discount,
    )
    return json.dumps({
        "success": True,
        "retailer": retailer,
        "category": category,
        "minDiscountPct": min_discount,
        "dealsFound": len(deals),
        "deals": [d.to_dict() for d in deals],
    })
