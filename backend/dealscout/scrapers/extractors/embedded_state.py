"""Next.js ``__NEXT_DATA__`` embedded-state extractor.

Sites built with Next.js embed their server-side render state in a
single JSON script tag. When a page carries no JSON-LD we read that blob,
walk to ``props.pageProps.initialState`` and pick a normalizer from the
state keys we recognize.

To support another Next.js storefront, add a StateShape member, a
normalizer below and an entry in _STATE_NORMALIZERS.
"""

import json
import re
from enum import StrEnum
from typing import Any, Callable, Dict, List, Optional

from dealscout.scrapers.base import BaseExtractor, CanonicalProduct, ExtractionStrategy
from dealscout.scrapers.utils.json_path import as_dict, as_list, dicts, dig, text_or_none
from dealscout.scrapers.utils.normalizer import PriceNormalizer, join_name

_NEXT_DATA_RE = re.compile(
    r'<script[^>]*\bid=["\']__NEXT_DATA__["\'][^>]*>(.*?)</script>',
    re.DOTALL | re.IGNORECASE,
)

STATE_ROOT_PATH = ("props", "pageProps", "initialState")


class StateShape(StrEnum):
    """Recognized retailer state layouts under initialState."""

    NIKE_WALL = "nike_wall"


def _string(value: Any) -> str:
    return value if isinstance(value, str) else ""


def normalize_nike_wall(state: Dict[str, Any], category: str) -> List[CanonicalProduct]:
    """Flatten Nike's ``Wall.productGroupings[].products[]`` into products."""
    products: List[CanonicalProduct] = []

    for group in dicts(as_list(dig(state, "Wall", "productGroupings"))):
        for item in dicts(as_list(group.get("products"))):
            copy = as_dict(item.get("copy"))
            prices = as_dict(item.get("prices"))
            currency = prices.get("currency")

            products.append(CanonicalProduct(
                name=join_name([copy.get("title"), copy.get("subTitle")]),
                category=category,
                original_price=PriceNormalizer.parse_price(prices.get("initialPrice")),
                sale_price=PriceNormalizer.parse_price(prices.get("currentPrice")),
                currency=currency if isinstance(currency, str) and currency else "USD",
                image_url=_string(dig(item, "colorwayImages", "portraitURL")),
                product_url=_string(dig(item, "pdpUrl", "url")),
                product_id=text_or_none(item.get("globalProductId")),
            ))

    return products


StateNormalizer = Callable[[Dict[str, Any], str], List[CanonicalProduct]]

# Detection key under initialState -> shape; checked in insertion order
_SHAPE_KEYS: Dict[str, StateShape] = {
    "Wall": StateShape.NIKE_WALL,
}

_STATE_NORMALIZERS: Dict[StateShape, StateNormalizer] = {
    StateShape.NIKE_WALL: normalize_nike_wall,
}


def find_next_data(html: str) -> Optional[Dict[str, Any]]:
    """Return the parsed __NEXT_DATA__ blob, or None if absent or invalid."""
    match = _NEXT_DATA_RE.search(html)
    if not match:
        return None
    try:
        data = json.loads(match.group(1))
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


def detect_state_shape(state: Dict[str, Any]) -> Optional[StateShape]:
    for key, shape in _SHAPE_KEYS.items():
        if state.get(key):
            return shape
    return None


class EmbeddedStateExtractor(BaseExtractor):
    """Extracts products from a Next.js server-state blob."""

    strategy = ExtractionStrategy.EMBEDDED_STATE

    def extract(self, content: Any, category: str) -> List[CanonicalProduct]:
        if not isinstance(content, str) or not content:
            return []

        data = find_next_data(content)
        if data is None:
            self.logger.debug("next_data_not_found")
            return []

        state = dig(data, *STATE_ROOT_PATH)
        if not isinstance(state, dict):
            self.logger.debug("next_data_state_missing")
            return []

        shape = detect_state_shape(state)
        if shape is None:
            self.logger.info("next_data_shape_unrecognized", keys=sorted(state.keys())[:20])
            return []

        products = _STATE_NORMALIZERS[shape](state, category)
        self.logger.debug("embedded_state_extracted", shape=str(shape), count=len(products))
        return products
