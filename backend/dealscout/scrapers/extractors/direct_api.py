"""Direct retailer feed normalizers.

Some retailers expose a JSON product feed that can be called without
rendering HTML. Prices there are already numeric, so each normalizer only
maps field names and resolves relative URLs against the retailer origin.
"""

from typing import Any, Callable, List

from dealscout.scrapers.base import BaseExtractor, CanonicalProduct, ExtractionStrategy
from dealscout.scrapers.utils.json_path import as_dict, dicts, dig, first_present, text_or_none
from dealscout.scrapers.utils.normalizer import PriceNormalizer, absolute_url, join_name

FeedNormalizer = Callable[[Any, str, str], List[CanonicalProduct]]

NIKE_FEED_PATH = ("data", "products", "products")


def normalize_nike_feed(payload: Any, category: str, origin: str) -> List[CanonicalProduct]:
    """Map Nike's browse feed (``data.products.products[]``) to products.

    Args:
        payload: Parsed feed response
        category: Category assigned to every product
        origin: Site origin used to absolutize relative URLs

    Returns:
        List of CanonicalProduct, empty when the feed path is missing
    """
    items = dig(payload, *NIKE_FEED_PATH)
    if not isinstance(items, list):
        return []

    products: List[CanonicalProduct] = []
    for item in dicts(items):
        price = as_dict(item.get("price"))
        currency = price.get("currency")
        image = first_present(item, ("images", "portraitURL"), ("images", "squarishURL"))

        products.append(CanonicalProduct(
            name=join_name([item.get("title"), item.get("subtitle")]),
            category=category,
            original_price=PriceNormalizer.parse_price(price.get("fullPrice")),
            sale_price=PriceNormalizer.parse_price(price.get("currentPrice")),
            currency=currency if isinstance(currency, str) and currency else "USD",
            image_url=absolute_url(image, origin),
            product_url=absolute_url(item.get("url"), origin),
            product_id=text_or_none(item.get("id")),
        ))

    return products


class DirectApiExtractor(BaseExtractor):
    """Runs a retailer's feed normalizer over an already-fetched JSON payload."""

    strategy = ExtractionStrategy.DIRECT_API

    def __init__(self, normalizer: FeedNormalizer, origin: str, retailer: str):
        super().__init__()
        self.normalizer = normalizer
        self.origin = origin
        self.logger = self.logger.bind(retailer=retailer)

    def extract(self, content: Any, category: str) -> List[CanonicalProduct]:
        if not isinstance(content, (dict, list)):
            return []

        products = self.normalizer(content, category, self.origin)
        if not products:
            # Usually means the retailer changed the feed layout
            self.logger.warning("direct_api_feed_empty", top_level_keys=_top_keys(content))
        else:
            self.logger.debug("direct_api_extracted", count=len(products))
        return products


def _top_keys(content: Any) -> List[str]:
    if isinstance(content, dict):
        return sorted(str(k) for k in content.keys())[:20]
    return []
