"""schema.org JSON-LD extractor.

Scans every ``<script type="application/ld+json">`` block on a page and
normalizes the Product / ItemList objects it finds. A page may carry
several blocks; a malformed one is skipped without affecting the rest.
"""

import json
from typing import Any, Dict, Iterator, List

from bs4 import BeautifulSoup

from dealscout.scrapers.base import BaseExtractor, CanonicalProduct, ExtractionStrategy
from dealscout.scrapers.utils.json_path import as_list, dicts, first_present, text_or_none
from dealscout.scrapers.utils.normalizer import UNKNOWN_NAME, resolve_image
from dealscout.scrapers.utils.price_reconciler import reconcile_offer_prices


def _is_ld_json(value: Any) -> bool:
    return isinstance(value, str) and value.strip().lower() == "application/ld+json"


def _has_type(obj: Dict[str, Any], type_name: str) -> bool:
    """True when @type equals type_name or is a list containing it."""
    t = obj.get("@type")
    if isinstance(t, list):
        return type_name in t
    return t == type_name


def iter_ld_json_blocks(html: str) -> Iterator[str]:
    """Yield the raw text of each JSON-LD script block in document order."""
    soup = BeautifulSoup(html, "html.parser")
    for script in soup.find_all("script", attrs={"type": _is_ld_json}):
        yield script.get_text()


def to_canonical_product(item: Dict[str, Any], category: str) -> CanonicalProduct:
    """Convert a schema.org Product object to a CanonicalProduct."""
    prices = reconcile_offer_prices(item.get("offers"))
    name = item.get("name")
    url = item.get("url")

    return CanonicalProduct(
        name=name if isinstance(name, str) and name else UNKNOWN_NAME,
        category=category,
        original_price=prices.original,
        sale_price=prices.sale,
        currency=prices.currency,
        image_url=resolve_image(item.get("image")),
        product_url=url if isinstance(url, str) else "",
        product_id=text_or_none(first_present(item, ("sku",), ("productID",), ("@id",))),
    )


class StructuredDataExtractor(BaseExtractor):
    """Extracts products from schema.org JSON-LD script blocks."""

    strategy = ExtractionStrategy.STRUCTURED_DATA

    def extract(self, content: Any, category: str) -> List[CanonicalProduct]:
        if not isinstance(content, str) or not content:
            return []

        products: List[CanonicalProduct] = []
        for index, block in enumerate(iter_ld_json_blocks(content)):
            try:
                parsed = json.loads(block)
            except json.JSONDecodeError as e:
                self.logger.debug("ld_json_block_invalid", block=index, error=str(e))
                continue

            for item in self._flatten(parsed):
                products.extend(self._products_from_item(item, category))

        self.logger.debug("structured_data_extracted", count=len(products))
        return products

    def _flatten(self, parsed: Any) -> List[Dict[str, Any]]:
        """Promote singletons to lists and unfold @graph containers."""
        items: List[Dict[str, Any]] = []
        for entry in dicts(as_list(parsed)):
            graph = entry.get("@graph")
            if isinstance(graph, list):
                items.extend(dicts(graph))
            else:
                items.append(entry)
        return items

    def _products_from_item(self, item: Dict[str, Any], category: str) -> List[CanonicalProduct]:
        if _has_type(item, "Product"):
            return [to_canonical_product(item, category)]

        if _has_type(item, "ItemList"):
            found = []
            for element in dicts(as_list(item.get("itemListElement"))):
                inner = element.get("item") or element
                if isinstance(inner, dict) and _has_type(inner, "Product"):
                    found.append(to_canonical_product(inner, category))
            return found

        return []
