"""Resolve sale/original/currency from schema.org offer values.

Offer lists are read as a prioritized set of signals rather than
exclusive alternatives:

1. ``AggregateOffer``: lowPrice is the sale price, highPrice the original.
2. ``priceType`` SalePrice / ListPrice labels set sale / original.
3. Nested ``priceSpecification`` entries whose type or label contains
   "sale" / "list" (case-insensitive) set sale / original.
4. A plain untyped offer only sets the sale price while none is set yet,
   so secondary price objects (shipping, add-ons) cannot displace it.

Labelled signals overwrite earlier values regardless of position; untyped
ones never do. Currency comes from the first entry that names one.
"""

import re
from dataclasses import dataclass
from typing import Any, Optional

from dealscout.scrapers.utils.json_path import as_list, dicts
from dealscout.scrapers.utils.normalizer import PriceNormalizer

DEFAULT_CURRENCY = "USD"

_SALE = re.compile(r"sale", re.IGNORECASE)
_LIST = re.compile(r"list", re.IGNORECASE)


@dataclass(frozen=True)
class OfferPrices:
    sale: Optional[float] = None
    original: Optional[float] = None
    currency: str = DEFAULT_CURRENCY


def _label(value: Any) -> str:
    """Reduce "https://schema.org/SalePrice" style labels to the bare term."""
    if not isinstance(value, str):
        return ""
    return value.rstrip("/").rsplit("/", 1)[-1]


def _type_of(entry: dict) -> str:
    t = entry.get("@type")
    if isinstance(t, list):
        t = next((x for x in t if isinstance(x, str)), "")
    return t if isinstance(t, str) else ""


def reconcile_offer_prices(offers: Any) -> OfferPrices:
    """Resolve a (sale, original, currency) triple from an offers value.

    Args:
        offers: A single offer dict, a list of offers, or None

    Returns:
        OfferPrices with None for any price that could not be resolved
    """
    sale: Optional[float] = None
    original: Optional[float] = None
    currency: Optional[str] = None

    for offer in dicts(as_list(offers)):
        offer_currency = offer.get("priceCurrency")
        if currency is None and isinstance(offer_currency, str) and offer_currency:
            currency = offer_currency

        if _type_of(offer) == "AggregateOffer":
            low = PriceNormalizer.parse_price(offer.get("lowPrice"))
            high = PriceNormalizer.parse_price(offer.get("highPrice"))
            if low is not None:
                sale = low
            if high is not None:
                original = high
            continue

        price = PriceNormalizer.parse_price(offer.get("price"))
        price_type = _label(offer.get("priceType"))

        if price_type == "SalePrice" and price is not None:
            sale = price
            continue
        if price_type == "ListPrice" and price is not None:
            original = price
            continue

        specs = offer.get("priceSpecification")
        if specs:
            for spec in dicts(as_list(specs)):
                # UnitPriceSpecification carries the label in priceType
                spec_type = f"{_type_of(spec)} {_label(spec.get('priceType'))}"
                spec_price = PriceNormalizer.parse_price(spec.get("price"))
                if spec_price is None:
                    continue
                if _SALE.search(spec_type):
                    sale = spec_price
                if _LIST.search(spec_type):
                    original = spec_price
            continue

        # Plain offer: first one wins
        if sale is None and price is not None:
            sale = price

    return OfferPrices(sale=sale, original=original, currency=currency or DEFAULT_CURRENCY)
