"""Scraper utilities for JSON navigation, price normalization and retries."""

from .json_path import as_dict, as_list, dig, first_present
from .normalizer import PriceNormalizer, absolute_url, join_name, resolve_image
from .price_reconciler import OfferPrices, reconcile_offer_prices
from .retry import http_retry


__all__ = [
    # JSON navigation
    "dig",
    "first_present",
    "as_list",
    "as_dict",
    # Normalization
    "PriceNormalizer",
    "absolute_url",
    "join_name",
    "resolve_image",
    # Price reconciliation
    "OfferPrices",
    "reconcile_offer_prices",
    # Retry decorators
    "http_retry",
]
