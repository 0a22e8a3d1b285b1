"""DealScout: turn retailer pages and feeds into discounted-product deals."""

__version__ = "0.1.0"
