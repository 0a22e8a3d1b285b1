"""Data normalization utilities for prices, names, images and URLs."""

import math
import re
from typing import Any, Iterable, Optional
from urllib.parse import urljoin


NAME_SEPARATOR = " — "
UNKNOWN_NAME = "Unknown"

# Placeholder some feeds leave at the front of relative URLs
_URL_PLACEHOLDER = re.compile(r"^\{[A-Za-z]+\}")

_THOUSANDS_SEPARATOR = re.compile(r"(?<=\d),(?=\d{3}(?!\d))")
_PRICE_NUMBER = re.compile(r"-?(?:\d+(?:\.\d+)?|\.\d+)")


class PriceNormalizer:
    """Price parsing utilities.

    Retailer payloads carry prices as numbers, numeric strings or
    display strings ("$1,299.99"). Anything that does not resolve to a
    finite number is treated as absent.
    """

    @staticmethod
    def clean_price_string(raw: str) -> Optional[float]:
        """Parse a price string and extract numeric value.

        Handles various formats:
        - "$12.99" -> 12.99
        - "1,234.56" -> 1234.56
        - "USD 40" -> 40.0

        Strings holding a range or several amounts ("$10 - $20",
        "Was $100 Now $40"), decimal-comma formats ("1.299,99") and
        non-positive amounts are rejected rather than guessed at.

        Args:
            raw: Raw price string

        Returns:
            Positive float price value, or None if parsing fails
        """
        if not raw:
            return None

        # Remove thousand separators (commas between digit groups)
        cleaned = _THOUSANDS_SEPARATOR.sub("", raw.strip())

        numbers = _PRICE_NUMBER.findall(cleaned)
        if len(numbers) != 1:
            return None

        value = float(numbers[0])
        return value if math.isfinite(value) and value > 0 else None

    @classmethod
    def parse_price(cls, value: Any) -> Optional[float]:
        """Coerce a raw price value to float, or None when absent/invalid."""
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            number = float(value)
            return number if math.isfinite(number) else None
        if isinstance(value, str):
            return cls.clean_price_string(value)
        return None


def join_name(parts: Iterable[Any], default: str = UNKNOWN_NAME) -> str:
    """Join title/subtitle fragments, dropping empty ones."""
    cleaned = [str(p).strip() for p in parts if p not in (None, "") and not isinstance(p, (dict, list))]
    cleaned = [p for p in cleaned if p]
    return NAME_SEPARATOR.join(cleaned) or default


def resolve_image(image: Any) -> str:
    """Resolve a schema.org image value to a single URL.

    A string is used as-is, a list uses its first element when that is a
    string, an object uses its url (or contentUrl) field.
    """
    if not image:
        return ""
    if isinstance(image, str):
        return image
    if isinstance(image, list):
        return image[0] if isinstance(image[0], str) else ""
    if isinstance(image, dict):
        url = image.get("url") or image.get("contentUrl")
        return url if isinstance(url, str) else ""
    return ""


def absolute_url(url: Any, origin: str) -> str:
    """Make a feed URL absolute against the retailer's origin.

    Args:
        url: Absolute, protocol-relative or relative URL from a feed
        origin: Retailer site origin (e.g. "https://www.nike.com")

    Returns:
        Absolute URL, or "" when the input is missing
    """
    if not url or not isinstance(url, str):
        return ""
    if url.startswith(("http://", "https://")):
        return url

    path = _URL_PLACEHOLDER.sub("", url.strip())
    if not path.startswith("/"):
        path = f"/{path}"
    return urljoin(origin, path)
