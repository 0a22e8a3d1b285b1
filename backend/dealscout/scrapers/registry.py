"""Retailer profiles and the extractor factory.

Every supported retailer is a member of the closed Retailer enumeration
and owns a RetailerProfile: the ordered HTML strategies to try, an
optional direct-feed normalizer and the site origin used to absolutize
URLs. Anything else resolves to Retailer.UNREGISTERED, which still gets
the generic HTML strategies but no feed support.

The registry is built once at import and never mutated; pass it to the
dispatcher explicitly.
"""

from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple

import structlog

from dealscout.scrapers.base import BaseExtractor, ExtractionStrategy
from dealscout.scrapers.extractors.direct_api import DirectApiExtractor, FeedNormalizer, normalize_nike_feed
from dealscout.scrapers.extractors.embedded_state import EmbeddedStateExtractor
from dealscout.scrapers.extractors.structured_data import StructuredDataExtractor

logger = structlog.get_logger(__name__)


class Retailer(StrEnum):
    """Retailers with a registered extraction profile."""

    NIKE = "nike"
    ADIDAS = "adidas"
    REI = "rei"
    TARGET = "target"
    UNREGISTERED = "unregistered"

    @classmethod
    def from_id(cls, retailer_id: Optional[str]) -> "Retailer":
        """Resolve a caller-supplied retailer id case-insensitively."""
        key = (retailer_id or "").strip().lower()
        try:
            retailer = cls(key)
        except ValueError:
            return cls.UNREGISTERED
        return retailer


HTML_STRATEGIES: Tuple[ExtractionStrategy, ...] = (
    ExtractionStrategy.STRUCTURED_DATA,
    ExtractionStrategy.EMBEDDED_STATE,
)


@dataclass(frozen=True)
class RetailerProfile:
    """Static extraction configuration for one retailer."""

    retailer: Retailer
    origin: str = ""
    html_strategies: Tuple[ExtractionStrategy, ...] = HTML_STRATEGIES
    feed_normalizer: Optional[FeedNormalizer] = None

    @property
    def is_registered(self) -> bool:
        return self.retailer is not Retailer.UNREGISTERED

    @property
    def has_feed(self) -> bool:
        return self.feed_normalizer is not None


class RetailerRegistry:
    """Read-only mapping of Retailer -> RetailerProfile."""

    def __init__(self, profiles: Mapping[Retailer, RetailerProfile]):
        if Retailer.UNREGISTERED not in profiles:
            raise ValueError("registry needs a profile for Retailer.UNREGISTERED")
        self._profiles = MappingProxyType(dict(profiles))

    def resolve(self, retailer_id: Optional[str]) -> RetailerProfile:
        """Return the profile for a retailer id, or the unregistered profile."""
        retailer = Retailer.from_id(retailer_id)
        profile = self._profiles.get(retailer)
        if profile is None:
            return self._profiles[Retailer.UNREGISTERED]
        return profile

    def html_extractors(self, profile: RetailerProfile) -> List[BaseExtractor]:
        """Instantiate the profile's HTML strategies in fallback order."""
        extractors: List[BaseExtractor] = []
        for strategy in profile.html_strategies:
            if strategy is ExtractionStrategy.STRUCTURED_DATA:
                extractors.append(StructuredDataExtractor())
            elif strategy is ExtractionStrategy.EMBEDDED_STATE:
                extractors.append(EmbeddedStateExtractor())
        return extractors

    def feed_extractor(self, profile: RetailerProfile) -> Optional[DirectApiExtractor]:
        """Return a DirectApiExtractor when the retailer has a feed normalizer."""
        if profile.feed_normalizer is None:
            return None
        return DirectApiExtractor(profile.feed_normalizer, profile.origin, str(profile.retailer))

    def get_registered_retailers(self) -> List[str]:
        return [str(r) for r in self._profiles if r is not Retailer.UNREGISTERED]


def build_default_registry() -> RetailerRegistry:
    """Build the registry of supported retailers."""
    profiles = {
        Retailer.NIKE: RetailerProfile(
            retailer=Retailer.NIKE,
            origin="https://www.nike.com",
            feed_normalizer=normalize_nike_feed,
        ),
        Retailer.ADIDAS: RetailerProfile(
            retailer=Retailer.ADIDAS,
            origin="https://www.adidas.com",
            html_strategies=(ExtractionStrategy.STRUCTURED_DATA,),
        ),
        Retailer.REI: RetailerProfile(
            retailer=Retailer.REI,
            origin="https://www.rei.com",
            html_strategies=(ExtractionStrategy.STRUCTURED_DATA,),
        ),
        Retailer.TARGET: RetailerProfile(
            retailer=Retailer.TARGET,
            origin="https://www.target.com",
            html_strategies=(ExtractionStrategy.STRUCTURED_DATA,),
        ),
        Retailer.UNREGISTERED: RetailerProfile(retailer=Retailer.UNREGISTERED),
    }
    registry = RetailerRegistry(profiles)
    logger.debug("retailer_registry_built", retailers=registry.get_registered_retailers())
    return registry


# Global registry instance
retailer_registry = build_default_registry()


def get_retailer_registry() -> RetailerRegistry:
    """Get the process-wide retailer registry.

    Returns:
        RetailerRegistry instance
    """
    return retailer_registry
