"""Pydantic schemas for tool inputs passed between agent turns.

fetch_page hands the agent a products array, which comes back as the
``content`` parameter of parse_deals; parse_deals hands back a deals
array for save_deals. Both arrays travel as JSON strings, so every item
is re-validated here before it reaches the engine or the store.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator
from pydantic.alias_generators import to_camel

from dealscout.scrapers.base import CanonicalProduct, Deal
from dealscout.scrapers.utils.normalizer import UNKNOWN_NAME, PriceNormalizer

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ProductItem(BaseModel):
    """A canonical product as serialized by fetch_page."""

    model_config = _CAMEL

    name: str = UNKNOWN_NAME
    category: Optional[str] = None
    original_price: Optional[float] = Field(None, description="List price; None when unknown")
    sale_price: Optional[float] = Field(None, description="Current price; None when unknown")
    currency: str = "USD"
    image_url: str = ""
    product_url: str = ""
    product_id: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def coerce_name(cls, v: Any) -> str:
        return UNKNOWN_NAME if v is None else str(v)

    @field_validator("category", "product_id", mode="before")
    @classmethod
    def coerce_optional_text(cls, v: Any) -> Optional[str]:
        return None if v is None else str(v)

    @field_validator("currency", "image_url", "product_url", mode="before")
    @classmethod
    def coerce_text(cls, v: Any, info) -> str:
        if v is None:
            return "USD" if info.field_name == "currency" else ""
        return str(v)

    @field_validator("original_price", "sale_price", mode="before")
    @classmethod
    def coerce_price(cls, v: Any) -> Optional[float]:
        """Unparseable prices count as absent rather than failing the batch."""
        return PriceNormalizer.parse_price(v)

    def to_canonical(self, fallback_category: str = "") -> CanonicalProduct:
        return CanonicalProduct(
            name=self.name,
            category=self.category or fallback_category,
            original_price=self.original_price,
            sale_price=self.sale_price,
            currency=self.currency,
            image_url=self.image_url,
            product_url=self.product_url,
            product_id=self.product_id,
        )


class DealItem(BaseModel):
    """A deal as serialized by parse_deals."""

    model_config = _CAMEL

    id: str = Field(..., min_length=1)
    name: str = UNKNOWN_NAME
    category: str = ""
    retailer: str = Field(..., min_length=1)
    original_price: float = Field(..., gt=0)
    sale_price: float = Field(..., gt=0)
    discount_pct: float
    image_url: str = ""
    product_url: str = ""

    @model_validator(mode="after")
    def sale_below_original(self) -> "DealItem":
        if self.sale_price >= self.original_price:
            raise ValueError("salePrice must be lower than originalPrice")
        return self

    def to_deal(self) -> Deal:
        return Deal(
            id=self.id,
            name=self.name,
            category=self.category,
            retailer=self.retailer,
            original_price=self.original_price,
            sale_price=self.sale_price,
            discount_pct=self.discount_pct,
            image_url=self.image_url,
            product_url=self.product_url,
        )


product_list_adapter = TypeAdapter(List[ProductItem])
deal_list_adapter = TypeAdapter(List[DealItem])
