"""Stored deal keyed by (retailer#category, deal id)."""

from datetime import datetime

from sqlalchemy import DateTime, Float, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from dealscout.config import settings
from dealscout.models.base import Base
from dealscout.scrapers.base import Deal


def partition_key(retailer: str, category: str) -> str:
    return f"{retailer}#{category}"


class DealRecord(Base):
    """A computed deal persisted for later retrieval.

    Records are partitioned by retailer and category and expire
    DEAL_TTL_HOURS after they were scraped.
    """

    __tablename__ = settings.DEALS_TABLE_NAME

    pk: Mapped[str] = mapped_column(String(300), primary_key=True, comment="retailer#category")
    sk: Mapped[str] = mapped_column(String(200), primary_key=True, comment="Deal id")

    name: Mapped[str] = mapped_column(String(500), nullable=False)
    retailer: Mapped[str] = mapped_column(String(100), nullable=False)
    category: Mapped[str] = mapped_column(String(200), nullable=False, default="")

    original_price: Mapped[float] = mapped_column(Float, nullable=False)
    sale_price: Mapped[float] = mapped_column(Float, nullable=False)
    discount_pct: Mapped[float] = mapped_column(Float, nullable=False)

    image_url: Mapped[str] = mapped_column(String(2000), nullable=False, default="")
    product_url: Mapped[str] = mapped_column(String(2000), nullable=False, default="")

    scraped_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index(f"idx_{settings.DEALS_TABLE_NAME}_expires_at", "expires_at"),
    )

    @classmethod
    def from_deal(cls, deal: Deal, scraped_at: datetime, expires_at: datetime) -> "DealRecord":
        return cls(
            pk=partition_key(deal.retailer, deal.category),
            sk=deal.id,
            name=deal.name,
            retailer=deal.retailer,
            category=deal.category,
            original_price=deal.original_price,
            sale_price=deal.sale_price,
            discount_pct=deal.discount_pct,
            image_url=deal.image_url,
            product_url=deal.product_url,
            scraped_at=scraped_at,
            expires_at=expires_at,
        )

    def to_deal(self) -> Deal:
        return Deal(
            id=self.sk,
            name=self.name,
            category=self.category,
            retailer=self.retailer,
            original_price=self.original_price,
            sale_price=self.sale_price,
            discount_pct=self.discount_pct,
            image_url=self.image_url,
            product_url=self.product_url,
        )

    def __repr__(self) -> str:
        return f"<DealRecord(pk='{self.pk}', sk='{self.sk}', discount_pct={self.discount_pct})>"
