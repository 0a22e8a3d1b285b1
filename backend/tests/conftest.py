"""Pytest configuration and shared fixtures."""

import json

import pytest
import pytest_asyncio
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from dealscout.models.base import Base
from dealscout.scrapers.base import CanonicalProduct
from dealscout.services.deal_store import DealStore


def ld_json(payload) -> str:
    """Wrap a payload in a JSON-LD script tag."""
    return f'<script type="application/ld+json">{json.dumps(payload)}</script>'


def next_data(payload) -> str:
    """Wrap a payload in a Next.js __NEXT_DATA__ script tag."""
    return f'<script id="__NEXT_DATA__" type="application/json">{json.dumps(payload)}</script>'


def page(*blocks: str) -> str:
    return "<html><head><title>Sale</title>" + "".join(blocks) + "</head><body><h1>Sale</h1></body></html>"


# ============================================================================
# CONTENT FIXTURES
# ============================================================================

@pytest.fixture
def sale_list_product() -> dict:
    """A schema.org Product with labelled SalePrice and ListPrice offers."""
    return {
        "@context": "https://schema.org",
        "@type": "Product",
        "name": "Trail Runner 3",
        "sku": "TR3-001",
        "url": "https://www.rei.com/product/tr3",
        "image": ["https://www.rei.com/media/tr3.jpg", "https://www.rei.com/media/tr3-side.jpg"],
        "offers": [
            {"@type": "Offer", "price": 40, "priceType": "SalePrice", "priceCurrency": "USD"},
            {"@type": "Offer", "price": 100, "priceType": "ListPrice", "priceCurrency": "USD"},
        ],
    }


@pytest.fixture
def item_list() -> dict:
    """A schema.org ItemList mixing wrapped and bare Product elements."""
    return {
        "@context": "https://schema.org",
        "@type": "ItemList",
        "itemListElement": [
            {
                "@type": "ListItem",
                "position": 1,
                "item": {
                    "@type": "Product",
                    "name": "Rain Shell",
                    "image": {"@type": "ImageObject", "url": "https://cdn.example.com/shell.jpg"},
                    "offers": {"@type": "AggregateOffer", "lowPrice": "59.99", "highPrice": "120.00", "priceCurrency": "USD"},
                },
            },
            {
                "@type": "Product",
                "name": "Fleece",
                "offers": {"@type": "Offer", "price": "35.00"},
            },
            {"@type": "ListItem", "position": 3, "url": "https://example.com/not-a-product"},
        ],
    }


@pytest.fixture
def nike_state() -> dict:
    """A Next.js payload carrying Nike's product wall state."""
    return {
        "props": {
            "pageProps": {
                "initialState": {
                    "Wall": {
                        "productGroupings": [
                            {
                                "products": [
                                    {
                                        "globalProductId": "gp-1",
                                        "copy": {"title": "Air Zoom Pegasus 41", "subTitle": "Men's Road Running Shoes"},
                                        "prices": {"currentPrice": 84, "initialPrice": 140, "currency": "USD"},
                                        "colorwayImages": {"portraitURL": "https://static.nike.com/peg41.png"},
                                        "pdpUrl": {"url": "https://www.nike.com/t/pegasus-41"},
                                    },
                                ],
                            },
                            {
                                "products": [
                                    {
                                        "copy": {"title": "Club Fleece"},
                                        "prices": {"currentPrice": 55},
                                    },
                                ],
                            },
                        ],
                    },
                },
            },
        },
    }


@pytest.fixture
def nike_feed() -> dict:
    """A Nike browse feed response."""
    return {
        "data": {
            "products": {
                "products": [
                    {
                        "id": "feed-1",
                        "title": "Air Max 90",
                        "subtitle": "Men's Shoes",
                        "price": {"currentPrice": 77, "fullPrice": 130, "currency": "USD"},
                        "images": {"portraitURL": "https://static.nike.com/am90.png"},
                        "url": "{countryLang}/t/air-max-90-mens-shoes",
                    },
                    {
                        "id": "feed-2",
                        "title": "Tech Fleece Joggers",
                        "price": {"currentPrice": 130, "fullPrice": 130},
                        "images": {"squarishURL": "//static.nike.com/tech.png"},
                        "url": "/t/tech-fleece-joggers",
                    },
                ],
            },
        },
    }


def make_product(name="Item", original=100.0, sale=50.0, category="shoes", product_id=None) -> CanonicalProduct:
    return CanonicalProduct(
        name=name,
        category=category,
        original_price=original,
        sale_price=sale,
        image_url=f"https://example.com/{name}.jpg",
        product_url=f"https://example.com/{name}",
        product_id=product_id,
    )


# ============================================================================
# DATABASE FIXTURES
# ============================================================================

class FlakySessionFactory:
    """Session factory whose Nth session fails to open."""

    def __init__(self, factory, fail_on: int):
        self.factory = factory
        self.fail_on = fail_on
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.calls == self.fail_on:
            raise OperationalError("INSERT INTO deals", {}, Exception("database is locked"))
        return self.factory()


@pytest_asyncio.fixture
async def test_engine():
    """Create an in-memory SQLite database for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def deal_store(session_factory) -> DealStore:
    return DealStore(session_factory)
