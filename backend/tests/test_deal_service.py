"""Tests for discount computation, deal filtering and the scan pipeline."""

import uuid

import pytest

from conftest import ld_json, make_product, page
from dealscout.scrapers.base import CanonicalProduct, Deal
from dealscout.services.deal_service import DealEngine, compute_discount_pct, scan_deals


@pytest.fixture
def engine() -> DealEngine:
    return DealEngine()


# ============================================================================
# DISCOUNT TESTS
# ============================================================================

class TestComputeDiscountPct:
    """Test discount rounding."""

    @pytest.mark.parametrize("original,sale,expected", [
        (100, 50, 50.0),
        (100, 77, 23.0),
        (99.99, 49.99, 50.0),
        (140, 89.97, 35.7),
        (100, 70.1, 29.9),
        (3, 2, 33.3),
    ])
    def test_rounds_to_one_decimal(self, original, sale, expected):
        assert compute_discount_pct(original, sale) == expected


# ============================================================================
# DEAL ENGINE TESTS
# ============================================================================

class TestDealEngine:
    """Test which products qualify as deals."""

    def test_qualifying_product(self, engine):
        """Test a 50% discount becomes a deal with every field carried over."""
        product = make_product(name="Pegasus", original=100, sale=50, product_id="p-1")

        deals = engine.compute_deals([product], "nike", "shoes")

        assert deals == [
            Deal(
                id="p-1",
                name="Pegasus",
                category="shoes",
                retailer="nike",
                original_price=100,
                sale_price=50,
                discount_pct=50.0,
                image_url="https://example.com/Pegasus.jpg",
                product_url="https://example.com/Pegasus",
            )
        ]

    @pytest.mark.parametrize("original,sale", [(50, 50), (40, 50), (0, 0), (100, 0), (-10, -20)])
    def test_non_discounted_products_excluded(self, engine, original, sale):
        """Test equal, inverted and non-positive prices never qualify."""
        assert engine.compute_deals([make_product(original=original, sale=sale)], "rei") == []

    def test_missing_prices_excluded(self, engine):
        products = [
            CanonicalProduct(name="No prices", category="shoes"),
            CanonicalProduct(name="No original", category="shoes", sale_price=10),
            CanonicalProduct(name="No sale", category="shoes", original_price=10),
        ]
        assert engine.compute_deals(products, "rei") == []

    def test_threshold_is_inclusive(self, engine):
        """Test exactly 30.0% qualifies and 29.9% does not."""
        at_threshold = make_product(name="at", original=100, sale=70)
        below = make_product(name="below", original=100, sale=70.1)

        deals = engine.compute_deals([at_threshold, below], "rei")

        assert [d.name for d in deals] == ["at"]
        assert deals[0].discount_pct == 30.0

    def test_custom_threshold(self, engine):
        products = [make_product(name="a", original=100, sale=80), make_product(name="b", original=100, sale=90)]

        assert [d.name for d in engine.compute_deals(products, "rei", threshold_pct=15)] == ["a"]
        assert len(engine.compute_deals(products, "rei", threshold_pct=0)) == 2

    def test_preserves_input_order(self, engine):
        products = [
            make_product(name="first", original=100, sale=40),
            make_product(name="skip", original=100, sale=99),
            make_product(name="second", original=200, sale=20),
            make_product(name="third", original=10, sale=5),
        ]

        deals = engine.compute_deals(products, "nike")

        assert [d.name for d in deals] == ["first", "second", "third"]

    def test_generates_id_when_product_has_none(self, engine):
        """Test deals without a retailer product id get a UUID."""
        deals = engine.compute_deals([make_product(), make_product()], "nike")

        assert len({d.id for d in deals}) == 2
        for deal in deals:
            uuid.UUID(deal.id)

    def test_repeated_product_id_gets_fresh_id(self, engine):
        """Test two products sharing a retailer id still yield distinct deal ids."""
        products = [
            make_product(name="a", original=100, sale=40, product_id="SKU1"),
            make_product(name="b", original=100, sale=50, product_id="SKU1"),
        ]

        first, second = engine.compute_deals(products, "rei")

        assert first.id == "SKU1"
        assert second.id != "SKU1"
        uuid.UUID(second.id)

    def test_category_fallback(self, engine):
        deals = engine.compute_deals([make_product(category="")], "nike", "clearance")
        assert deals[0].category == "clearance"

    def test_batches_are_independent(self, engine):
        """Test results for one retailer do not leak into another call."""
        nike = engine.compute_deals([make_product(name="n", original=100, sale=70)], "nike")
        rei = engine.compute_deals([make_product(name="r", original=100, sale=50)], "rei")

        assert [(d.retailer, d.discount_pct) for d in nike] == [("nike", 30.0)]
        assert [(d.retailer, d.discount_pct) for d in rei] == [("rei", 50.0)]

    def test_deal_rejects_invalid_prices(self):
        with pytest.raises(ValueError):
            Deal(id="x", name="n", category="c", retailer="r", original_price=50, sale_price=50, discount_pct=0)
        with pytest.raises(ValueError):
            Deal(id="", name="n", category="c", retailer="r", original_price=50, sale_price=10, discount_pct=80)


# ============================================================================
# SCAN PIPELINE TESTS
# ============================================================================

class TestScanDeals:
    """Test extraction plus deal computation end to end."""

    def test_labelled_offers_end_to_end(self, sale_list_product):
        """Test SalePrice 40 / ListPrice 100 yields a single 60% deal."""
        result = scan_deals(page(ld_json(sale_list_product)), "rei", "shoes")

        assert result.ok
        assert len(result.deals) == 1
        deal = result.deals[0]
        assert (deal.id, deal.sale_price, deal.original_price, deal.discount_pct) == ("TR3-001", 40.0, 100.0, 60.0)

        body = result.to_dict()
        assert body["success"] is True
        assert body["strategy"] == "structured_data"
        assert body["productsFound"] == 1
        assert body["dealsFound"] == 1
        assert body["deals"][0]["discountPct"] == 60.0

    def test_feed_end_to_end(self, nike_feed):
        """Test only the discounted feed item qualifies."""
        result = scan_deals(nike_feed, "nike", "shoes")

        assert [d.id for d in result.deals] == ["feed-1"]
        assert result.deals[0].discount_pct == 40.8

    def test_failed_extraction_has_no_deals(self):
        result = scan_deals("", "nike", "shoes")

        assert not result.ok
        assert result.deals == []
        assert result.to_dict()["status"] == "parse_failure"
        assert result.to_dict()["error"]

    def test_negative_labelled_sale_price_is_not_a_deal(self):
        """Test a "-40" SalePrice string is rejected rather than read as 40."""
        product = {
            "@type": "Product",
            "name": "Day Pack",
            "sku": "DP-1",
            "offers": [
                {"@type": "Offer", "price": "-40", "priceType": "SalePrice"},
                {"@type": "Offer", "price": "100", "priceType": "ListPrice"},
            ],
        }

        result = scan_deals(page(ld_json(product)), "rei", "packs")

        assert result.ok
        assert result.deals == []

    def test_duplicate_skus_get_distinct_ids(self):
        """Test two JSON-LD products with the same sku both survive with unique ids."""
        products = [
            {"@type": "Product", "name": "Tent", "sku": "SKU1", "offers": [
                {"price": 40, "priceType": "SalePrice"},
                {"price": 100, "priceType": "ListPrice"},
            ]},
            {"@type": "Product", "name": "Tent (2P)", "sku": "SKU1", "offers": [
                {"price": 40, "priceType": "SalePrice"},
                {"price": 100, "priceType": "ListPrice"},
            ]},
        ]

        result = scan_deals(page(ld_json(products)), "rei", "camping")

        assert [d.name for d in result.deals] == ["Tent", "Tent (2P)"]
        assert result.deals[0].id == "SKU1"
        assert len({d.id for d in result.deals}) == 2
