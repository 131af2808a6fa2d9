import pytest

from rose_assistant.catalog_loader import get_catalog
from rose_assistant.formatter import (
    NO_RESULTS,
    TIER_LABELS,
    contextual_response,
    format_category_listing,
    format_price,
    format_product_list,
    format_response,
    no_results_message,
    price_tier,
    quick_replies,
)
from rose_assistant.models import Product, ScoredProduct


catalog = get_catalog()


def _tool(i, price):
    return Product(id=f"tool-{i}", name=f"Broom {i}", price=price, category_key="brooms", category_name="Brooms")


def test_empty_list_uses_language_fallback():
    assert format_product_list([], "general", "en-IN") == NO_RESULTS["en-IN"]
    assert format_product_list([], "general", "ta-IN") == NO_RESULTS["ta-IN"]


def test_unknown_language_falls_back_to_english():
    assert no_results_message("fr-FR") == NO_RESULTS["en-IN"]
    out = format_product_list([catalog.get_product("delux_broom")], "general", "fr-FR")
    assert "Price: ₹120" in out


def test_every_product_shows_name_and_price():
    items = catalog.category_products("diy_kits")
    out = format_product_list(items, "diy_kit_inquiry")
    assert out.startswith("🌸 *Our DIY Manufacturing Kits:*")
    for p in items:
        assert p.name in out
        assert f"₹{format_price(p.price)}" in out


def test_kit_block_details():
    kit = catalog.get_product("fabric_conditioner_kit")
    out = format_product_list([kit], "diy_kit_inquiry")
    assert "1. *Fabric Conditioner Kit*" in out
    assert "💰 Price: ₹1100 | Makes: 20 litres | Cost/L: ₹55" in out
    # four fragrances, only two shown
    assert "Fragrances: Moments, Blossom..." in out
    assert "Includes: Conditioner base, Fragrance & more" in out
    assert "+91 8610570490" in out


def test_long_description_truncated():
    p = Product(id="x", name="Long", price=10, description="x" * 120)
    out = format_product_list([p], "general")
    assert "x" * 80 + "..." in out
    assert "x" * 81 not in out


def test_scored_products_accepted():
    p = catalog.get_product("dish_wash_5l")
    out = format_product_list([ScoredProduct(item=p, score=12.5)], "price_inquiry")
    assert out.startswith("💰 *Current Pricing:*")
    assert "Rose Dish Wash Liquid 5L" in out


def test_found_header_counts_products():
    out = format_product_list(catalog.category_products("mops"), "general")
    assert "Found 2 products" in out


@pytest.mark.parametrize(
    "price,tier",
    [(150, "premium"), (100, "premium"), (99.99, "standard"), (70, "standard"), (69, "budget"), (0, "budget")],
)
def test_price_tier(price, tier):
    assert price_tier(price) == tier


def test_category_listing_groups_and_overflow():
    items = [_tool(i, 100 + i) for i in range(4)]
    items += [_tool(10 + i, 70 + i) for i in range(4)]
    items += [_tool(20 + i, 10 + i) for i in range(4)]
    out = format_category_listing(items, "broom_inquiry")
    assert "🧹 *Our Brooms* (12 available)" in out
    for label in TIER_LABELS.values():
        assert label in out
    # 3 premium + 3 standard + 2 budget shown
    assert out.count("• ") == 8
    assert "...and 4 more" in out


def test_category_listing_without_overflow():
    out = format_category_listing([_tool(1, 120), _tool(2, 50)], "brush_inquiry")
    assert "more" not in out
    assert TIER_LABELS["standard"] not in out


def test_format_response_dispatch():
    brooms = catalog.category_products("brooms")
    assert "Our Brooms" in format_response(brooms, "broom_inquiry")
    assert "Found 4 products" in format_response(brooms, "general")


def test_format_price():
    assert format_price(1100.0) == "1100"
    assert format_price(47.5) == "47.50"


def test_contextual_response_and_quick_replies():
    ctx = contextual_response("franchise")
    assert ctx["prefix"].startswith("Rose Chemicals Franchise")
    assert "+91 8610570490" in ctx["suffix"]
    assert contextual_response("unknown") == contextual_response("general")
    assert quick_replies("diy_kit_inquiry")[0] == "Fabric Conditioner Kit"
    assert quick_replies("unknown") == quick_replies("general")
