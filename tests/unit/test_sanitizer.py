"""Unit tests for ProductNameSanitizer."""
import pytest

from order_extractor.config import AppConfig, PatternConfig
from order_extractor.services.parsing.sanitizer import ProductNameSanitizer


@pytest.fixture
def sanitizer():
    config = AppConfig.for_testing()
    return ProductNameSanitizer(config.patterns, config.filter_keywords)


class TestSanitize:
    @pytest.mark.parametrize("raw, expected", [
        ("Product Name ShoppedQty 3 Was $29.99 $19.99", "Product Name"),
        ("Bananas Multipack Quantity: 175", "Bananas"),
        ("Great Value Milk Was $4.99", "Great Value Milk"),
        ("Fresh Bananas, each Weight-adjusted $1.24 52.0¢/lb", "Fresh Bananas, each"),
        ("Avocados 52.0¢/lb", "Avocados"),
        ("Paper Towels Count: 6", "Paper Towels"),
        ("  Organic\u200b   Apples  ", "Organic Apples"),
        ("Wireless Mouse Qty 2 $15.00", "Wireless Mouse"),
    ])
    def test_strips_noise(self, sanitizer, raw, expected):
        assert sanitizer.sanitize(raw) == expected

    def test_was_price_runs_before_trailing_price(self, sanitizer):
        patterns = PatternConfig()
        assert sanitizer.rules.index(patterns.cleanup_was_price) < sanitizer.rules.index(patterns.cleanup_price)
        assert "Was" not in sanitizer.sanitize("Coffee Beans Was $12.99 $9.99")

    def test_idempotent(self, sanitizer):
        once = sanitizer.sanitize("Dish Soap ShoppedQty 2 Was $5.00 $3.50")
        assert sanitizer.sanitize(once) == once

    def test_empty(self, sanitizer):
        assert sanitizer.sanitize("") == ""
        assert sanitizer.sanitize(None) == ""

    def test_filter_keyword_blanks_name(self, sanitizer):
        assert sanitizer.sanitize("Lists & Registries") == ""
        assert sanitizer.sanitize("ReorderListsRegistries $3.00") == ""

    def test_filter_keywords_are_case_sensitive(self, sanitizer):
        assert sanitizer.sanitize("sign in sheet clipboard") == "sign in sheet clipboard"


class TestExtractNameFromText:
    def test_skips_bare_amounts(self, sanitizer):
        text = "$4.99\nGreat Value Whole Milk\nQty 1"
        assert sanitizer.extract_name_from_text(text) == "Great Value Whole Milk"

    def test_skips_lines_with_keywords_case_insensitively(self, sanitizer):
        text = "SIGN IN to reorder\nLaundry Detergent"
        assert sanitizer.extract_name_from_text(text) == "Laundry Detergent"

    def test_falls_back_to_whole_text(self, sanitizer):
        assert sanitizer.extract_name_from_text("Tea") == "Tea"

    def test_empty(self, sanitizer):
        assert sanitizer.extract_name_from_text("") == ""
