"""Unit tests for SKU matching."""

from src.pipeline.scanner import match_sku


class TestMatchSku:
    def test_exact_match(self, make_product):
        catalog = [make_product(sku="SKU00001"), make_product(sku="SKU00002")]

        result = match_sku(catalog, "SKU00002")

        assert result.matched is True
        assert result.product is catalog[1]

    def test_surrounding_whitespace_is_ignored(self, make_product):
        catalog = [make_product(sku="SKU00001")]

        result = match_sku(catalog, "  SKU00001\n")

        assert result.matched is True
        assert result.code == "SKU00001"

    def test_match_is_case_sensitive(self, make_product):
        catalog = [make_product(sku="SKU00001")]

        assert match_sku(catalog, "sku00001").matched is False

    def test_first_duplicate_wins(self, make_product):
        first = make_product(sku="DUP")
        catalog = [first, make_product(sku="DUP")]

        assert match_sku(catalog, "DUP").product is first

    def test_unknown_and_empty_codes(self, make_product):
        catalog = [make_product(sku="SKU00001")]

        assert match_sku(catalog, "NOPE").product is None
        assert match_sku(catalog, "   ").matched is False
        assert match_sku([], "SKU00001").matched is False
