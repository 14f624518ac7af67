"""Tests for entity search and selection helpers."""

import pytest

from storelens.search import (
    SearchType,
    get_autocompleter,
    remove_result,
    search,
    select_result,
    should_render_tags,
)


class TestSearch:
    def test_products_by_name(self, datastore):
        assert search(datastore, "products", "hoo") == [{"id": 10, "label": "Hoodie"}]

    def test_products_by_id(self, datastore):
        assert search(datastore, "products", "12") == [{"id": 12, "label": "T-Shirt"}]

    def test_products_sorted_by_label(self, datastore):
        labels = [r["label"] for r in search(datastore, "products")]
        assert labels == ["Beanie", "Hoodie", "T-Shirt"]

    def test_limit(self, datastore):
        assert search(datastore, "products", limit=1) == [{"id": 11, "label": "Beanie"}]

    def test_variation_label_includes_product(self, datastore):
        assert search(datastore, "variations") == [{"id": 121, "label": "T-Shirt - Large"}]

    def test_orders(self, datastore):
        assert search(datastore, "orders", "3") == [{"id": 3, "label": "Order #3"}]

    def test_countries(self, datastore):
        assert search(datastore, "countries") == [
            {"id": "CA", "label": "CA"},
            {"id": "US", "label": "US"},
        ]

    def test_coupons(self, datastore):
        assert search(datastore, "coupons", "save") == [{"id": 500, "label": "SAVE10"}]

    def test_unknown_type(self, datastore):
        with pytest.raises(KeyError):
            search(datastore, "taxes", "x")

    def test_email_input_type(self):
        assert get_autocompleter(SearchType.EMAILS.value).input_type == "email"


class TestSelection:
    hoodie = {"id": 10, "label": "Hoodie"}
    beanie = {"id": 11, "label": "Beanie"}

    def test_select_appends(self):
        assert select_result([self.hoodie], self.beanie) == [self.hoodie, self.beanie]

    def test_select_ignores_duplicates(self):
        assert select_result([self.hoodie], {"id": 10, "label": "Other"}) == [self.hoodie]

    def test_remove(self):
        assert remove_result([self.hoodie, self.beanie], 10) == [self.beanie]
        assert remove_result([self.hoodie], 99) == [self.hoodie]

    def test_tags_need_labels(self):
        assert should_render_tags([self.hoodie])
        assert not should_render_tags([{"id": 10}])
        assert not should_render_tags([])
