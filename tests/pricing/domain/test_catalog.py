"""Tests for line items, packages, carts and base-price arithmetic."""

import pytest
from pricing.catalog.calculations import (
    cart_subtotal,
    package_price,
    selection_subtotal,
    service_price_in_package,
    total_duration,
)
from pricing.catalog.items import Cart, ItemKind, LineItem, Package
from protean.exceptions import IncorrectUsageError, ValidationError

SERVICE_PRICES = {"haircut": 500.0, "facial": 1200.0, "manicure": 400.0, "pedicure": 450.0}
SERVICE_DURATIONS = {"haircut": 30, "facial": 60, "manicure": 45, "pedicure": 50}


def _bridal_package(**overrides):
    defaults = {
        "package_id": "bridal",
        "price": 2000.0,
        "duration_minutes": 120,
        "service_ids": ["haircut", "facial"],
        "service_prices": {"facial": 1000.0},
    }
    defaults.update(overrides)
    return Package(**defaults)


class TestCartSubtotal:
    def test_sums_selected_prices(self):
        assert cart_subtotal(["haircut", "facial"], SERVICE_PRICES) == 1700.0

    def test_unknown_ids_contribute_nothing(self):
        assert cart_subtotal(["haircut", "massage"], SERVICE_PRICES) == 500.0

    def test_empty_selection(self):
        assert cart_subtotal([], SERVICE_PRICES) == 0.0

    def test_repeated_selection_is_counted_each_time(self):
        assert cart_subtotal(["manicure", "manicure"], SERVICE_PRICES) == 800.0

    def test_negative_prices_are_clamped(self):
        assert cart_subtotal(["broken"], {"broken": -50.0}) == 0.0


class TestPackagePrice:
    def test_base_package_price(self):
        assert package_price(_bridal_package(), [], SERVICE_PRICES) == 2000.0

    def test_customization_adds_extra_services(self):
        assert package_price(_bridal_package(), ["manicure", "pedicure"], SERVICE_PRICES) == 2850.0

    def test_customization_with_base_service_is_free(self):
        assert package_price(_bridal_package(), ["facial"], SERVICE_PRICES) == 2000.0

    def test_unknown_customization_is_ignored(self):
        assert package_price(_bridal_package(), ["massage"], SERVICE_PRICES) == 2000.0

    def test_missing_package(self):
        assert package_price(None, ["manicure"], SERVICE_PRICES) == 0.0


class TestServicePriceInPackage:
    def test_package_override_price(self):
        assert service_price_in_package("facial", _bridal_package(), SERVICE_PRICES) == 1000.0

    def test_falls_back_to_catalog_price(self):
        assert service_price_in_package("haircut", _bridal_package(), SERVICE_PRICES) == 500.0

    def test_service_outside_package(self):
        assert service_price_in_package("manicure", _bridal_package(), SERVICE_PRICES) == 0.0

    def test_missing_package(self):
        assert service_price_in_package("haircut", None, SERVICE_PRICES) == 0.0


class TestTotalDuration:
    def test_services_and_package_duration(self):
        packages = {"bridal": _bridal_package()}
        assert total_duration(["manicure"], ["bridal"], SERVICE_DURATIONS, packages) == 165

    def test_package_without_duration_sums_its_services(self):
        packages = {"bridal": _bridal_package(duration_minutes=None)}
        assert total_duration([], ["bridal"], SERVICE_DURATIONS, packages) == 90

    def test_customizations_add_their_duration_once(self):
        packages = {"bridal": _bridal_package()}
        customized = {"bridal": ["pedicure", "haircut"]}
        assert total_duration([], ["bridal"], SERVICE_DURATIONS, packages, customized) == 170

    def test_unknown_package_is_skipped(self):
        assert total_duration(["haircut"], ["spa-day"], SERVICE_DURATIONS, {}) == 30


class TestSelectionSubtotal:
    def test_services_plus_customized_packages(self):
        packages = {"bridal": _bridal_package()}
        subtotal = selection_subtotal(
            ["pedicure"],
            ["bridal"],
            SERVICE_PRICES,
            packages,
            {"bridal": ["manicure"]},
        )
        assert subtotal == 450.0 + 2400.0


class TestLineItem:
    def test_create(self):
        item = LineItem.create("haircut", 500, 30)
        assert item.item_id == "haircut"
        assert item.base_price == 500.0
        assert item.duration_minutes == 30
        assert item.kind == ItemKind.SERVICE.value

    def test_negative_price_is_clamped(self):
        assert LineItem.create("haircut", -10, 30).base_price == 0.0

    @pytest.mark.parametrize("minutes", [None, 0, -15])
    def test_non_positive_duration_is_left_unset(self, minutes):
        assert LineItem.create("haircut", 500, minutes).duration_minutes is None

    def test_zero_duration_is_rejected_on_direct_construction(self):
        with pytest.raises(ValidationError):
            LineItem(item_id="haircut", base_price=500.0, duration_minutes=0)

    def test_package_kind(self):
        assert LineItem.create("bridal", 2000, 120, kind=ItemKind.PACKAGE).kind == "Package"

    def test_malformed_price_is_rejected(self):
        with pytest.raises(ValidationError):
            LineItem.create("haircut", "five hundred", 30)


class TestCart:
    def _cart(self):
        return Cart().add(LineItem.create("haircut", 500, 30)).add(LineItem.create("facial", 1200, 60))

    def test_subtotal(self):
        assert self._cart().subtotal == 1700.0

    def test_duration(self):
        assert self._cart().duration_minutes == 90

    def test_empty_cart(self):
        assert Cart().subtotal == 0.0
        assert len(Cart()) == 0

    def test_add_returns_new_cart(self):
        cart = Cart()
        updated = cart.add(LineItem.create("haircut", 500, 30))
        assert len(cart) == 0
        assert len(updated) == 1

    def test_remove_by_id(self):
        cart = self._cart().remove("haircut")
        assert cart.item_ids == ["facial"]
        assert cart.subtotal == 1200.0

    def test_remove_unknown_id_keeps_items(self):
        assert self._cart().remove("massage").item_ids == ["haircut", "facial"]

    def test_order_does_not_change_subtotal(self):
        a = LineItem.create("haircut", 500, 30)
        b = LineItem.create("facial", 1200, 60)
        assert Cart().add(a).add(b).subtotal == Cart().add(b).add(a).subtotal

    def test_only_line_items_can_be_added(self):
        with pytest.raises(ValidationError):
            Cart().add({"item_id": "haircut", "base_price": 500})

    def test_negative_price_on_directly_built_item_is_clamped(self):
        cart = Cart().add(LineItem(item_id="haircut", base_price=-50.0)).add(LineItem.create("facial", 20.0))
        assert cart.subtotal == 20.0

    def test_items_without_duration_add_nothing(self):
        cart = self._cart().add(LineItem.create("consultation", 0))
        assert cart.duration_minutes == 90

    def test_items_are_line_items(self):
        assert all(isinstance(item, LineItem) for item in self._cart().items)

    def test_cart_is_immutable(self):
        cart = self._cart()
        with pytest.raises(IncorrectUsageError):
            cart.items = []
