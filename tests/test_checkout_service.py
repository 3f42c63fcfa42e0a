"""
Tests for CheckoutService: totals and tax rounding, receipt contents,
cart clearing, and the failure paths that must leave the cart untouched.
"""
import threading
from decimal import Decimal

import pytest
from sqlalchemy import event
from sqlalchemy.exc import OperationalError

from shopcart.config import Config
from shopcart.errors import InternalError, InvalidRequestError
from shopcart.extensions import db
from shopcart.services.checkout_service import compute_totals


def _item(price, quantity=1, **extra):
    return {"price": price, "quantity": quantity, **extra}


class TestComputeTotals:
    def test_tax_and_grand_total_for_19_99(self):
        total, tax, grand_total = compute_totals([_item(19.99)])

        assert total == Decimal("19.99")
        assert tax == Decimal("1.60")
        assert grand_total == Decimal("21.59")

    def test_grand_total_is_not_total_plus_tax(self):
        # 0.115 rounds to 0.12; tax 0.0092 -> 0.01; 0.1242 -> 0.12
        total, tax, grand_total = compute_totals([_item(0.115)])

        assert total == Decimal("0.12")
        assert tax == Decimal("0.01")
        assert grand_total == Decimal("0.12")
        assert grand_total != total + tax

    def test_sums_price_times_quantity(self):
        total, tax, grand_total = compute_totals([_item(99.99, 2), _item(449.99, 1)])

        assert total == Decimal("649.97")
        assert tax == Decimal("52.00")
        assert grand_total == Decimal("701.97")

    def test_half_cent_rounds_up_on_the_written_decimal(self):
        # 1.005 as a binary float is 1.00499...; the submitted digits are rounded instead
        total, tax, grand_total = compute_totals([_item(1.005)])

        assert total == Decimal("1.01")
        assert tax == Decimal("0.08")
        assert grand_total == Decimal("1.09")


class TestCheckout:
    def test_tax_rate_comes_from_config(self, app, checkout_service):
        assert checkout_service.tax_rate == app.config["TAX_RATE"] == Config.TAX_RATE

    def test_receipt_contents(self, cart_service, checkout_service):
        cart_service.add_to_cart("1", 2)
        items = cart_service.get_cart_summary()["items"]
        customer = {"name": "Ada", "email": "ada@example.com"}

        receipt = checkout_service.checkout(items, customer)
        body = receipt.as_api()

        assert body["orderId"]
        assert body["timestamp"].endswith("Z")
        assert body["customerInfo"] == customer
        assert body["items"] == items
        assert body["total"] == 199.98
        assert body["tax"] == 16.0
        assert body["grandTotal"] == 215.98

    def test_checkout_clears_the_cart(self, cart_service, checkout_service):
        cart_service.add_to_cart("1", 1)
        cart_service.add_to_cart("2", 3)

        checkout_service.checkout(cart_service.get_cart_summary()["items"], {"name": "Ada"})

        summary = cart_service.get_cart_summary()
        assert summary["items"] == []
        assert summary["itemCount"] == 0

    def test_order_ids_are_unique(self, cart_service, checkout_service):
        first = checkout_service.checkout([_item(5.0)])
        second = checkout_service.checkout([_item(5.0)])
        assert first.order_id != second.order_id

    def test_submitted_prices_are_used_as_is(self, checkout_service):
        # product 3 lists at 1299.99; the submitted price wins
        receipt = checkout_service.checkout([_item(1.0, 2, id="3", name="Laptop")])
        assert receipt.total == Decimal("2.00")

    def test_missing_customer_info_becomes_empty(self, checkout_service):
        receipt = checkout_service.checkout([_item(1.0)])
        assert receipt.as_api()["customerInfo"] == {}

    def test_receipt_is_immutable(self, checkout_service):
        submitted = [_item(1.0, name="Thing")]
        receipt = checkout_service.checkout(submitted, {"name": "Ada"})

        submitted[0]["name"] = "Changed"
        assert receipt.items[0]["name"] == "Thing"
        with pytest.raises(TypeError):
            receipt.items[0]["name"] = "Other"
        with pytest.raises(AttributeError):
            receipt.total = Decimal("0")

    @pytest.mark.parametrize("cart_items", [[], None, "items", {"price": 1, "quantity": 1}])
    def test_empty_or_missing_items_is_invalid_and_does_not_mutate(self, cart_service, checkout_service, cart_items):
        cart_service.add_to_cart("1", 2)

        with pytest.raises(InvalidRequestError):
            checkout_service.checkout(cart_items, {"name": "Ada"})

        assert cart_service.get_cart_summary()["itemCount"] == 2

    @pytest.mark.parametrize("item", [
        _item("9.99"),
        _item(-1),
        _item(None),
        _item(5.0, 0),
        _item(5.0, 1.5),
        _item(5.0, "2"),
        "not-an-object",
    ])
    def test_malformed_items_are_invalid(self, checkout_service, item):
        with pytest.raises(InvalidRequestError):
            checkout_service.checkout([item])

    def test_non_object_customer_info_is_invalid(self, checkout_service):
        with pytest.raises(InvalidRequestError):
            checkout_service.checkout([_item(1.0)], "Ada")

    def test_failed_clear_blocks_the_receipt(self, cart_service, checkout_service):
        cart_service.add_to_cart("1", 1)
        items = cart_service.get_cart_summary()["items"]

        def fail_delete(conn, cursor, statement, parameters, context, executemany):
            if statement.lstrip().upper().startswith("DELETE FROM CART"):
                raise OperationalError(statement, parameters, Exception("disk I/O error"))

        event.listen(db.engine, "before_cursor_execute", fail_delete)
        try:
            with pytest.raises(InternalError) as exc:
                checkout_service.checkout(items)
        finally:
            event.remove(db.engine, "before_cursor_execute", fail_delete)

        assert exc.value.message == "Cart store failed to clear cart"
        assert cart_service.get_cart_summary()["itemCount"] == 1


class TestCheckoutSerialization:
    def test_add_during_checkout_lands_after_the_clear(self, app, cart_service, checkout_service, monkeypatch):
        """An add issued while checkout holds the store must not be wiped by its clear."""
        cart_service.add_to_cart("1", 1)
        items = cart_service.get_cart_summary()["items"]

        inside, release, added = threading.Event(), threading.Event(), threading.Event()
        log_discarded = checkout_service._log_discarded

        def paused_log_discarded(cart_items):
            inside.set()
            release.wait(timeout=5)
            log_discarded(cart_items)

        monkeypatch.setattr(checkout_service, "_log_discarded", paused_log_discarded)
        receipts, errors = [], []

        def run_checkout():
            try:
                with app.app_context():
                    receipts.append(checkout_service.checkout(items))
            except Exception as e:  # collected and asserted below
                errors.append(e)

        def run_add():
            try:
                with app.app_context():
                    cart_service.add_to_cart("2", 1)
                    added.set()
            except Exception as e:  # collected and asserted below
                errors.append(e)

        checkout_thread = threading.Thread(target=run_checkout)
        add_thread = threading.Thread(target=run_add)
        checkout_thread.start()
        try:
            assert inside.wait(timeout=5)
            add_thread.start()
            # checkout holds the store lock and has not cleared yet
            assert not added.wait(timeout=0.3)
        finally:
            release.set()
            checkout_thread.join(timeout=5)
            if add_thread.ident is not None:
                add_thread.join(timeout=5)

        assert errors == []
        assert added.is_set()
        assert [item["id"] for item in receipts[0].items] == ["1"]
        remaining = cart_service.get_cart_summary()["items"]
        assert [(line["id"], line["quantity"]) for line in remaining] == [("2", 1)]
