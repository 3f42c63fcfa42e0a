"""
Checkout: turn a submitted cart snapshot into a Receipt and empty the cart.

Prices and quantities are taken from the submitted items as-is; the catalog
is not consulted. The receipt is built, then the cart is cleared while the
store lock is held. A failed clear raises instead of returning a receipt.
"""
import copy
import logging
import uuid
from collections.abc import Mapping
from datetime import datetime, timezone
from decimal import Decimal
from types import MappingProxyType

from ..config import Config
from ..errors import InvalidRequestError
from ..model import Receipt
from ..utils.money import D, parse_money, round_money
from .cart_store import CartStore

logger = logging.getLogger(__name__)


def compute_totals(items, tax_rate: Decimal = Config.TAX_RATE):
    """
    Returns (total, tax, grand_total) for validated items.

    All three are rounded independently from the unrounded sum, so
    grand_total can be one cent away from total + tax.
    """
    raw = sum((D(i["price"]) * int(i["quantity"]) for i in items), D(0))
    total = round_money(raw)
    tax = round_money(raw * tax_rate)
    grand_total = round_money(raw * (1 + tax_rate))
    return total, tax, grand_total


def _validate_items(cart_items):
    if not isinstance(cart_items, list) or not cart_items:
        raise InvalidRequestError("Cart items are required")

    for index, item in enumerate(cart_items):
        if not isinstance(item, Mapping):
            raise InvalidRequestError("Cart item must be an object", details={"index": index})
        price = parse_money(item.get("price"))
        if price is None or price < 0:
            raise InvalidRequestError("Cart item price must be a non-negative number",
                                      details={"index": index, "price": item.get("price")})
        qty = item.get("quantity")
        if (isinstance(qty, bool) or not isinstance(qty, (int, float))
                or (isinstance(qty, float) and not qty.is_integer()) or qty < 1):
            raise InvalidRequestError("Cart item quantity must be an integer >= 1",
                                      details={"index": index, "quantity": qty})


def _freeze(items):
    return tuple(MappingProxyType(copy.deepcopy(dict(i))) for i in items)


class CheckoutService:
    def __init__(self, store: CartStore, tax_rate: Decimal = Config.TAX_RATE):
        self.store = store
        self.tax_rate = D(tax_rate)

    def checkout(self, cart_items, customer_info=None) -> Receipt:
        _validate_items(cart_items)
        if customer_info is not None and not isinstance(customer_info, Mapping):
            raise InvalidRequestError("customerInfo must be an object")

        total, tax, grand_total = compute_totals(cart_items, self.tax_rate)

        with self.store.exclusive():
            self._log_discarded(cart_items)
            receipt = Receipt(
                order_id=str(uuid.uuid4()),
                timestamp=datetime.now(timezone.utc),
                customer_info=MappingProxyType(copy.deepcopy(dict(customer_info or {}))),
                items=_freeze(cart_items),
                total=total,
                tax=tax,
                grand_total=grand_total,
            )
            # raises InternalError on failure; no receipt is returned then
            self.store.clear()

        logger.info("checkout %s: %d item(s), grand total %s", receipt.order_id, len(receipt.items), grand_total)
        return receipt

    def _log_discarded(self, cart_items):
        submitted = {str(i.get("cartItemId")) for i in cart_items if i.get("cartItemId")}
        submitted_products = {str(i.get("id")) for i in cart_items if i.get("id") is not None}
        for line in self.store.list_lines():
            if line["cartItemId"] in submitted or line["id"] in submitted_products:
                continue
            logger.warning("checkout discards cart line %s (%s x%d) absent from the submitted cart",
                           line["cartItemId"], line["id"], line["quantity"])
