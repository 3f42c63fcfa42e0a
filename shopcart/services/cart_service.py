import logging

from ..catalog import ProductCatalog
from ..errors import InvalidRequestError, ProductNotFoundError
from ..utils.money import D, round_money, to_float
from .cart_store import MAX_QUANTITY, CartStore

logger = logging.getLogger(__name__)


def _as_quantity(value, *, field="quantity") -> int:
    # JSON numbers only; bool is an int subclass and "2" is not a quantity
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidRequestError(f"{field} must be an integer", details={field: value})
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidRequestError(f"{field} must be an integer", details={field: value})
        value = int(value)
    if value > MAX_QUANTITY:
        raise InvalidRequestError(f"{field} must be <= {MAX_QUANTITY}", details={field: value})
    return value


def summarize(lines):
    """
    Aggregate a cart snapshot.

    total is the price x quantity sum rounded to cents; itemCount is the sum
    of quantities, not the number of lines.
    """
    total = sum((D(line["price"]) * line["quantity"] for line in lines), D(0))
    return {
        "items": lines,
        "total": to_float(round_money(total)),
        "itemCount": sum(line["quantity"] for line in lines),
    }


class CartService:
    def __init__(self, store: CartStore, catalog: ProductCatalog):
        self.store = store
        self.catalog = catalog

    def get_products(self):
        return self.catalog.list()

    def get_product(self, product_id):
        product = self.catalog.get(product_id)
        if not product:
            raise ProductNotFoundError(product_id)
        return product

    def add_to_cart(self, product_id, quantity=1) -> str:
        if product_id is None or product_id == "":
            raise InvalidRequestError("productId is required")
        product = self.get_product(product_id)

        quantity = _as_quantity(quantity)
        if quantity < 1:
            raise InvalidRequestError("quantity must be >= 1", details={"quantity": quantity})

        cart_item_id = self.store.upsert_line(product.id, quantity)
        logger.info("added %s x%d to cart (line %s)", product.id, quantity, cart_item_id)
        return cart_item_id

    def update_quantity(self, cart_item_id, new_quantity) -> str | None:
        """
        Set a line's quantity to ``new_quantity``.

        Anything below 1 removes the line and returns None; otherwise the
        line keeps its id and that id is returned.
        """
        new_quantity = _as_quantity(new_quantity)
        if new_quantity < 1:
            self.remove_from_cart(cart_item_id)
            return None
        return self.store.set_line(cart_item_id, new_quantity)

    def remove_from_cart(self, cart_item_id) -> None:
        self.store.remove_line(cart_item_id)
        logger.info("removed line %s from cart", cart_item_id)

    def clear_cart(self) -> int:
        return self.store.clear()

    def get_cart_summary(self):
        return summarize(self.store.list_lines())
