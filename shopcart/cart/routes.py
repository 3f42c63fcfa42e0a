# shopcart/cart/routes.py
from __future__ import annotations
from flask import jsonify, current_app

from ..errors import InvalidRequestError
from ..utils.api import api_ok, json_body
from . import bp

# ---- standard API response format ------------------------------------------
def ok(msg, data=None, status=200):
    r = jsonify(api_ok(msg, data)); r.status_code = status; return r

def _cart_service():
    return current_app.extensions["shopcart"]["cart"]

# ---- endpoints -------------------------------------------------------------

@bp.get("")
def get_cart():
    return ok("cart", _cart_service().get_cart_summary())

@bp.post("")
def add_item():
    """
    Body: { "productId": str, "quantity": int = 1 }
    Adding a product already in the cart increases that line's quantity.
    """
    data = json_body()
    product_id = data.get("productId")
    if product_id is None or product_id == "":
        raise InvalidRequestError("productId is required")

    cart_item_id = _cart_service().add_to_cart(product_id, data.get("quantity", 1))
    return ok("Item added to cart", {"cartItemId": cart_item_id}, status=201)

@bp.put("/<item_id>")
@bp.patch("/<item_id>")
def update_item(item_id: str):
    """
    Body: { "quantity": int }
    quantity < 1 removes the line.
    """
    data = json_body()
    if "quantity" not in data:
        raise InvalidRequestError("quantity is required")

    cart_item_id = _cart_service().update_quantity(item_id, data["quantity"])
    if cart_item_id is None:
        return ok("Item removed from cart", {"cartItemId": item_id, "removed": True})
    return ok("Cart updated successfully", {"cartItemId": cart_item_id, "removed": False})

@bp.delete("/<item_id>")
def remove_item(item_id: str):
    _cart_service().remove_from_cart(item_id)
    return ok("Item removed from cart", {"ok": True})

@bp.delete("")
def clear_cart():
    removed = _cart_service().clear_cart()
    return ok("Cart cleared", {"removed": removed})
