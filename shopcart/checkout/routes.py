# shopcart/checkout/routes.py
from flask import jsonify, current_app

from ..utils.api import api_ok, json_body
from . import bp

def ok(msg, data=None, status=200):
    r = jsonify(api_ok(msg, data)); r.status_code = status; return r

@bp.post("")
def checkout():
    """
    Body: { "cartItems": [{ "id", "name", "price", "quantity", ... }], "customerInfo": { "name", "email" } }
    Returns the receipt; the server cart is emptied.
    """
    payload = json_body()
    checkout_service = current_app.extensions["shopcart"]["checkout"]

    receipt = checkout_service.checkout(payload.get("cartItems"), payload.get("customerInfo"))

    resp = ok("order placed", receipt.as_api(), status=200)
    resp.headers["X-Order-Id"] = receipt.order_id
    return resp
