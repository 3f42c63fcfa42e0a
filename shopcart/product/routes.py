from flask import jsonify, current_app

from ..utils.api import api_ok
from . import bp

def ok(msg, data=None, status=200):
    r = jsonify(api_ok(msg, data)); r.status_code = status; return r

def _cart_service():
    return current_app.extensions["shopcart"]["cart"]

@bp.get("")
def list_products():
    products = _cart_service().get_products()
    return ok("products", {"items": [p.as_api() for p in products]})

@bp.get("/<product_id>")
def get_product(product_id: str):
    return ok("product", _cart_service().get_product(product_id).as_api())
