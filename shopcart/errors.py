"""
Error types for the cart and checkout engine.

Every failure the core reports is one of three kinds:

ShopCartError (base)
├── InvalidRequestError   missing/malformed fields, empty checkout, bad quantity
├── NotFoundError         unknown product or cart item
└── InternalError         the underlying store failed

Views never build error responses by hand; they let these propagate to the
handler installed by ``register_error_handlers``.
"""
from flask import jsonify
from werkzeug.exceptions import HTTPException

from .utils.api import api_error


class ShopCartError(Exception):
    """
    Base exception for all cart/checkout errors.

    Attributes:
        kind: stable machine-readable tag
        message: human-readable error message
        details: optional dict with additional context (ids, values)
    """

    kind = "internal"
    http_status = 500

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.__class__.__name__}('{self.message}', {details_str})"
        return f"{self.__class__.__name__}('{self.message}')"

    def as_api(self):
        return {"kind": self.kind, "details": self.details}


class InvalidRequestError(ShopCartError):
    kind = "invalid_request"
    http_status = 400


class NotFoundError(ShopCartError):
    kind = "not_found"
    http_status = 404


class InternalError(ShopCartError):
    kind = "internal"
    http_status = 500


class ProductNotFoundError(NotFoundError):
    """Raised when a product id is not in the catalog."""

    def __init__(self, product_id):
        super().__init__("Product not found", details={"productId": product_id})
        self.product_id = product_id


class CartItemNotFoundError(NotFoundError):
    """Raised when a cart item id does not exist in the store."""

    def __init__(self, cart_item_id):
        super().__init__("Cart item not found", details={"cartItemId": cart_item_id})
        self.cart_item_id = cart_item_id


def register_error_handlers(app):
    @app.errorhandler(ShopCartError)
    def handle_shopcart_error(e: ShopCartError):
        if e.http_status >= 500:
            app.logger.error("request failed: %r", e)
        r = jsonify(api_error(e.message, e.as_api()))
        r.status_code = e.http_status
        return r

    @app.errorhandler(404)
    def handle_not_found(e):
        r = jsonify(api_error("Resource not found", {"kind": NotFoundError.kind}))
        r.status_code = 404
        return r

    @app.errorhandler(405)
    def handle_method_not_allowed(e):
        r = jsonify(api_error("Method not allowed", {"kind": InvalidRequestError.kind}))
        r.status_code = 405
        return r

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        # leave werkzeug's own HTTP errors (415, 413, ...) to their default rendering
        if isinstance(e, HTTPException):
            return e
        app.logger.exception("unhandled error: %r", e)
        r = jsonify(api_error("Internal server error", {"kind": InternalError.kind, "details": {}}))
        r.status_code = 500
        return r
