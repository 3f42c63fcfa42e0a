from .cart_store import CartStore
from .cart_service import CartService
from .checkout_service import CheckoutService

__all__ = ["CartStore", "CartService", "CheckoutService"]
