# ------ shopcart/model/__init__.py ------

from .product import Product, ProductRecord
from .cart import CartLine
from .receipt import Receipt

__all__ = [
    "Product",
    "ProductRecord",
    "CartLine",
    "Receipt",
]
