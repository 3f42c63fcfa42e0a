# shopcart/catalog.py
import logging

from .extensions import db
from .model import Product, ProductRecord

logger = logging.getLogger(__name__)

# Seed products inserted into an empty product table at startup
SEED_PRODUCTS = [
    {"id": "1", "name": "Wireless Headphones", "price": 99.99, "image": "/images/headphones.jpg", "description": "High-quality wireless headphones"},
    {"id": "2", "name": "Smartphone", "price": 699.99, "image": "/images/phone.jpg", "description": "Latest smartphone model"},
    {"id": "3", "name": "Laptop", "price": 1299.99, "image": "/images/laptop.jpg", "description": "Powerful gaming laptop"},
    {"id": "4", "name": "Smart Watch", "price": 249.99, "image": "/images/watch.jpg", "description": "Feature-rich smartwatch"},
    {"id": "5", "name": "Tablet", "price": 449.99, "image": "/images/tablet.jpg", "description": "10-inch tablet"},
]


def seed_catalog(products=None) -> int:
    """Insert seed products into an empty product table. Returns the number inserted."""
    if db.session.query(Product.id).count():
        return 0
    products = SEED_PRODUCTS if products is None else products
    for product_data in products:
        db.session.add(Product(**product_data))
    db.session.commit()
    logger.info("seeded %d products", len(products))
    return len(products)


class ProductCatalog:
    """
    Immutable view of the product table, read once at startup.

    Lookups never touch the database, so cart validation does not contend
    with the cart store for the connection.
    """

    def __init__(self, records=()):
        self._records = tuple(records)
        self._by_id = {r.id: r for r in self._records}

    @classmethod
    def load(cls) -> "ProductCatalog":
        rows = db.session.query(Product).order_by(Product.id.asc()).all()
        return cls(p.to_record() for p in rows)

    def list(self) -> list[ProductRecord]:
        return list(self._records)

    def get(self, product_id) -> ProductRecord | None:
        if product_id is None:
            return None
        return self._by_id.get(str(product_id))

    def __contains__(self, product_id) -> bool:
        return self.get(product_id) is not None

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self):
        return iter(self._records)
