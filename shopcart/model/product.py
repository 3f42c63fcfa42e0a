# shopcart/model/product.py
from dataclasses import dataclass

from ..extensions import db


class Product(db.Model):
    __tablename__ = "product"
    id = db.Column(db.String(64), primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    price = db.Column(db.Float, nullable=False, default=0.0)
    image = db.Column(db.String(512))                # e.g. "/images/laptop.jpg"
    description = db.Column(db.Text)

    def to_record(self) -> "ProductRecord":
        return ProductRecord(
            id=self.id,
            name=self.name,
            price=self.price,
            image=self.image,
            description=self.description,
        )


@dataclass(frozen=True)
class ProductRecord:
    """Read-only copy of a product row, held by the catalog for the process lifetime."""

    id: str
    name: str
    price: float
    image: str | None = None
    description: str | None = None

    def as_api(self):
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "image": self.image,
            "description": self.description,
        }
