# shopcart/model/cart.py
from __future__ import annotations
import uuid as _uuid
from datetime import datetime, timezone

from ..extensions import db


def _new_line_id() -> str:
    return str(_uuid.uuid4())

def _now_utc():
    return datetime.now(timezone.utc)


class CartLine(db.Model):
    __tablename__ = "cart"
    # one line per product; repeated adds merge into it
    __table_args__ = (db.UniqueConstraint("product_id", name="uq_cart_product"),)

    id = db.Column(db.String(36), primary_key=True, default=_new_line_id)
    product_id = db.Column(db.String(64), db.ForeignKey("product.id"), nullable=False, index=True)
    quantity = db.Column(db.Integer, nullable=False, default=1)
    added_at = db.Column(db.DateTime, default=_now_utc, nullable=False)

    product = db.relationship("Product", lazy="joined")

    def as_api(self):
        # joined view: the line plus the product fields the client renders
        p = self.product
        return {
            "cartItemId": self.id,
            "quantity": self.quantity,
            "id": self.product_id,
            "name": p.name if p else None,
            "price": p.price if p else None,
            "image": p.image if p else None,
            "description": p.description if p else None,
        }
