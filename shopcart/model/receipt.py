# shopcart/model/receipt.py
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from types import MappingProxyType

from ..utils.money import to_float


@dataclass(frozen=True)
class Receipt:
    """
    Outcome of one checkout. Never stored: it lives only as long as the
    response that carries it.

    ``items`` is the cart snapshot exactly as the client submitted it.
    """

    order_id: str
    timestamp: datetime
    customer_info: MappingProxyType
    items: tuple
    total: Decimal
    tax: Decimal
    grand_total: Decimal

    def as_api(self):
        return {
            "orderId": self.order_id,
            "timestamp": self.timestamp.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "customerInfo": dict(self.customer_info),
            "items": [dict(i) for i in self.items],
            "total": to_float(self.total),
            "tax": to_float(self.tax),
            "grandTotal": to_float(self.grand_total),
        }
