"""
Server-held cart lines and the primitives that mutate them.

All reads and writes go through one re-entrant lock, so check-then-act
sequences (does a line for this product exist? then update or insert) can
not interleave between request threads. Each primitive runs in its own
SQLAlchemy transaction and releases the connection before the lock is
released.
"""
import logging
import threading
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from ..errors import CartItemNotFoundError, InternalError, InvalidRequestError, ShopCartError
from ..extensions import db
from ..model import CartLine

logger = logging.getLogger(__name__)

# largest value the cart table's INTEGER column holds
MAX_QUANTITY = 2**63 - 1


class CartStore:
    def __init__(self):
        self._lock = threading.RLock()

    # ---- locking ------------------------------------------------------------

    @contextmanager
    def exclusive(self):
        """Hold the store lock across several primitives."""
        with self._lock:
            yield self

    @contextmanager
    def _transaction(self, action: str):
        with self._lock:
            session = db.session
            try:
                yield session
                session.commit()
            except ShopCartError:
                session.rollback()
                raise
            except (SQLAlchemyError, OverflowError) as e:
                session.rollback()
                logger.exception("cart store %s failed", action)
                raise InternalError(f"Cart store failed to {action}", details={"error": str(e)}) from e
            finally:
                session.close()

    # ---- primitives ---------------------------------------------------------

    def upsert_line(self, product_id: str, quantity_delta: int) -> str:
        """Add ``quantity_delta`` to the line for ``product_id``, creating it if needed."""
        if quantity_delta < 1:
            raise InvalidRequestError("quantity must be >= 1", details={"quantity": quantity_delta})
        if quantity_delta > MAX_QUANTITY:
            raise InvalidRequestError(f"quantity must be <= {MAX_QUANTITY}", details={"quantity": quantity_delta})

        with self._transaction("add item") as session:
            line = session.query(CartLine).filter_by(product_id=product_id).one_or_none()
            if line:
                if line.quantity + quantity_delta > MAX_QUANTITY:
                    raise InvalidRequestError(f"line quantity would exceed {MAX_QUANTITY}",
                                              details={"cartItemId": line.id, "quantity": line.quantity})
                line.quantity = line.quantity + quantity_delta
                logger.debug("merged %s x%d into line %s (now %d)", product_id, quantity_delta, line.id, line.quantity)
            else:
                line = CartLine(product_id=product_id, quantity=quantity_delta)
                session.add(line)
                session.flush()
                logger.debug("created line %s for %s x%d", line.id, product_id, quantity_delta)
            line_id = line.id
        return line_id

    def set_line(self, cart_item_id: str, quantity: int) -> str:
        if quantity < 1:
            raise InvalidRequestError("quantity must be >= 1", details={"quantity": quantity})
        if quantity > MAX_QUANTITY:
            raise InvalidRequestError(f"quantity must be <= {MAX_QUANTITY}", details={"quantity": quantity})

        with self._transaction("update item") as session:
            line = session.get(CartLine, cart_item_id)
            if not line:
                raise CartItemNotFoundError(cart_item_id)
            line.quantity = quantity
            logger.debug("set line %s quantity to %d", cart_item_id, quantity)
        return cart_item_id

    def get_line(self, cart_item_id: str) -> dict:
        with self._transaction("read item") as session:
            line = session.get(CartLine, cart_item_id)
            if not line:
                raise CartItemNotFoundError(cart_item_id)
            data = line.as_api()
        return data

    def remove_line(self, cart_item_id: str) -> None:
        with self._transaction("remove item") as session:
            deleted = session.query(CartLine).filter_by(id=cart_item_id).delete()
            if deleted == 0:
                raise CartItemNotFoundError(cart_item_id)
            logger.debug("removed line %s", cart_item_id)

    def list_lines(self) -> list[dict]:
        """Cart lines joined with their product fields, oldest first."""
        with self._transaction("read cart") as session:
            lines = (
                session.query(CartLine)
                .order_by(CartLine.added_at.asc(), CartLine.id.asc())
                .all()
            )
            rows = [line.as_api() for line in lines]
        return rows

    def clear(self) -> int:
        with self._transaction("clear cart") as session:
            removed = session.query(CartLine).delete()
            logger.debug("cleared %d line(s)", removed)
        return removed
