"""Order scheduler and history ledger.

The scheduler owns two views of the orders it has seen:

- a two-tier pending queue (VIP and standard), in memory only, holding the
  orders that have not reached a terminal status;
- the history index, ``customer_id -> [Order, ...]``, which is the durable
  source of truth and is written to the store after every mutation.

VIP precedence is absolute: every VIP order is listed before every standard
order, whatever their submission times.
"""
import bisect
import itertools
import logging
import threading
from datetime import datetime
from typing import List, Optional, Tuple

from ordercounter.services.ordering.models import Order, OrderStatus
from ordercounter.services.persistence.orders import History, OrderFileStore

logger = logging.getLogger(__name__)

# (order_time, arrival sequence, order); the sequence keeps ties in arrival order
_Entry = Tuple[datetime, int, Order]


class PendingQueue:
    """Two time-ordered segments, VIP first then standard.

    Not thread-safe on its own; ``OrderScheduler`` serializes access.
    """

    def __init__(self) -> None:
        self._vip: List[_Entry] = []
        self._standard: List[_Entry] = []
        self._seq = itertools.count()

    def put(self, order: Order, is_vip: bool = False) -> None:
        """Insert an order into its segment, keeping ascending order time."""
        segment = self._vip if is_vip else self._standard
        bisect.insort(segment, (order.order_time, next(self._seq), order))

    def snapshot(self) -> List[Order]:
        """Return all VIP orders then all standard orders, without mutating."""
        return [entry[2] for entry in self._vip] + [entry[2] for entry in self._standard]

    def find_all(self, order_id: str) -> List[Order]:
        """Return every queued order with ``order_id``, VIP segment first."""
        return [order for order in self.snapshot() if order.order_id == order_id]

    def remove(self, order: Order) -> bool:
        """Remove a queued order (by identity). Returns whether it was queued."""
        for segment in (self._vip, self._standard):
            for index, entry in enumerate(segment):
                if entry[2] is order:
                    del segment[index]
                    return True
        return False

    def size_vip(self) -> int:
        return len(self._vip)

    def size_standard(self) -> int:
        return len(self._standard)

    def clear(self) -> None:
        self._vip.clear()
        self._standard.clear()


class OrderScheduler:
    """Schedules pending orders and keeps the per-customer order history."""

    def __init__(self, store: OrderFileStore):
        self.store = store
        self.queue = PendingQueue()
        self._history: History = {}
        self._lock = threading.RLock()

    def load_history(self) -> int:
        """Replace the history with the store contents.

        Pending queues are left empty: orders are not replayed across
        restarts.

        Returns:
            Number of orders loaded
        """
        history = self.store.load()
        with self._lock:
            self._history = history
            self.queue.clear()
            count = sum(len(orders) for orders in history.values())
        logger.info(
            f"[SCHEDULER] History loaded - {count} orders for {len(history)} customers"
        )
        return count

    def place_order(self, order: Order, is_vip: bool = False) -> Order:
        """Queue an order, record it in history and persist the history.

        Order ids are not checked for uniqueness here; that is the caller's
        responsibility.
        """
        with self._lock:
            self.queue.put(order, is_vip=is_vip)
            self._history.setdefault(order.customer_id, []).append(order)
            self._persist()
        logger.info(
            f"[SCHEDULER] Order {order.order_id} placed - customer: {order.customer_id}, "
            f"tier: {'VIP' if is_vip else 'standard'}, items: {len(order.items)}"
        )
        return order

    def get_pending_orders(self) -> List[Order]:
        """VIP orders by ascending time, then standard orders by ascending time."""
        with self._lock:
            return self.queue.snapshot()

    def update_order_status(self, order_id: str, new_status: OrderStatus) -> bool:
        """Set the status of an order in the queue and in history.

        Terminal statuses (DELIVERED, CANCELLED) evict the order from the
        pending queue. Every history entry with ``order_id`` is updated.

        Returns:
            True if any order matched, False if the id is unknown (no-op)
        """
        new_status = OrderStatus(new_status)
        with self._lock:
            matched = False

            for queued in self.queue.find_all(order_id):
                queued.status = new_status
                matched = True
                if new_status.is_terminal:
                    self.queue.remove(queued)

            for order in self._iter_history():
                if order.order_id == order_id:
                    order.status = new_status
                    matched = True

            if not matched:
                logger.info(f"[SCHEDULER] Status update ignored - unknown order {order_id}")
                return False

            self._persist()
        logger.info(f"[SCHEDULER] Order {order_id} status -> {new_status}")
        return True

    def find_order(self, order_id: str) -> Optional[Order]:
        """Linear scan of the history; first match or None."""
        with self._lock:
            for order in self._iter_history():
                if order.order_id == order_id:
                    return order
        return None

    def get_all_orders(self) -> List[Order]:
        """Every order in history, grouped by customer."""
        with self._lock:
            return list(self._iter_history())

    def get_customer_history(self, customer_id: str) -> List[Order]:
        """A customer's orders in submission order; empty for unknown customers."""
        with self._lock:
            return list(self._history.get(customer_id, []))

    def _iter_history(self):
        for orders in self._history.values():
            yield from orders

    def _persist(self) -> None:
        # Store failures are logged by the store; in-memory state is kept.
        if not self.store.save(self._history):
            logger.warning("[SCHEDULER] History not persisted, continuing with in-memory state")
