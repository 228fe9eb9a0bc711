"""Order history persistence.

Orders are stored one per line in a comma-delimited text file::

    order_id,customer_id,status,total_amount,order_time[,item_entry...]

Each item entry is a ``|``-delimited group of six sub-fields::

    item_id|name|price|category|quantity|special_request

The same layout is used for reading and writing, so an item can be rebuilt
without a catalog lookup. Text values have ``%``, ``,``, ``|`` and line
breaks percent-encoded so that free text cannot break the framing.

The file is rewritten wholesale on every save. Loading is line-tolerant: a
bad line is logged and skipped, and a bad item entry only drops that item.
"""
import logging
import math
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union
from urllib.parse import unquote

from ordercounter.services.menu.base import Item
from ordercounter.services.ordering.models import Order, OrderLine, OrderStatus

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = ","
ITEM_SEPARATOR = "|"
MIN_ORDER_FIELDS = 5
ITEM_FIELDS = 6

_ESCAPES = {
    "%": "%25",
    ",": "%2C",
    "|": "%7C",
    "\n": "%0A",
    "\r": "%0D",
}

History = Dict[str, List[Order]]


class RecordFormatError(ValueError):
    """Raised when a stored record cannot be decoded."""


def escape_text(value: str) -> str:
    """Percent-encode the characters that carry meaning in the record format."""
    return "".join(_ESCAPES.get(char, char) for char in value)


def unescape_text(value: str) -> str:
    return unquote(value)


def encode_item(line: OrderLine) -> str:
    """Encode one order line as a six-field item entry."""
    item = line.item
    return ITEM_SEPARATOR.join(
        [
            escape_text(item.item_id),
            escape_text(item.name),
            repr(item.price),
            escape_text(item.category),
            str(line.quantity),
            escape_text(line.special_request or ""),
        ]
    )


def decode_item(entry: str) -> OrderLine:
    """Decode a six-field item entry.

    Raises:
        RecordFormatError: if the entry does not hold exactly six sub-fields
            or its price or quantity cannot be parsed.
    """
    parts = entry.split(ITEM_SEPARATOR)
    if len(parts) != ITEM_FIELDS:
        raise RecordFormatError(
            f"expected {ITEM_FIELDS} item fields, got {len(parts)}"
        )
    item_id, name, price, category, quantity, special_request = parts
    try:
        item = Item(
            item_id=unescape_text(item_id),
            name=unescape_text(name),
            price=float(price),
            category=unescape_text(category),
        )
        line = OrderLine(
            item=item,
            quantity=int(quantity),
            special_request=unescape_text(special_request) or None,
        )
    except ValueError as e:
        # pydantic's ValidationError is a ValueError too
        raise RecordFormatError(f"bad item values: {e}") from e
    return line


def encode_order(order: Order) -> str:
    """Encode an order as a single record line (without the newline)."""
    fields = [
        escape_text(order.order_id),
        escape_text(order.customer_id),
        order.status.value,
        repr(order.total_amount),
        order.order_time.isoformat(),
    ]
    fields.extend(encode_item(line) for line in order.items.values())
    return FIELD_SEPARATOR.join(fields)


def decode_record(raw: bytes) -> str:
    """Decode one raw store line as UTF-8, without its line ending."""
    try:
        return raw.decode("utf-8").rstrip("\r\n")
    except UnicodeDecodeError as e:
        raise RecordFormatError(f"invalid UTF-8 at byte {e.start}") from e


def parse_status(token: str, order_id: str = "") -> OrderStatus:
    """Parse a status token, falling back to PENDING for unknown values."""
    try:
        return OrderStatus(token.strip().upper())
    except ValueError:
        logger.warning(
            f"[STORE] Unknown status '{token}' for order {order_id}, defaulting to PENDING"
        )
        return OrderStatus.PENDING


def decode_order(record: str) -> Order:
    """Decode a record line into an order.

    Unknown status tokens default to PENDING and undecodable item entries are
    dropped with a warning; both keep the order.

    Raises:
        RecordFormatError: if the line has too few fields or its amount or
            timestamp cannot be parsed.
    """
    fields = record.split(FIELD_SEPARATOR)
    if len(fields) < MIN_ORDER_FIELDS:
        raise RecordFormatError(
            f"expected at least {MIN_ORDER_FIELDS} fields, got {len(fields)}"
        )

    order_id = unescape_text(fields[0])
    customer_id = unescape_text(fields[1])
    status = parse_status(fields[2], order_id)
    try:
        total_amount = float(fields[3])
        order_time = datetime.fromisoformat(fields[4].strip())
    except ValueError as e:
        raise RecordFormatError(f"bad amount or timestamp: {e}") from e
    if not math.isfinite(total_amount):
        raise RecordFormatError(f"non-finite amount: {fields[3]}")

    items: Dict[str, OrderLine] = {}
    for entry in fields[MIN_ORDER_FIELDS:]:
        try:
            line = decode_item(entry)
        except RecordFormatError as e:
            logger.warning(f"[STORE] Skipping item entry '{entry}' of order {order_id}: {e}")
            continue
        if line.item.item_id in items:
            logger.warning(
                f"[STORE] Skipping duplicate item {line.item.item_id} of order {order_id}"
            )
            continue
        items[line.item.item_id] = line

    return Order(
        order_id=order_id,
        customer_id=customer_id,
        status=status,
        total_amount=total_amount,
        order_time=order_time,
        items=items,
    )


class OrderFileStore:
    """Flat-file store for the order history."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def save(self, history: History) -> bool:
        """Rewrite the store with every order in ``history``.

        I/O failures are logged and reported through the return value; they
        are never raised.
        """
        orders = [order for customer_orders in history.values() for order in customer_orders]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                for order in orders:
                    f.write(encode_order(order) + "\n")
        except OSError as e:
            logger.error(
                f"[STORE] Error saving {len(orders)} orders to {self.path} - "
                f"Error: {type(e).__name__}: {str(e)}",
                exc_info=True,
            )
            return False
        logger.debug(f"[STORE] Saved {len(orders)} orders to {self.path}")
        return True

    def load(self) -> History:
        """Read the store and rebuild the per-customer history.

        A missing file yields an empty history. Malformed lines are skipped
        with a warning; an unreadable file is logged and whatever was read so
        far is returned.
        """
        history: History = {}
        if not self.path.exists():
            logger.info(f"[STORE] {self.path} does not exist, starting with empty history")
            return history

        loaded = skipped = 0
        try:
            with open(self.path, "rb") as f:
                for order in self._parse_lines(f):
                    if order is None:
                        skipped += 1
                        continue
                    history.setdefault(order.customer_id, []).append(order)
                    loaded += 1
        except OSError as e:
            logger.error(
                f"[STORE] Error reading {self.path} - Error: {type(e).__name__}: {str(e)}",
                exc_info=True,
            )

        logger.info(f"[STORE] Loaded {loaded} orders from {self.path} ({skipped} skipped)")
        return history

    def _parse_lines(self, lines: Iterable[bytes]):
        """Yield decoded orders, or None for each rejected line.

        Lines are decoded one at a time so an invalid byte only costs its own
        line.
        """
        for line_no, raw in enumerate(lines, start=1):
            order: Optional[Order]
            try:
                record = decode_record(raw)
                if not record.strip():
                    continue
                order = decode_order(record)
            except RecordFormatError as e:
                logger.warning(f"[STORE] Skipping line {line_no} of {self.path}: {e}")
                order = None
            yield order
