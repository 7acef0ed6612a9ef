"""Data models for the stock trading demo."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Optional
import uuid


CENT = Decimal("0.01")


def to_cents(value) -> Decimal:
    """Round a price-like value to two decimal places."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


class TransactionType(Enum):
    """Side of an order."""
    BUY = "BUY"
    SELL = "SELL"


@dataclass(frozen=True)
class Quote:
    """Snapshot of a ticker's price, change and volume.

    Attributes:
        symbol: Ticker symbol (e.g., "AAPL")
        name: Company name
        price: Last price
        change: Change in percentage points
        volume: Traded volume
    """
    symbol: str
    name: str
    price: float
    change: float
    volume: int

    def to_dict(self) -> dict:
        return {
            "symbol": self.symbol,
            "name": self.name,
            "price": self.price,
            "change": self.change,
            "volume": self.volume,
        }


@dataclass
class Transaction:
    """Append-only record of one buy or sell action.

    Attributes:
        symbol: Ticker symbol
        type: BUY or SELL
        quantity: Number of shares
        price: Price per share, or None when left to the log
        timestamp: Time the order was recorded (UTC)
        success: Whether the order was accepted
        message: Human-readable confirmation
        idempotency_key: Client-supplied key used to drop duplicate appends
        id: Unique transaction identifier (32 hex chars)
    """
    symbol: str
    type: TransactionType
    quantity: int
    price: Optional[Decimal] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    success: bool = True
    message: str = ""
    idempotency_key: Optional[str] = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def total(self) -> Optional[Decimal]:
        """Total value of this transaction, rounded to cents."""
        if self.price is None:
            return None
        return to_cents(self.price * self.quantity)

    def to_record(self) -> dict:
        """Serialize to the wire and log shape."""
        return {
            "id": self.id,
            "symbol": self.symbol,
            "type": self.type.value,
            "quantity": self.quantity,
            "price": None if self.price is None else str(to_cents(self.price)),
            "total": None if self.total is None else str(self.total),
            "timestamp": self.timestamp.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "success": self.success,
            "message": self.message,
        }


@dataclass
class Holding:
    """Client-tracked share count for one symbol."""
    symbol: str
    quantity: int
