"""Value types shared by the order book and the matching engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Union

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    """Convert a number to Decimal, going through str for floats to avoid binary noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


class Side(str, Enum):
    """Direction of an order."""

    BUY = "buy"
    SELL = "sell"

    def __str__(self) -> str:
        return self.value


class FillStatus(str, Enum):
    """Execution status of an order after a fill event."""

    PARTIALLY_FILLED = "PARTIALLY_FILLED"
    FILLED = "FILLED"
    NEW = "NEW"

    def __str__(self) -> str:
        return self.value


@dataclass
class Order:
    """A limit order; price and quantity are held as Decimal."""

    id: str
    side: Side
    price: Decimal
    qty: Decimal
    time: int = 0

    def __post_init__(self) -> None:
        self.side = Side(self.side)
        self.price = to_decimal(self.price)
        self.qty = to_decimal(self.qty)


@dataclass(frozen=True)
class Trade:
    """A match between a buy order and a sell order."""

    pair: str
    buy_order_id: str
    sell_order_id: str
    price: Decimal
    qty: Decimal


@dataclass(frozen=True)
class PriceUpdate:
    """Best bid/ask and volume-weighted average trade price of a pair."""

    pair: str
    best_bid: Decimal = Decimal(0)
    best_ask: Decimal = Decimal(0)
    avg_price: Decimal = Decimal(0)


@dataclass(frozen=True)
class DepthLevel:
    """Aggregated quantity and number of orders resting at one price."""

    price: Decimal
    quantity: Decimal
    order_count: int


@dataclass(frozen=True)
class DepthUpdate:
    """Snapshot of the best price levels on both sides of a book."""

    pair: str
    bids: list[DepthLevel] = field(default_factory=list)
    asks: list[DepthLevel] = field(default_factory=list)
    timestamp: int = 0
    trade_count: int = 0


@dataclass(frozen=True)
class OrderFill:
    """Execution details of an order or part of one."""

    order_id: str
    pair: str
    side: Side
    original_qty: Decimal
    executed_qty: Decimal
    remaining_qty: Decimal
    price: Decimal
    fill_price: Decimal
    status: FillStatus
    timestamp: int


@dataclass
class TradeStats:
    """Cumulative trading activity of a pair."""

    total_qty: Decimal = Decimal(0)
    total_value: Decimal = Decimal(0)
    trade_count: int = 0

    def record(self, trade: Trade) -> None:
        """Add a trade to the running totals."""
        self.total_qty += trade.qty
        self.total_value += trade.qty * trade.price
        self.trade_count += 1

    def average_price(self) -> Decimal:
        """Volume-weighted average price, or zero when nothing has traded."""
        if not self.total_qty:
            return Decimal(0)
        return self.total_value / self.total_qty