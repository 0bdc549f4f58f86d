"""Price-time priority order book for one trading pair."""

from __future__ import annotations

import heapq
import itertools
import time
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Iterator, Optional

from .types import DepthLevel, FillStatus, Order, OrderFill, Side, Trade, to_decimal


@dataclass
class MatchResult:
    """Trades and fill events produced by matching one incoming order."""

    trades: list[Trade] = field(default_factory=list)
    fills: list[OrderFill] = field(default_factory=list)


class _OrderHeap:
    """Heap of resting orders; best price first, then earliest arrival."""

    def __init__(self, descending: bool) -> None:
        self._descending = descending
        self._entries: list[tuple[Decimal, int, Order]] = []
        self._counter = itertools.count()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Order]:
        return (entry[2] for entry in self._entries)

    def push(self, order: Order, seq: Optional[int] = None) -> None:
        if seq is None:
            seq = next(self._counter)
        key = -order.price if self._descending else order.price
        heapq.heappush(self._entries, (key, seq, order))

    def pop(self) -> tuple[int, Order]:
        _, seq, order = heapq.heappop(self._entries)
        return seq, order

    def peek(self) -> Optional[Order]:
        return self._entries[0][2] if self._entries else None


def _status(remaining: Decimal) -> FillStatus:
    return FillStatus.FILLED if not remaining else FillStatus.PARTIALLY_FILLED


class OrderBook:
    """Bid and ask sides of one trading pair."""

    def __init__(self, pair: str) -> None:
        self.pair = pair
        self._bids = _OrderHeap(descending=True)
        self._asks = _OrderHeap(descending=False)

    def match(self, order: Order, original_qty=None) -> MatchResult:
        """Match an order against the opposite side and rest any remainder."""
        order = replace(order)
        original_qty = order.qty if original_qty is None else to_decimal(original_qty)
        now = int(time.time())
        result = MatchResult()

        if order.side is Side.BUY:
            own, opposite = self._bids, self._asks
        else:
            own, opposite = self._asks, self._bids

        while opposite and order.qty:
            seq, top = opposite.pop()
            crosses = (
                top.price <= order.price
                if order.side is Side.BUY
                else top.price >= order.price
            )
            if not crosses:
                opposite.push(top, seq)
                break
            qty = min(order.qty, top.qty)
            if not qty:
                continue

            if order.side is Side.BUY:
                buy_id, sell_id = order.id, top.id
            else:
                buy_id, sell_id = top.id, order.id
            result.trades.append(Trade(self.pair, buy_id, sell_id, top.price, qty))

            order.qty -= qty
            top.qty -= qty

            for filled in (top, order):
                result.fills.append(
                    OrderFill(
                        order_id=filled.id,
                        pair=self.pair,
                        side=filled.side,
                        original_qty=filled.qty + qty,
                        executed_qty=qty,
                        remaining_qty=filled.qty,
                        price=top.price,
                        fill_price=top.price,
                        status=_status(filled.qty),
                        timestamp=now,
                    )
                )

            if top.qty:
                opposite.push(top, seq)

        if order.qty:
            own.push(order)

        if order.qty == original_qty:
            result.fills.append(
                OrderFill(
                    order_id=order.id,
                    pair=self.pair,
                    side=order.side,
                    original_qty=original_qty,
                    executed_qty=Decimal(0),
                    remaining_qty=order.qty,
                    price=order.price,
                    fill_price=Decimal(0),
                    status=FillStatus.NEW,
                    timestamp=now,
                )
            )
        return result

    def best_bid(self) -> Decimal:
        """Highest bid price, or zero when there are no bids."""
        top = self._bids.peek()
        return top.price if top is not None else Decimal(0)

    def best_ask(self) -> Decimal:
        """Lowest ask price, or zero when there are no asks."""
        top = self._asks.peek()
        return top.price if top is not None else Decimal(0)

    def bid_depth(self, depth: int) -> list[DepthLevel]:
        """Up to ``depth`` bid levels, highest price first."""
        return self._depth(self._bids, depth, highest_first=True)

    def ask_depth(self, depth: int) -> list[DepthLevel]:
        """Up to ``depth`` ask levels, lowest price first."""
        return self._depth(self._asks, depth, highest_first=False)

    @staticmethod
    def _depth(side: _OrderHeap, depth: int, highest_first: bool) -> list[DepthLevel]:
        if depth <= 0 or not side:
            return []
        levels: dict[Decimal, list] = {}
        for order in side:
            level = levels.setdefault(order.price, [order.price, Decimal(0), 0])
            level[1] += order.qty
            level[2] += 1
        prices = sorted(levels, reverse=highest_first)[:depth]
        return [DepthLevel(*levels[price]) for price in prices]