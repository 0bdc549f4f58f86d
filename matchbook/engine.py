"""Multi-pair matching engine with trade, fill, price and depth streams."""

from __future__ import annotations

import queue
import threading
import time
from dataclasses import replace
from typing import Optional

from .orderbook import MatchResult, OrderBook
from .types import DepthUpdate, Order, PriceUpdate, TradeStats

TRADE_STREAM_CAPACITY = 1000
PRICE_UPDATES_CAPACITY = 100
DEPTH_UPDATES_CAPACITY = 100
FILL_STREAM_CAPACITY = 1000

PRICE_INTERVAL = 0.5
DEPTH_INTERVAL = 0.1


class Engine:
    """Keeps one order book per trading pair and publishes market events.

    Trades and fills are delivered through ``trade_stream`` and
    ``fill_stream``; the background broadcasters publish to
    ``price_updates`` and ``depth_updates`` and drop updates when those
    queues are full.
    """

    def __init__(self) -> None:
        self._books: dict[str, OrderBook] = {}
        self._stats: dict[str, TradeStats] = {}
        self._lock = threading.Lock()
        self._trade_counter = 0
        self._stop_event = threading.Event()
        self._workers: list[threading.Thread] = []
        self.trade_stream: queue.Queue = queue.Queue(maxsize=TRADE_STREAM_CAPACITY)
        self.price_updates: queue.Queue = queue.Queue(maxsize=PRICE_UPDATES_CAPACITY)
        self.depth_updates: queue.Queue = queue.Queue(maxsize=DEPTH_UPDATES_CAPACITY)
        self.fill_stream: queue.Queue = queue.Queue(maxsize=FILL_STREAM_CAPACITY)

    def _book_locked(self, pair: str) -> OrderBook:
        book = self._books.get(pair)
        if book is None:
            book = self._books[pair] = OrderBook(pair)
        return book

    def book(self, pair: str) -> OrderBook:
        """Return the order book of a pair, creating it on first use."""
        with self._lock:
            return self._book_locked(pair)

    def has_book(self, pair: str) -> bool:
        """Whether an order book exists for the pair."""
        with self._lock:
            return pair in self._books

    def add_order(self, pair: str, order: Order) -> MatchResult:
        """Match an order in its pair's book and publish the resulting events.

        Trades are put on ``trade_stream`` and fills on ``fill_stream``;
        these puts block while the queues are full.
        """
        with self._lock:
            book = self._book_locked(pair)
            result = book.match(order, order.qty)
            if result.trades:
                stats = self._stats.setdefault(pair, TradeStats())
                for trade in result.trades:
                    stats.record(trade)
        for trade in result.trades:
            self.trade_stream.put(trade)
        for fill in result.fills:
            self.fill_stream.put(fill)
        return result

    def trade_stats(self, pair: str) -> Optional[TradeStats]:
        """A copy of the pair's trade statistics, or None if it has not traded."""
        with self._lock:
            stats = self._stats.get(pair)
            return replace(stats) if stats is not None else None

    def _snapshot_locked(self, pair: str, book: OrderBook, depth: int) -> DepthUpdate:
        stats = self._stats.get(pair)
        return DepthUpdate(
            pair=pair,
            bids=book.bid_depth(depth),
            asks=book.ask_depth(depth),
            timestamp=int(time.time()),
            trade_count=stats.trade_count if stats is not None else 0,
        )

    def _price_updates(self) -> list[PriceUpdate]:
        with self._lock:
            updates = []
            for pair, book in self._books.items():
                stats = self._stats.get(pair)
                updates.append(
                    PriceUpdate(
                        pair=pair,
                        best_bid=book.best_bid(),
                        best_ask=book.best_ask(),
                        avg_price=stats.average_price() if stats is not None else 0,
                    )
                )
            return updates

    def _depth_updates(self, depth: int) -> list[DepthUpdate]:
        with self._lock:
            return [
                self._snapshot_locked(pair, book, depth)
                for pair, book in self._books.items()
            ]

    @staticmethod
    def _offer(target: queue.Queue, items) -> None:
        for item in items:
            try:
                target.put_nowait(item)
            except queue.Full:
                pass

    def _start_worker(self, produce, target: queue.Queue, interval: float) -> None:
        stop = self._stop_event

        def run() -> None:
            while not stop.is_set():
                self._offer(target, produce())
                stop.wait(interval)

        worker = threading.Thread(target=run, daemon=True)
        self._workers.append(worker)
        worker.start()

    def start_price_broadcaster(self, interval: float = PRICE_INTERVAL) -> None:
        """Publish best bid/ask and average price of every pair every ``interval`` seconds."""
        self._start_worker(self._price_updates, self.price_updates, interval)

    def start_depth_streamer(self, depth: int, interval: float = DEPTH_INTERVAL) -> None:
        """Publish ``depth`` levels of every book every ``interval`` seconds."""
        self._start_worker(
            lambda: self._depth_updates(depth), self.depth_updates, interval
        )

    def stop(self) -> None:
        """Stop the background broadcasters and wait for them to finish."""
        self._stop_event.set()
        for worker in self._workers:
            worker.join()
        self._workers.clear()
        self._stop_event = threading.Event()

    def get_order_book_depth(self, pair: str, depth: int) -> Optional[DepthUpdate]:
        """A depth snapshot of the pair, or None if no book exists for it."""
        with self._lock:
            book = self._books.get(pair)
            if book is None:
                return None
            return self._snapshot_locked(pair, book, depth)

    def next_trade_id(self) -> str:
        """A globally unique sequential trade id: T1, T2, ..."""
        with self._lock:
            self._trade_counter += 1
            return f"T{self._trade_counter}"