"""Demonstration that feeds a few orders to an engine and prints its streams."""

from __future__ import annotations

import argparse
import queue
import sys
import threading
import time
from typing import Callable, Optional, TextIO

from .engine import Engine
from .types import DepthLevel, DepthUpdate, Order, OrderFill, PriceUpdate, Side, Trade


def format_trade(trade: Trade) -> str:
    """One line describing a trade."""
    return f"[TRADE] {trade.pair} {trade.qty:.4f} @ {trade.price:.2f}"


def format_price(update: PriceUpdate) -> str:
    """One line describing a price update."""
    return (
        f"[PRICE] {update.pair} BID: {update.best_bid:.4f} / "
        f"ASK: {update.best_ask:.4f} / AVG: {update.avg_price:.4f}"
    )


def format_fill(fill: OrderFill) -> str:
    """One line describing a fill event."""
    return (
        f"[FILL] Order {fill.order_id} ({fill.side} {fill.pair}) - "
        f"Status: {fill.status} | Executed: {fill.executed_qty:.4f} | "
        f"Remaining: {fill.remaining_qty:.4f} | Price: {fill.price:.4f} | "
        f"Fill Price: {fill.fill_price:.4f}"
    )


def _format_levels(levels: list[DepthLevel]) -> list[str]:
    return [
        f"  {number}. {level.price:.4f} | {level.quantity:.4f} ({level.order_count} orders)"
        for number, level in enumerate(levels, start=1)
    ]


def format_depth(update: DepthUpdate) -> str:
    """A block of lines describing a depth snapshot, preceded by a blank line."""
    lines = ["", f"[DEPTH] {update.pair} (Trades: {update.trade_count})", "BIDS"]
    lines += _format_levels(update.bids)
    lines.append("---")
    lines += _format_levels(update.asks)
    lines.append("ASKS")
    return "\n".join(lines)


def _order(order_id: str, side: Side, price, qty) -> Order:
    return Order(order_id, side, price, qty, int(time.time()))


def run_demo(engine: Engine, out: TextIO, pause: Callable[[float], None]) -> None:
    """Place the demonstration orders, writing section headers to ``out``."""
    print("Adding orders...", file=out)
    engine.add_order("BTC/USDT", _order("BUY-2", Side.BUY, 2, 1))
    engine.add_order("BTC/USDT", _order("SELL-1", Side.SELL, 1, 1))
    engine.add_order("BTC/USDT", _order("SELL-2", Side.SELL, 30200, 0.6))

    pause(2)
    print("\n=== Adding market buy order (should trigger fills) ===", file=out)
    engine.add_order("BTC/USDT", _order("BUY-MARKET", Side.BUY, 30300, 0.8))

    pause(2)
    print("\n=== Adding large sell order (should partially fill) ===", file=out)
    engine.add_order("BTC/USDT", _order("SELL-LARGE", Side.SELL, 29000, 2.0))

    pause(3)
    print("\n=== Adding ETH orders ===", file=out)
    engine.add_order("ETH/USDT", _order("ETH-BUY-1", Side.BUY, 2000, 1.0))
    engine.add_order("ETH/USDT", _order("ETH-SELL-1", Side.SELL, 2010, 0.8))


def _listen(
    source: queue.Queue,
    render: Callable,
    emit: Callable[[str], None],
    stop: threading.Event,
    after: float = 0.0,
) -> threading.Thread:
    def run() -> None:
        while not stop.is_set():
            try:
                item = source.get(timeout=0.05)
            except queue.Empty:
                continue
            emit(render(item))
            if after:
                stop.wait(after)

    thread = threading.Thread(target=run, daemon=True)
    thread.start()
    return thread


def main(argv: Optional[list[str]] = None) -> int:
    """Run the demonstration, printing every stream to standard output."""
    parser = argparse.ArgumentParser(
        prog="matchbook-demo", description="Feed sample orders to a matching engine."
    )
    parser.add_argument("--depth", type=int, default=5, help="depth levels to stream")
    parser.add_argument(
        "--pause", type=float, default=1.0, help="factor applied to every pause"
    )
    parser.add_argument(
        "--linger",
        type=float,
        default=None,
        help="seconds to keep streaming after the orders (default: until interrupted)",
    )
    args = parser.parse_args(argv)

    out = sys.stdout
    out_lock = threading.Lock()

    def emit(text: str) -> None:
        with out_lock:
            print(text, file=out, flush=True)

    engine = Engine()
    engine.start_price_broadcaster()
    engine.start_depth_streamer(args.depth)

    stop = threading.Event()
    listeners = [
        _listen(engine.trade_stream, format_trade, emit, stop),
        _listen(engine.price_updates, format_price, emit, stop),
        _listen(engine.fill_stream, format_fill, emit, stop),
        _listen(engine.depth_updates, format_depth, emit, stop, after=2 * args.pause),
    ]

    class _Locked:
        def write(self, text: str) -> int:
            with out_lock:
                return out.write(text)

        def flush(self) -> None:
            out.flush()

    try:
        run_demo(engine, _Locked(), lambda seconds: time.sleep(seconds * args.pause))
        if args.linger is None:
            while True:
                time.sleep(1)
        else:
            time.sleep(args.linger)
    except KeyboardInterrupt:
        pass
    finally:
        stop.set()
        engine.stop()
        for listener in listeners:
            listener.join()
    return 0


if __name__ == "__main__":
    sys.exit(main())