# matchbook

An in-memory order matching engine for several trading pairs at once.
Every pair has its own order book. Incoming orders are matched against the
opposite side, best price first, and among orders at the same price the
earliest comes first. A trade executes at the resting order's price.
Prices and quantities are `decimal.Decimal` throughout.

## Installation

```
pip install .
```

To get the test dependencies as well, use `pip install .[test]`.

## Core types (`matchbook.types`)

- `Order(id, side, price, qty, time=0)`: a limit order. `side` is a `Side`
  (`Side.BUY` or `Side.SELL`). Prices and quantities may be given as
  `Decimal`, `int`, `float` or `str`. They are converted to `Decimal`, and a
  float goes through its shortest text form, so `0.6` becomes
  `Decimal("0.6")`.
- `Trade`: the pair, the buy and sell order ids, the price and the quantity.
- `OrderFill`: the execution details of one order. It carries the original,
  executed and remaining quantity, the order price, the fill price, a
  `FillStatus` (`NEW`, `PARTIALLY_FILLED` or `FILLED`) and a Unix timestamp.
- `DepthLevel`: a price, the total quantity resting at that price, and
  `order_count`, the number of orders at that price.
- `DepthUpdate`: the pair, lists of bid and ask `DepthLevel`s, a timestamp
  and the pair's trade count.
- `PriceUpdate`: the pair with `best_bid`, `best_ask` and `avg_price`.
- `TradeStats`: `total_qty`, `total_value` and `trade_count`.
  `record(trade)` adds a trade to these totals. `average_price()` returns the
  volume-weighted average, or zero if nothing has traded.

## Using the engine

```python
from decimal import Decimal
from matchbook.engine import Engine
from matchbook.types import Order, Side

engine = Engine()
engine.add_order("BTC-USD", Order("sell1", Side.SELL, Decimal("50000"), Decimal("2")))
engine.add_order("BTC-USD", Order("buy1", Side.BUY, Decimal("50000"), Decimal("1.5")))

stats = engine.trade_stats("BTC-USD")
print(stats.total_qty, stats.total_value, stats.trade_count)  # 1.5 75000.0 1

snapshot = engine.get_order_book_depth("BTC-USD", 5)
for level in snapshot.asks:
    print(level.price, level.quantity, level.order_count)  # 50000 0.5 1
```

- `Engine.add_order(pair, order)` matches the order in the book for `pair`.
  The book is created on first use. Any unmatched remainder rests in the
  book. The order passed in is not modified. The call returns a
  `MatchResult` and also puts its trades on `engine.trade_stream` and its
  fills on `engine.fill_stream`.
- Each match produces one `Trade` and two `OrderFill` events. The first is
  for the resting order and the second for the incoming order. An incoming
  order that matches nothing gets a single fill with status `NEW`.
- `Engine.trade_stats(pair)` returns a copy of the pair's `TradeStats`, or
  `None` if the pair has not traded.
- `Engine.get_order_book_depth(pair, depth)` returns a `DepthUpdate`, or
  `None` if no book exists for the pair. Bids run from the highest price
  down and asks from the lowest price up.
- `Engine.book(pair)` returns the pair's `OrderBook` and creates it if
  needed. `Engine.has_book(pair)` tells whether the book exists yet.
- `Engine.next_trade_id()` returns `"T1"`, `"T2"`, … in order. It is safe to
  call from several threads.

## Live streams

The engine has four `queue.Queue`s:

| attribute       | contents       | capacity |
|-----------------|----------------|----------|
| `trade_stream`  | `Trade`        | 1000     |
| `fill_stream`   | `OrderFill`    | 1000     |
| `price_updates` | `PriceUpdate`  | 100      |
| `depth_updates` | `DepthUpdate`  | 100      |

`add_order` blocks while `trade_stream` or `fill_stream` is full, so these
queues need to be read. Background threads publish the other two queues:

```python
engine.start_price_broadcaster()      # every 0.5 s by default
engine.start_depth_streamer(10, 0.1)  # top-10 levels, every 0.1 s
...
engine.stop()                         # stop the threads and wait for them
```

These publishers drop an update when their queue is full, so they never
block.

## Working with a single order book

`matchbook.orderbook.OrderBook` can be used without the engine:

```python
from matchbook.orderbook import OrderBook

book = OrderBook("BTC-USDT")
result = book.match(order)          # original_qty defaults to order.qty
result.trades                       # Trade events, in order
result.fills                        # OrderFill events, in order
book.best_bid(), book.best_ask()    # Decimal(0) when that side is empty
book.bid_depth(5), book.ask_depth(5)  # empty list when depth <= 0
```

## Demo

This command runs a scripted session. It places orders on `BTC/USDT` and
`ETH/USDT` and prints trades, fills, prices and depth as they arrive:

```
matchbook-demo [--depth N] [--pause FACTOR] [--linger SECONDS]
```

- `--depth`: the number of levels to stream. The default is 5.
- `--pause`: a factor applied to every pause between steps. The default is 1.0.
- `--linger`: how long to keep streaming after the orders are placed. By
  default the demo runs until it is interrupted.

The formatting helpers `format_trade`, `format_price`, `format_fill` and
`format_depth` are in `matchbook.demo`. The scripted order sequence on its
own is `run_demo(engine, out, pause)`.

## What it does not do

Everything stays in memory. There is no persistence, no network interface,
and no way to cancel or amend an order once it rests in a book.