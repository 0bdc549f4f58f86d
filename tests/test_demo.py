import io
from decimal import Decimal

from matchbook.demo import (
    format_depth,
    format_fill,
    format_price,
    format_trade,
    main,
    run_demo,
)
from matchbook.engine import Engine
from matchbook.types import (
    DepthLevel,
    DepthUpdate,
    FillStatus,
    OrderFill,
    PriceUpdate,
    Side,
    Trade,
)


def test_format_trade():
    trade = Trade("BTC/USDT", "BUY-2", "SELL-1", Decimal(2), Decimal(1))
    assert format_trade(trade) == "[TRADE] BTC/USDT 1.0000 @ 2.00"


def test_format_price_contains_fields():
    update = PriceUpdate("ETH/USDT", Decimal(2000), Decimal(2010), Decimal(0))
    text = format_price(update)
    assert text.startswith("[PRICE] ETH/USDT BID: ")
    assert "ASK: 2010.0000" in text
    assert "AVG: 0.0000" in text


def test_format_fill_contains_fields():
    fill = OrderFill(
        order_id="SELL-1",
        pair="BTC/USDT",
        side=Side.SELL,
        original_qty=Decimal(1),
        executed_qty=Decimal(1),
        remaining_qty=Decimal(0),
        price=Decimal(2),
        fill_price=Decimal(2),
        status=FillStatus.FILLED,
        timestamp=0,
    )
    text = format_fill(fill)
    assert text.startswith("[FILL] Order SELL-1 (sell BTC/USDT) - Status: FILLED")
    assert text.endswith("Fill Price: 2.0000")


def test_format_depth_layout():
    update = DepthUpdate(
        pair="BTC/USDT",
        bids=[DepthLevel(Decimal(100), Decimal(3), 2)],
        asks=[DepthLevel(Decimal(104), Decimal(2), 1), DepthLevel(Decimal(105), Decimal(1), 1)],
        timestamp=1,
        trade_count=4,
    )
    lines = format_depth(update).split("\n")
    assert lines[0] == ""
    assert lines[1] == "[DEPTH] BTC/USDT (Trades: 4)"
    assert lines[2] == "BIDS"
    assert lines[3] == "  1. 100.0000 | 3.0000 (2 orders)"
    assert lines[4] == "---"
    assert lines[-1] == "ASKS"
    assert len(lines) == 8


def test_run_demo_places_orders():
    engine = Engine()
    out = io.StringIO()
    pauses = []
    run_demo(engine, out, pauses.append)

    assert pauses == [2, 2, 3]
    text = out.getvalue()
    assert text.startswith("Adding orders...")
    assert "=== Adding ETH orders ===" in text
    assert engine.has_book("BTC/USDT")
    assert engine.has_book("ETH/USDT")

    trades = []
    while not engine.trade_stream.empty():
        trades.append(engine.trade_stream.get_nowait())
    assert engine.trade_stats("BTC/USDT").trade_count == len(trades)
    assert engine.trade_stats("ETH/USDT") is None

    eth = engine.get_order_book_depth("ETH/USDT", 5)
    assert eth.bids[0].price == Decimal(2000)
    assert eth.asks[0].price == Decimal(2010)


def test_main_prints_streams(capsys):
    assert main(["--pause", "0", "--linger", "0.3"]) == 0
    output = capsys.readouterr().out
    assert "Adding orders..." in output
    assert "[TRADE] BTC/USDT" in output
    assert "[FILL] Order BUY-2" in output