"""Order matching engine with per-pair order books, market data streams and a demo command."""

__version__ = "0.1.0"