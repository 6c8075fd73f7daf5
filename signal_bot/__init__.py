"""signal_bot: confluence trading signals from EMA, RSI, Bollinger and MACD votes."""

__version__ = "0.1.0"
