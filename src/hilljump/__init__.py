"""HillJump: dividend ETF ranking and DRIP performance backend."""

__version__ = "0.1.0"
