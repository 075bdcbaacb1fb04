"""Caller-side streaming helpers."""

from .window import DEFAULT_MAXLEN, CandleWindow

__all__ = ["CandleWindow", "DEFAULT_MAXLEN"]
