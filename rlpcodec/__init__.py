"""Recursive Length Prefix encoding, fixed-width unsigned integers and fixed-size hashes."""

__version__ = "0.1.0"

__all__ = ["api", "errors", "hashes", "hexser", "reader", "stream", "uint"]