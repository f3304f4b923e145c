"""Serialization, RFC 1751 words, bignum helpers and utilities for a ledger network node."""

__version__ = "0.1.0"
__all__ = ["bignum", "rfc1751", "serializer", "utils"]