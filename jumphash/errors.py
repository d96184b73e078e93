# jumphash/errors.py
"""Errors raised by jumphash."""


class InvalidArgument(ValueError):
    """
    A caller supplied an argument outside the function's domain.

    Raised for slot counts below 1 (or not representable as a signed
    64-bit integer) and for malformed seeds. Nothing transient is involved,
    so callers should fix the argument rather than retry.
    """
