"""Bit-parallel complex event processing: query and stream readers, bit vectors and matching."""

__version__ = "0.1.0"
__all__ = ["__version__"]