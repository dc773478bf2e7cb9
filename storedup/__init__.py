"""Duplicate store detection for the Preuvely store-review marketplace."""

__version__ = "0.1.0"
