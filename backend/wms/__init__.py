"""Warehouse management system backend."""

__version__ = "1.0.0"
