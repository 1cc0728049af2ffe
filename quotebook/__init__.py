"""Quotebook: submit, browse and filter attributed quotes."""

__version__ = "1.0.0"
