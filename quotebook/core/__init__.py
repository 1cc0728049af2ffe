"""
Core utilities shared across the Quotebook API.

This package hosts configuration, the error taxonomy and logging setup.
Routers, services and repositories depend on these primitives instead of
reading os.environ or configuring handlers themselves.
"""
