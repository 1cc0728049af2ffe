"""
High-level use cases for the Quotebook API.

Routers call these services instead of talking to a storage backend
directly; validation happens here, once, before any backend is reached.
"""
