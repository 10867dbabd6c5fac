"""Ephemeris — a small blogging backend.

Accounts, posts, comments and bearer-token sessions over HTTP,
backed by PostgreSQL.
"""

__version__ = "0.1.0"
