"""
kvsession - Cache and Cookie Session Infrastructure

Backend-agnostic key-value caching with TTL semantics, and a cookie-based
session manager built on top of it.

Architecture:
- Each module is self-contained with clear interfaces
- Cache backends are completely replaceable
- The session module only talks to the Cache interface

Modules:
- cache: Cache contract, Redis and in-memory backends
- session: Cookie-based session lifecycle
"""

__version__ = "1.0.0"
