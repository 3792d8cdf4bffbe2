"""
Infrastructure Module

Adapters for external systems: the Redis cache backend and the cache layer
built on top of it.
"""
