"""
Commerce Cache

Application-level caching layer for the e-commerce backend: read-through
caching, pattern invalidation, warming and runtime monitoring on Redis.
"""

__version__ = "1.0.0"
