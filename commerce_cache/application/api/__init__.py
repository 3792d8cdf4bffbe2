"""
HTTP API: admin routes, response models and dependency providers.
"""
