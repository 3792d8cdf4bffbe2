"""
Application Layer

FastAPI application, admin routes and the cache services they drive.
"""
