"""
security/ - Request Guards
==========================
Session login checks and per-client rate limiting for Flask handlers.
"""
