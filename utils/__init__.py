"""
utils/ - Shared Helpers
=======================
Logging setup, application errors, input validation and formatting.
Nothing here depends on Flask or the database.
"""
