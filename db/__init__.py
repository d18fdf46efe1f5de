"""
db/ - Database Layer
====================
PostgreSQL connection pool and schema creation for the Postgres storage
backend. Imports nothing from the layers above it.
"""
