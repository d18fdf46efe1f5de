"""
services/ - Business Logic Layer
================================
Stats aggregation, renewal, reminders, email delivery, subscription
and account operations. Services receive repositories via their
constructors and know nothing about HTTP.
"""
