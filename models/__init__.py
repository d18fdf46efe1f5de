"""
models/ - Domain Models
=======================
Plain dataclasses for users, subscriptions and dashboard stats,
plus the closed value sets (billing cycles, statuses, reminders, currencies).
"""
