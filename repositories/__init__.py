"""
repositories/ - Data Access Layer
==================================
Each repository encapsulates all storage access for a specific domain entity.
`base` defines the interfaces; `subscription_repo` and `user_repo` implement
them over PostgreSQL, `memory_repo` implements them in-process.
"""
