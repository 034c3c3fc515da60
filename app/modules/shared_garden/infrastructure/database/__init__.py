"""
Shared garden database infrastructure: ORM models and the compare-and-set store.
"""
