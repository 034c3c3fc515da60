"""
Shared garden external integrations: the change feed (Redis pub/sub or in-process).
"""
