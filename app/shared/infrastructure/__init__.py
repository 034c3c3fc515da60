"""
Infrastructure layer package for the Shared Garden service.
Provides the async database engine and session management.
"""

__all__ = []
