"""
Core utilities package for the Shared Garden service.
Provides the exception hierarchy shared by every layer.
"""

from .exceptions import (
    AuthenticationError,
    ChangeFeedError,
    DatabaseError,
    DevToolsDisabledError,
    NotFoundError,
    SharedGardenException,
    TransactionConflictError,
    ValidationError,
)

__all__ = [
    "SharedGardenException",
    "ValidationError",
    "NotFoundError",
    "AuthenticationError",
    "DevToolsDisabledError",
    "DatabaseError",
    "TransactionConflictError",
    "ChangeFeedError",
]
