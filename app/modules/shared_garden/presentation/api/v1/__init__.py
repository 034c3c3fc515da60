"""
Shared garden API v1 endpoints.
"""
