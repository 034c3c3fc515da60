"""
Shared garden API request and response schemas.
"""
