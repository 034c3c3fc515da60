"""
Shared garden presentation layer: FastAPI router, schemas and dependencies.
"""
