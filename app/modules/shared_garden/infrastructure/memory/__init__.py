"""
In-memory garden store for development and tests.
"""
