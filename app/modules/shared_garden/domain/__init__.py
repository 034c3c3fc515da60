"""
Shared garden domain layer.

Pure models and services. Services mutate a GardenState handed to them inside a
store transaction and never perform I/O themselves.
"""
