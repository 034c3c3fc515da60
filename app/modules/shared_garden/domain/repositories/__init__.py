"""
Shared garden repository interfaces.

GardenStore is the only way to read or write a garden; implementations live in
the infrastructure layer.
"""

from .garden_store import GardenStore, GardenTransaction, Subscription

__all__ = ["GardenStore", "GardenTransaction", "Subscription"]
