# 📄 File: app/modules/shared_garden/domain/models/__init__.py
# 🧭 Purpose (Layman Explanation):
# The nouns of the shared garden: the garden itself, what can be planted, the wallets
# and the receipts each action hands back.
# 🧪 Purpose (Technical Summary):
# Domain model exports. Must stay free of app.shared.config imports because settings
# builds GardenRules from this package.
# 🔗 Dependencies:
# pydantic
# 🔄 Connected Modules / Calls From:
# Domain services, stores, application layer, app.shared.config.settings

from .catalog import CATALOG, CatalogItem, PlacementCategory, PlacementKind
from .garden import GardenState, PlantedDecor, PlantedFlower, PlantedLandmark, Wallet
from .rules import GardenRules

__all__ = [
    "CATALOG",
    "CatalogItem",
    "PlacementCategory",
    "PlacementKind",
    "GardenState",
    "PlantedFlower",
    "PlantedDecor",
    "PlantedLandmark",
    "Wallet",
    "GardenRules",
]
