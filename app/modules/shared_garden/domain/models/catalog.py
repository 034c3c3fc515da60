# 📄 File: app/modules/shared_garden/domain/models/catalog.py
# 🧭 Purpose (Layman Explanation):
# The garden shop's price list: every plant, decoration and landmark a couple can place,
# what it costs and how much room it needs around it.
# 🧪 Purpose (Technical Summary):
# Static catalog of placeable item types with category, placement kind, gold cost and
# collision radius, plus lookup helpers used by the planting and refund services.
# 🔗 Dependencies:
# dataclasses, enum, typing
# 🔄 Connected Modules / Calls From:
# economy service (cost, collision radius), health service (growth thresholds),
# presentation schemas (catalog endpoint)

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional


class PlacementCategory(str, Enum):
    """Top-level arrays of the garden document."""
    FLOWER = "flower"
    DECOR = "decor"
    LANDMARK = "landmark"


class PlacementKind(str, Enum):
    """Finer grouping used for first-plant tips and growth speed."""
    FLOWER = "flower"
    LARGE_PLANT = "largeplant"
    TREE = "tree"
    DECOR = "decor"
    LANDMARK = "landmark"


@dataclass(frozen=True)
class CatalogItem:
    type: str
    category: PlacementCategory
    kind: PlacementKind
    cost: int
    radius: float


# Landmarks never collide, their radius is informational only
_ITEMS: List[CatalogItem] = [
    # Flowers
    CatalogItem("rose", PlacementCategory.FLOWER, PlacementKind.FLOWER, 3, 24),
    CatalogItem("tulip", PlacementCategory.FLOWER, PlacementKind.FLOWER, 5, 24),
    CatalogItem("morning_glory", PlacementCategory.FLOWER, PlacementKind.FLOWER, 7, 24),
    CatalogItem("strawberry", PlacementCategory.FLOWER, PlacementKind.FLOWER, 9, 24),
    CatalogItem("orchid", PlacementCategory.FLOWER, PlacementKind.FLOWER, 10, 24),
    CatalogItem("watermelon", PlacementCategory.FLOWER, PlacementKind.LARGE_PLANT, 12, 40),
    CatalogItem("pumpkin", PlacementCategory.FLOWER, PlacementKind.LARGE_PLANT, 14, 42),
    CatalogItem("apple_tree", PlacementCategory.FLOWER, PlacementKind.TREE, 20, 70),
    # Decor
    CatalogItem("garden_gnome", PlacementCategory.DECOR, PlacementKind.DECOR, 15, 20),
    CatalogItem("lawnchair", PlacementCategory.DECOR, PlacementKind.DECOR, 18, 25),
    CatalogItem("birdbath", PlacementCategory.DECOR, PlacementKind.DECOR, 20, 20),
    CatalogItem("pond", PlacementCategory.DECOR, PlacementKind.DECOR, 20, 40),
    CatalogItem("pink_flamingo", PlacementCategory.DECOR, PlacementKind.DECOR, 22, 15),
    CatalogItem("campfire", PlacementCategory.DECOR, PlacementKind.DECOR, 22, 25),
    CatalogItem("telescope", PlacementCategory.DECOR, PlacementKind.DECOR, 25, 25),
    # Landmarks
    CatalogItem("mountain", PlacementCategory.LANDMARK, PlacementKind.LANDMARK, 30, 0),
    CatalogItem("windmill", PlacementCategory.LANDMARK, PlacementKind.LANDMARK, 30, 0),
    CatalogItem("cooling_tower", PlacementCategory.LANDMARK, PlacementKind.LANDMARK, 30, 0),
]

CATALOG: Dict[str, CatalogItem] = {item.type: item for item in _ITEMS}

FLOWER_VARIANTS = ("v1", "v2", "v3")

# Radius applied to placed items whose type has left the catalog
DEFAULT_COLLISION_RADIUS = 50.0


def lookup(item_type: str, category: Optional[PlacementCategory] = None) -> Optional[CatalogItem]:
    """Find a catalog entry, optionally requiring it to belong to a category."""
    item = CATALOG.get(item_type)
    if item is None:
        return None
    if category is not None and item.category != category:
        return None
    return item


def items_in(category: PlacementCategory) -> List[CatalogItem]:
    return [item for item in _ITEMS if item.category == category]


def cost_of(item_type: str) -> int:
    """Purchase price, zero for retired types."""
    item = CATALOG.get(item_type)
    return item.cost if item else 0


def collision_radius(item_type: str) -> float:
    item = CATALOG.get(item_type)
    return item.radius if item else DEFAULT_COLLISION_RADIUS
