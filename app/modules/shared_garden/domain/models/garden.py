# 📄 File: app/modules/shared_garden/domain/models/garden.py
# 🧭 Purpose (Layman Explanation):
# Describes the one shared garden a couple owns together (what is planted where, who
# watered today, how long their streak is) and each partner's personal wallet.
# 🧪 Purpose (Technical Summary):
# Pydantic domain entities for the garden document, its placed items and the per-user
# wallet. The document is persisted whole as JSON, so every field must round-trip
# through model_dump(mode="json") / model_validate.
# 🔗 Dependencies:
# pydantic, datetime, uuid, typing
# 🔄 Connected Modules / Calls From:
# Domain services (all mutations), garden store implementations (persistence),
# engine DTOs and API schemas (serialization)

"""
Shared Garden Domain Models

Models:
- PlantedFlower / PlantedDecor / PlantedLandmark: items placed on the canvas
- GardenState: the single document jointly owned by both partners
- Wallet: per-user gold and water drops

Set-valued fields (watered_by_today, pending_harmony_bonus_for, first_planted) are
only ever grown with set-union semantics or cleared as a whole, so concurrent
writers can never drop each other's membership.
"""

import uuid
from datetime import datetime
from typing import Dict, List, Optional, Set, Tuple, Union

from pydantic import BaseModel, Field

from .catalog import PlacementCategory


def _new_id() -> str:
    return str(uuid.uuid4())


class PlantedFlower(BaseModel):
    """A flower, large plant or tree on the canvas."""

    id: str = Field(default_factory=_new_id)
    type: str
    variant: str = "v1"
    x: float
    y: float
    flipped: bool = False
    planted_at: datetime
    planted_by: str


class PlantedDecor(BaseModel):
    id: str = Field(default_factory=_new_id)
    type: str
    x: float
    y: float
    flipped: bool = False
    planted_at: datetime
    planted_by: str


class PlantedLandmark(BaseModel):
    """Background scenery. Exempt from collisions, ordered by z_index."""

    id: str = Field(default_factory=_new_id)
    type: str
    x: float
    y: float
    flipped: bool = False
    z_index: int = 0
    planted_at: datetime
    planted_by: str


PlacedItem = Union[PlantedFlower, PlantedDecor, PlantedLandmark]


class GardenState(BaseModel):
    """
    The shared garden document, one per couple key.

    Created lazily on first access; the creation moment seeds
    last_successful_interaction so a brand-new garden starts fresh.
    """

    couple_key: str
    user1_id: str
    user2_id: str

    flowers: List[PlantedFlower] = Field(default_factory=list)
    decor: List[PlantedDecor] = Field(default_factory=list)
    landmarks: List[PlantedLandmark] = Field(default_factory=list)

    # Daily watering bookkeeping
    day_key: str
    watered_by_today: Set[str] = Field(default_factory=set)
    last_watered_by_user: Dict[str, datetime] = Field(default_factory=dict)
    last_successful_interaction: datetime

    # Relationship progress
    active_streak_days: int = Field(default=0, ge=0)
    couple_connection_level: int = Field(default=1, ge=1)
    last_harmony_day_key: Optional[str] = None
    pending_harmony_bonus_for: Set[str] = Field(default_factory=set)

    # Neglect episode marker: equals last_successful_interaction once punished
    punished_episode_start: Optional[datetime] = None

    # Planting bookkeeping
    variant_cycle_index: Optional[int] = None
    first_planted: Set[str] = Field(default_factory=set)

    created_at: datetime
    updated_at: datetime

    @classmethod
    def create(cls, couple_key: str, user1_id: str, user2_id: str, now: datetime, day_key: str) -> "GardenState":
        return cls(
            couple_key=couple_key,
            user1_id=user1_id,
            user2_id=user2_id,
            day_key=day_key,
            last_successful_interaction=now,
            created_at=now,
            updated_at=now,
        )

    @property
    def members(self) -> Tuple[str, str]:
        return (self.user1_id, self.user2_id)

    def roll_over_day(self, day_key: str) -> bool:
        """Start a new day bucket. Returns True when the bucket changed."""
        if day_key == self.day_key:
            return False
        self.day_key = day_key
        self.watered_by_today = set()
        return True

    def items(self, category: PlacementCategory) -> List[PlacedItem]:
        if category == PlacementCategory.FLOWER:
            return self.flowers
        if category == PlacementCategory.DECOR:
            return self.decor
        return self.landmarks

    def clear(self, category: PlacementCategory) -> None:
        if category == PlacementCategory.FLOWER:
            self.flowers = []
            self.variant_cycle_index = None
        elif category == PlacementCategory.DECOR:
            self.decor = []
        else:
            self.landmarks = []

    def find_landmark(self, landmark_id: str) -> Optional[PlantedLandmark]:
        for landmark in self.landmarks:
            if landmark.id == landmark_id:
                return landmark
        return None


class Wallet(BaseModel):
    """Per-user currency. Gold buys items, water drops pay for watering."""

    user_id: str
    gold: int = Field(default=0, ge=0)
    water: int = Field(default=0, ge=0)
    max_water: int = Field(default=3, ge=0, le=3)
    last_water_earned_day_key: Optional[str] = None

    def can_afford(self, amount: int) -> bool:
        return self.gold >= amount

    def credit(self, amount: int) -> None:
        self.gold += amount

    def debit(self, amount: int) -> None:
        if amount > self.gold:
            raise ValueError(f"Wallet {self.user_id} cannot cover {amount} gold")
        self.gold -= amount
