# 📄 File: app/modules/shared_garden/presentation/api/schemas/garden_schemas.py
# 🧭 Purpose (Layman Explanation):
# Describes exactly what the phone app must send when it plants or moves something, and
# what shape the answers come back in.
#
# 🧪 Purpose (Technical Summary):
# Pydantic request/response schemas for the shared garden HTTP and WebSocket surface.
# Outcome models from the domain are returned as-is; these cover request bodies, the
# catalog listing, stream messages and the error envelope.
#
# 🔗 Dependencies:
# - pydantic
# - shared_garden catalog, garden models, DTOs
#
# 🔄 Connected Modules / Calls From:
# - app.modules.shared_garden.presentation.api.v1.garden

"""
Shared Garden API Schemas

Request schemas:
- PlantItemRequest: catalog type plus canvas position
- LandmarkPositionRequest: new canvas position for a landmark
- SimulateTimeRequest / GrantGoldRequest: developer tools

Response schemas:
- CatalogItemResponse / CatalogResponse
- GardenStreamMessage: one pushed frame on the garden WebSocket
- ErrorResponse: envelope produced by the exception handler
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from app.modules.shared_garden.application.dto.garden_dto import GardenStatusDTO
from app.modules.shared_garden.domain.models.catalog import CatalogItem, PlacementCategory, PlacementKind
from app.modules.shared_garden.domain.models.garden import GardenState


class PlantItemRequest(BaseModel):
    """Place a catalog item at a canvas position."""

    type: str = Field(..., min_length=1, description="Catalog type", examples=["tulip"])
    x: float = Field(..., description="Canvas x coordinate", examples=[120.0])
    y: float = Field(..., description="Canvas y coordinate", examples=[210.5])
    flipped: bool = Field(default=False, description="Draw mirrored")


class LandmarkPositionRequest(BaseModel):
    x: float
    y: float


class SimulateTimeRequest(BaseModel):
    hours: float = Field(..., gt=0, description="How far to age the garden")


class GrantGoldRequest(BaseModel):
    amount: int = Field(..., gt=0)
    user_id: Optional[str] = Field(default=None, description="Recipient, defaults to the caller")


class CatalogItemResponse(BaseModel):
    type: str
    category: PlacementCategory
    kind: PlacementKind
    cost: int
    radius: float

    @classmethod
    def from_item(cls, item: CatalogItem) -> "CatalogItemResponse":
        return cls(type=item.type, category=item.category, kind=item.kind, cost=item.cost, radius=item.radius)


class CatalogResponse(BaseModel):
    items: List[CatalogItemResponse]
    refund_ratio: float


class GardenStreamMessage(BaseModel):
    """One frame pushed to a garden WebSocket subscriber."""

    garden: GardenState
    status: GardenStatusDTO
    sent_at: datetime


class ErrorBody(BaseModel):
    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)
    status_code: int


class ErrorResponse(BaseModel):
    error: ErrorBody
