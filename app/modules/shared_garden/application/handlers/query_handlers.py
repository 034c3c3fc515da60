# 📄 File: app/modules/shared_garden/application/handlers/query_handlers.py
# 🧭 Purpose (Layman Explanation):
# Answers "what does our garden look like right now?" without changing anything a
# partner could notice.
#
# 🧪 Purpose (Technical Summary):
# CQRS query handler assembling read models (GardenViewDTO, GardenStatusDTO, wallet)
# from the engine. Status and growth stages are derived at the same `now` so a single
# response is internally consistent.
#
# 🔗 Dependencies:
# - app.modules.shared_garden.application.engine
# - app.modules.shared_garden.application.dto.garden_dto
#
# 🔄 Connected Modules / Calls From:
# - app.modules.shared_garden.presentation.api.v1.garden (GET endpoints, stream)

__all__ = ["GardenQueryHandler"]

import logging
from datetime import datetime
from typing import Optional

from app.modules.shared_garden.application.dto.garden_dto import (
    GardenStatusDTO,
    GardenViewDTO,
    WateringEligibilityDTO,
    growth_stages,
)
from app.modules.shared_garden.application.engine import SharedGardenEngine
from app.modules.shared_garden.domain.models.garden import GardenState, Wallet

logger = logging.getLogger(__name__)


class GardenQueryHandler:
    """Read side of the shared garden."""

    def __init__(self, engine: SharedGardenEngine):
        self._engine = engine

    async def get_garden_view(self, user_id: str, partner_id: str) -> GardenViewDTO:
        """
        Load the couple's garden and derive the caller's view of it.

        Reading creates the garden on first access, so this never returns None.
        """
        state = await self._engine.get_state(user_id, partner_id)
        wallet = await self._engine.get_wallet(user_id)
        return self.build_view(state, wallet, user_id)

    def build_view(
        self, state: GardenState, wallet: Wallet, user_id: str, now: Optional[datetime] = None,
    ) -> GardenViewDTO:
        now = now or self._engine.now()
        return GardenViewDTO(
            garden=state,
            status=GardenStatusDTO.from_status(self._engine.status(state, now)),
            watering=WateringEligibilityDTO.from_eligibility(self._engine.can_water(state, user_id, now)),
            growth=growth_stages(state, now),
            wallet=wallet,
            rules=self._engine.rules,
            generated_at=now,
        )

    async def get_status(self, user_id: str, partner_id: str) -> GardenStatusDTO:
        state = await self._engine.get_state(user_id, partner_id)
        return GardenStatusDTO.from_status(self._engine.status(state))

    async def get_wallet(self, user_id: str) -> Wallet:
        return await self._engine.get_wallet(user_id)
