"""
Shared Garden Commands

Write operations following the CQRS command pattern. See garden_commands.py.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.modules.shared_garden.application.commands.garden_commands import (
        PlantItemCommand,
        WaterGardenCommand,
    )

__all__ = [
    "PlantItemCommand",
    "WaterGardenCommand",
]
