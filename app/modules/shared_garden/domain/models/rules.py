# 📄 File: app/modules/shared_garden/domain/models/rules.py
# 🧭 Purpose (Layman Explanation):
# Holds the "rules of the game" for the shared garden: how long before plants wilt,
# how often you may water, what rewards are worth and how big the garden is.
# 🧪 Purpose (Technical Summary):
# Immutable value object carrying every tunable garden threshold, plus the day-bucket
# and elapsed-hours helpers the domain services share.
# 🔗 Dependencies:
# pydantic, zoneinfo, datetime
# 🔄 Connected Modules / Calls From:
# app.shared.config.settings (built from GARDEN_* settings), every domain service,
# garden store implementations (defaults for lazily created documents)

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from pydantic import BaseModel, ConfigDict, Field


class GardenRules(BaseModel):
    """Tunable thresholds for the shared garden. Defaults mirror production."""

    model_config = ConfigDict(frozen=True)

    watering_cooldown_hours: float = Field(default=6.0, gt=0)
    wilting_after_hours: float = Field(default=12.0, gt=0)
    wilted_after_hours: float = Field(default=24.0, gt=0)
    streak_reward_days: int = Field(default=3, ge=1)
    streak_reward_gold: int = Field(default=5, ge=0)
    harmony_bonus_gold: int = Field(default=1, ge=0)
    revive_cost_gold: int = Field(default=10, ge=0)
    refund_ratio: float = Field(default=0.6, ge=0, le=1)
    watering_water_cost: int = Field(default=1, ge=0)
    starting_gold: int = Field(default=0, ge=0)
    max_water: int = Field(default=3, ge=0, le=3)
    canvas_width: float = Field(default=430.0, gt=0)
    canvas_height: float = Field(default=400.0, gt=0)
    day_timezone: str = "UTC"

    def day_key(self, moment: datetime) -> str:
        """Calendar day bucket (YYYY-MM-DD) of a moment in the configured timezone."""
        return moment.astimezone(ZoneInfo(self.day_timezone)).date().isoformat()

    def previous_day_key(self, moment: datetime) -> str:
        local_day = moment.astimezone(ZoneInfo(self.day_timezone)).date()
        return (local_day - timedelta(days=1)).isoformat()

    def within_canvas(self, x: float, y: float) -> bool:
        return 0 <= x <= self.canvas_width and 0 <= y <= self.canvas_height


def hours_between(earlier: datetime, later: datetime) -> float:
    """Elapsed hours, clamped at zero so clock skew never yields negative ages."""
    return max((later - earlier).total_seconds() / 3600.0, 0.0)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
