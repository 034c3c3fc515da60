# 📄 File: app/shared/config/settings.py
#
# 🧭 Purpose (Layman Explanation):
# The main configuration center that reads all settings from environment variables
# and hands them to the rest of the shared garden service, including every garden
# rule (how long until plants wilt, what things cost, how big the garden is).
#
# 🧪 Purpose (Technical Summary):
# Pydantic-based settings management with environment variable loading,
# validation, and type safety for application, database, Redis and garden rule
# configuration parameters.
#
# 🔗 Dependencies:
# - pydantic-settings for configuration management
# - app.modules.shared_garden.domain.models.rules (GardenRules value object)
#
# 🔄 Connected Modules / Calls From:
# - app.main (application startup)
# - Database connection modules
# - Change feed factory (Redis vs in-process)
# - Shared garden engine (garden rules)

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.modules.shared_garden.domain.models.rules import GardenRules


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type safety. Settings are loaded
    from environment variables with fallback to .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # =========================================================================
    # APPLICATION SETTINGS
    # =========================================================================

    APP_NAME: str = Field(default="Shared Garden API", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    APP_DESCRIPTION: str = Field(
        default="Shared garden state engine for paired couples",
        description="Application description"
    )
    ENVIRONMENT: str = Field(default="development", description="Runtime environment")
    DEBUG: bool = Field(default=False, description="Debug mode flag")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: str = Field(default="json", description="Log format (json/text)")
    LOG_FILE: Optional[str] = Field(None, description="Optional log file path")

    # =========================================================================
    # SERVER CONFIGURATION
    # =========================================================================

    HOST: str = Field(default="0.0.0.0", description="Server host")
    PORT: int = Field(default=8000, description="Server port")
    RELOAD: bool = Field(default=False, description="Auto-reload on changes")
    WORKERS: int = Field(default=1, description="Number of worker processes")
    CORS_ORIGINS: str = Field(default="*", description="Comma-separated allowed CORS origins")

    # =========================================================================
    # DATABASE CONFIGURATION
    # =========================================================================

    DATABASE_URL: Optional[str] = Field(None, description="Database connection URL")
    DB_HOST: str = Field(default="localhost", description="Database host")
    DB_PORT: int = Field(default=5432, description="Database port")
    DB_NAME: str = Field(default="shared_garden", description="Database name")
    DB_USER: str = Field(default="postgres", description="Database user")
    DB_PASSWORD: str = Field(default="", description="Database password")

    # Connection Pool Settings
    DB_POOL_SIZE: int = Field(default=10, description="Database pool size")
    DB_MAX_OVERFLOW: int = Field(default=20, description="Database pool overflow")
    DB_POOL_TIMEOUT: int = Field(default=30, description="Database pool timeout")
    DB_POOL_RECYCLE: int = Field(default=3600, description="Database pool recycle time")
    DB_CREATE_TABLES: bool = Field(
        default=True,
        description="Create missing tables on startup (migrations own the schema in production)"
    )

    # =========================================================================
    # REDIS CONFIGURATION
    # =========================================================================

    REDIS_HOST: str = Field(default="localhost", description="Redis host")
    REDIS_PORT: int = Field(default=6379, description="Redis port")
    REDIS_DB: int = Field(default=0, description="Redis database number")
    REDIS_PASSWORD: Optional[str] = Field(None, description="Redis password")
    REDIS_MAX_CONNECTIONS: int = Field(default=20, description="Redis connection pool size")

    # =========================================================================
    # GARDEN RULES
    # =========================================================================

    GARDEN_WATERING_COOLDOWN_HOURS: float = Field(
        default=6.0, description="Minimum hours between two waterings by the same user"
    )
    GARDEN_WILTING_AFTER_HOURS: float = Field(
        default=12.0, description="Hours without interaction before the garden starts wilting"
    )
    GARDEN_WILTED_AFTER_HOURS: float = Field(
        default=24.0, description="Hours without interaction before the garden is wilted"
    )
    GARDEN_STREAK_REWARD_DAYS: int = Field(
        default=3, description="Streak length (and multiples) that earns a reward"
    )
    GARDEN_STREAK_REWARD_GOLD: int = Field(default=5, description="Gold credited per partner on streak reward")
    GARDEN_HARMONY_BONUS_GOLD: int = Field(default=1, description="Gold credited per partner on harmony")
    GARDEN_REVIVE_COST_GOLD: int = Field(default=10, description="Gold needed to revive a wilted garden")
    GARDEN_REFUND_RATIO: float = Field(default=0.6, description="Share of cost refunded on bulk removal")
    GARDEN_WATERING_WATER_COST: int = Field(
        default=1, description="Water drops spent per watering (0 disables the water economy)"
    )
    GARDEN_STARTING_GOLD: int = Field(default=0, description="Gold in a freshly created wallet")
    GARDEN_MAX_WATER: int = Field(default=3, description="Water drop capacity of a wallet")
    GARDEN_CANVAS_WIDTH: float = Field(default=430.0, description="Garden canvas width")
    GARDEN_CANVAS_HEIGHT: float = Field(default=400.0, description="Garden canvas height")
    GARDEN_DAY_TIMEZONE: str = Field(default="UTC", description="Timezone used for day buckets")
    GARDEN_TRANSACTION_MAX_RETRIES: int = Field(
        default=5, description="Attempts before a contended garden update gives up"
    )
    GARDEN_CHANGE_FEED: str = Field(default="local", description="Change feed backend (local/redis)")
    GARDEN_DEV_TOOLS_ENABLED: bool = Field(default=False, description="Expose developer mutators")

    # =========================================================================
    # VALIDATORS
    # =========================================================================

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed_environments = ["development", "staging", "production", "test"]
        if v.lower() not in allowed_environments:
            raise ValueError(f"Environment must be one of {allowed_environments}")
        return v.lower()

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level value."""
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed_levels:
            raise ValueError(f"Log level must be one of {allowed_levels}")
        return v.upper()

    @field_validator("GARDEN_CHANGE_FEED")
    @classmethod
    def validate_change_feed(cls, v: str) -> str:
        """Validate change feed backend."""
        allowed_backends = ["local", "redis"]
        if v.lower() not in allowed_backends:
            raise ValueError(f"Change feed must be one of {allowed_backends}")
        return v.lower()

    @field_validator("GARDEN_REFUND_RATIO")
    @classmethod
    def validate_refund_ratio(cls, v: float) -> float:
        """Refund ratio must be a fraction."""
        if not 0 <= v <= 1:
            raise ValueError("Refund ratio must be between 0 and 1")
        return v

    @field_validator("GARDEN_MAX_WATER")
    @classmethod
    def validate_max_water(cls, v: int) -> int:
        """Wallets never hold more than three drops."""
        if not 0 <= v <= 3:
            raise ValueError("Max water must be between 0 and 3")
        return v

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================

    @property
    def database_url(self) -> str:
        """Get the database URL, preferring explicit DATABASE_URL."""
        if self.DATABASE_URL:
            return self.DATABASE_URL

        return (
            f"postgresql+asyncpg://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    @property
    def redis_url(self) -> str:
        """Get the Redis URL with optional password."""
        if self.REDIS_PASSWORD:
            return (
                f"redis://:{self.REDIS_PASSWORD}@{self.REDIS_HOST}:"
                f"{self.REDIS_PORT}/{self.REDIS_DB}"
            )
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT == "production"

    @property
    def is_testing(self) -> bool:
        """Check if running in test environment."""
        return self.ENVIRONMENT == "test"

    @property
    def debug(self) -> bool:
        """Alias for DEBUG to allow access as settings.debug"""
        return self.DEBUG

    @property
    def database_pool_size(self) -> int:
        return self.DB_POOL_SIZE

    @property
    def database_max_overflow(self) -> int:
        return self.DB_MAX_OVERFLOW

    @property
    def database_pool_timeout(self) -> int:
        return self.DB_POOL_TIMEOUT

    @property
    def database_pool_recycle(self) -> int:
        return self.DB_POOL_RECYCLE

    # =========================================================================
    # GARDEN RULE CONFIGURATION
    # =========================================================================

    def get_garden_rules(self) -> GardenRules:
        """Bundle the GARDEN_* thresholds into the engine's rule object."""
        return GardenRules(
            watering_cooldown_hours=self.GARDEN_WATERING_COOLDOWN_HOURS,
            wilting_after_hours=self.GARDEN_WILTING_AFTER_HOURS,
            wilted_after_hours=self.GARDEN_WILTED_AFTER_HOURS,
            streak_reward_days=self.GARDEN_STREAK_REWARD_DAYS,
            streak_reward_gold=self.GARDEN_STREAK_REWARD_GOLD,
            harmony_bonus_gold=self.GARDEN_HARMONY_BONUS_GOLD,
            revive_cost_gold=self.GARDEN_REVIVE_COST_GOLD,
            refund_ratio=self.GARDEN_REFUND_RATIO,
            watering_water_cost=self.GARDEN_WATERING_WATER_COST,
            starting_gold=self.GARDEN_STARTING_GOLD,
            max_water=self.GARDEN_MAX_WATER,
            canvas_width=self.GARDEN_CANVAS_WIDTH,
            canvas_height=self.GARDEN_CANVAS_HEIGHT,
            day_timezone=self.GARDEN_DAY_TIMEZONE,
        )


# ============================================================================
# SETTINGS FACTORY
# ============================================================================

@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Uses lru_cache to ensure settings are loaded only once
    and reused throughout the application lifecycle.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
