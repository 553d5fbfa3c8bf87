"""Typed settings configuration - single source of truth."""

from decimal import Decimal
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Booking backend (availability, pricing, reservations)
    booking_api_url: str = "http://localhost:5000/api/v1"
    booking_api_timeout_s: float = 10.0
    use_fixture_backend: bool = True

    # Stay rules
    default_min_stay_nights: int = 3

    # Money
    currency: str = "USD"
    deposit_rate: Decimal = Decimal("0.5")

    # Calendar simulator (display only)
    simulator_rng_seed: int | None = None
    simulator_unavailable_ratio: float = 0.15

    # Split payments (cents)
    split_balance_tolerance_cents: int = 100

    # Loyalty preview
    loyalty_points_per_unit: int = 10


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
