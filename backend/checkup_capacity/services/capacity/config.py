# backend/checkup_capacity/services/capacity/config.py
"""
Capacity engine configuration and time helpers.
"""

from dataclasses import dataclass
from functools import lru_cache

from ...config import settings


ACTIVE_BOOKING_STATUSES = ("PENDING", "RESERVED", "CONFIRMED")


@dataclass(frozen=True)
class CapacityConfig:
    """
    Configuration for the capacity engine.

    Attributes:
        slot_step_minutes: Width of a template slot (15/30/60)
        sentinel_capacity: Capacity used when nothing is configured
        cache_s_maxage: Shared-cache lifetime for read responses
        cache_stale_while_revalidate: Background revalidation window
        template_cache_ttl_seconds: Redis TTL for expanded templates
        max_range_days: Longest accepted detailed read window
    """
    slot_step_minutes: int = 30
    sentinel_capacity: int = 999
    cache_s_maxage: int = 60
    cache_stale_while_revalidate: int = 600
    template_cache_ttl_seconds: int = 300
    max_range_days: int = 366

    def __post_init__(self):
        if self.slot_step_minutes not in (15, 30, 60):
            raise ValueError(f"slot_step_minutes must be 15, 30, or 60, got {self.slot_step_minutes}")
        if self.sentinel_capacity <= 0:
            raise ValueError(f"sentinel_capacity must be positive, got {self.sentinel_capacity}")

    @property
    def public_cache_control(self) -> str:
        return (
            f"public, s-maxage={self.cache_s_maxage}, "
            f"stale-while-revalidate={self.cache_stale_while_revalidate}"
        )


@lru_cache
def get_capacity_config() -> CapacityConfig:
    """Engine configuration built from application settings (singleton)."""
    return CapacityConfig(
        slot_step_minutes=settings.slot_step_minutes,
        sentinel_capacity=settings.sentinel_capacity,
        cache_s_maxage=settings.cache_s_maxage,
        cache_stale_while_revalidate=settings.cache_stale_while_revalidate,
        template_cache_ttl_seconds=settings.template_cache_ttl_seconds,
        max_range_days=settings.max_range_days,
    )


def time_str_to_minutes(value: str) -> int:
    """Convert "HH:MM" to minutes since midnight."""
    hour, minute = value.strip().split(":")
    return int(hour) * 60 + int(minute)


def minutes_to_time_str(minutes: int) -> str:
    """Convert minutes since midnight to "HH:MM"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"
