# backend/checkup_capacity/services/capacity/__init__.py
"""
Capacity & availability engine.

Template expansion → override store + booking counter → resolver →
response cache (canonical JSON + weak ETag).
"""

from .config import CapacityConfig, get_capacity_config
from .repository import CapacityRepository
from .templates import expand_templates, expand_day, capacity_by_dow, day_of_week
from .overrides import OverrideStore
from .bookings import BookingCounter
from .resolver import AvailabilityService, CapacitySnapshot, DayResourceState
from .response_cache import conditional_json_response
from .template_cache import TemplateCapacityStore, invalidate_template_cache

__all__ = [
    "CapacityConfig",
    "get_capacity_config",
    "CapacityRepository",
    "expand_templates",
    "expand_day",
    "capacity_by_dow",
    "day_of_week",
    "OverrideStore",
    "BookingCounter",
    "AvailabilityService",
    "CapacitySnapshot",
    "DayResourceState",
    "conditional_json_response",
    "TemplateCapacityStore",
    "invalidate_template_cache",
]
