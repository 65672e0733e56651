from .generated import (
    Base,
    Booking,
    CalendarClose,
    CapacityDefault,
    CapacityOverride,
    DayClose,
    Holiday,
    Hospital,
    SlotException,
    SlotTemplate,
)

__all__ = [
    "Base",
    "Booking",
    "CalendarClose",
    "CapacityDefault",
    "CapacityOverride",
    "DayClose",
    "Holiday",
    "Hospital",
    "SlotException",
    "SlotTemplate",
]
