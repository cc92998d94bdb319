"""Domain layer: plate value object, ledger aggregate, clocks and events."""

from .aggregates import ParkingLedger
from .clock import Clock, ManualClock, MonotonicClock
from .models import (
    AlreadyParkedError,
    LedgerError,
    NotParkedError,
    VehiclePlate,
)

__all__ = [
    "AlreadyParkedError",
    "Clock",
    "LedgerError",
    "ManualClock",
    "MonotonicClock",
    "NotParkedError",
    "ParkingLedger",
    "VehiclePlate",
]
