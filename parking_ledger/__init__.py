"""Per-second billing ledger for a single parking facility."""

from .domain import (
    AlreadyParkedError,
    Clock,
    LedgerError,
    ManualClock,
    MonotonicClock,
    NotParkedError,
    ParkingLedger,
    VehiclePlate,
)

__version__ = "1.0.0"

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
