# File: parking_ledger/domain/models.py
"""
Domain Models for the Parking Ledger
Following Domain-Driven Design (DDD) principles

This module contains:
1. Value Objects: VehiclePlate, the identity every ledger entry is keyed by
2. Domain Exceptions: contract violations raised by the ledger
3. Domain Events: events representing ledger state changes
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict
import re
import uuid


# ============================================================================
# DOMAIN PRIMITIVES / VALUE OBJECTS
# ============================================================================

_PLATE_PATTERN = re.compile(r'^([A-Z])([A-Z])(\d{3})([A-Z])(\d{2,3})$')
_LETTERS_PATTERN = re.compile(r'^[A-Z]{3}$')


@dataclass(frozen=True, order=True)  # Value objects are immutable
class VehiclePlate:
    """
    Value Object: Registration plate of a vehicle

    Two plates with equal fields are the same vehicle. Ordering is
    lexicographic over (letters, digits, region).
    """
    letters: str
    digits: int
    region: int

    def __post_init__(self):
        """Validate plate fields after initialization"""
        if not isinstance(self.letters, str):
            raise ValueError(f"Plate letters must be a string, got: {self.letters!r}")

        object.__setattr__(self, 'letters', self.letters.strip().upper())

        if not _LETTERS_PATTERN.match(self.letters):
            raise ValueError(f"Plate must have exactly 3 letters, got: {self.letters!r}")

        if isinstance(self.digits, bool) or not isinstance(self.digits, int):
            raise ValueError(f"Plate digits must be an integer, got: {self.digits!r}")
        if not 0 <= self.digits <= 999:
            raise ValueError(f"Plate digits must be between 0 and 999, got: {self.digits}")

        if isinstance(self.region, bool) or not isinstance(self.region, int):
            raise ValueError(f"Plate region must be an integer, got: {self.region!r}")
        if not 0 <= self.region <= 999:
            raise ValueError(f"Plate region must be between 0 and 999, got: {self.region}")

    @classmethod
    def parse(cls, text: str) -> 'VehiclePlate':
        """Build a plate from its display form, e.g. ``AA111A99``"""
        match = _PLATE_PATTERN.match(text.strip().upper()) if isinstance(text, str) else None
        if not match:
            raise ValueError(f"Invalid vehicle plate: {text!r}")
        first, second, digits, third, region = match.groups()
        return cls(first + second + third, int(digits), int(region))

    def __str__(self) -> str:
        return (
            f"{self.letters[0]}{self.letters[1]}"
            f"{self.digits:03d}{self.letters[2]}{self.region:02d}"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "letters": self.letters,
            "digits": self.digits,
            "region": self.region,
            "display": str(self),
        }


# ============================================================================
# DOMAIN EXCEPTIONS
# ============================================================================

class LedgerError(Exception):
    """Base exception for ledger contract violations"""

    def __init__(self, plate: VehiclePlate, message: str):
        super().__init__(message)
        self.plate = plate


class AlreadyParkedError(LedgerError):
    """Raised when parking a vehicle that already has an open session"""

    def __init__(self, plate: VehiclePlate):
        super().__init__(plate, f"Vehicle {plate} is already parked")


class NotParkedError(LedgerError):
    """Raised when withdrawing a vehicle without an open session"""

    def __init__(self, plate: VehiclePlate):
        super().__init__(plate, f"Vehicle {plate} is not parked")


# ============================================================================
# DOMAIN EVENTS (for event-driven architecture)
# ============================================================================

class DomainEvent(ABC):
    """
    Base class for all domain events
    Events represent something that happened in the ledger, stamped with
    the ledger clock's instant
    """

    def __init__(self, occurred_at: float):
        self.event_id = str(uuid.uuid4())
        self.occurred_at = occurred_at
        self.version = "1.0"

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization"""
        pass

    def __str__(self) -> str:
        return f"{self.__class__.__name__} at {self.occurred_at}"


class VehicleParkedEvent(DomainEvent):
    """Event raised when a vehicle opens a session"""

    def __init__(self, plate: VehiclePlate, occurred_at: float):
        super().__init__(occurred_at)
        self.plate = plate

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_type": "vehicle.parked",
            "event_id": self.event_id,
            "occurred_at": self.occurred_at,
            "version": self.version,
            "data": {
                "plate": str(self.plate),
            }
        }


class VehicleWithdrawnEvent(DomainEvent):
    """Event raised when a vehicle closes its session"""

    def __init__(
        self,
        plate: VehiclePlate,
        elapsed_seconds: int,
        settled_seconds: int,
        occurred_at: float
    ):
        super().__init__(occurred_at)
        self.plate = plate
        self.elapsed_seconds = elapsed_seconds
        self.settled_seconds = settled_seconds

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_type": "vehicle.withdrawn",
            "event_id": self.event_id,
            "occurred_at": self.occurred_at,
            "version": self.version,
            "data": {
                "plate": str(self.plate),
                "elapsed_seconds": self.elapsed_seconds,
                "settled_seconds": self.settled_seconds,
            }
        }


class PeriodSettledEvent(DomainEvent):
    """Event raised when a billing period is closed"""

    def __init__(
        self,
        charges: Dict[VehiclePlate, int],
        occurred_at: float,
        rebased: int = 0
    ):
        super().__init__(occurred_at)
        self.charges = dict(charges)
        self.rebased = rebased

    @property
    def total(self) -> int:
        return sum(self.charges.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_type": "period.settled",
            "event_id": self.event_id,
            "occurred_at": self.occurred_at,
            "version": self.version,
            "data": {
                "charges": {str(plate): amount for plate, amount in sorted(self.charges.items())},
                "total": self.total,
                "rebased_sessions": self.rebased,
            }
        }
