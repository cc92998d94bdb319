# File: parking_ledger/application/ledger_service.py
"""
Parking Ledger Application Service

This module implements the application service layer for the ledger.
It orchestrates the ParkingLedger aggregate and the settlement history and
exposes the use cases of the system:

1. Vehicle entry (park) and exit (withdraw)
2. Running bill queries
3. Period settlement with history
4. Status snapshots

Key Principles:
- Dependency Injection for testability (clock, repository)
- Command/Query separation
- Ledger errors propagate unchanged to the caller
"""

from collections import deque
from typing import List, Optional, Union
import logging

from ..domain.aggregates import ParkingLedger
from ..domain.clock import Clock, ManualClock, MonotonicClock
from ..domain.models import DomainEvent, PeriodSettledEvent, VehiclePlate
from ..infrastructure.config import LedgerSettings
from ..infrastructure.repositories import InMemorySettlementRepository, SettlementRecord
from .dtos import (
    BillDTO, ChargeDTO, LedgerStatusDTO, ParkingReceiptDTO,
    SettlementDTO, WithdrawalReceiptDTO
)

PlateLike = Union[VehiclePlate, str]


def to_plate(plate: PlateLike) -> VehiclePlate:
    """Coerce a plate or its display string into a VehiclePlate"""
    if isinstance(plate, VehiclePlate):
        return plate
    return VehiclePlate.parse(plate)


# ============================================================================
# MAIN LEDGER SERVICE
# ============================================================================

class LedgerService:
    """
    Main application service for the parking ledger

    Wraps one ParkingLedger, collects the domain events it raises and
    records every settlement in the repository.
    """

    def __init__(
        self,
        ledger: ParkingLedger,
        settlements: Optional[InMemorySettlementRepository] = None,
        max_event_history: int = 1000
    ):
        """
        Initialize the ledger service

        Args:
            ledger: The aggregate holding sessions and balances
            settlements: Settlement history; a fresh in-memory one if omitted
            max_event_history: Newest domain events kept until clear_events()
        """
        self.logger = logging.getLogger(self.__class__.__name__)
        self.ledger = ledger
        self.settlements = settlements if settlements is not None else InMemorySettlementRepository()
        self._events = deque(maxlen=max_event_history)

        self.logger.info(f"LedgerService initialized for ledger {ledger.id}")

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def park(self, plate: PlateLike) -> ParkingReceiptDTO:
        """
        Use Case: Vehicle Entry

        Raises: AlreadyParkedError, ValueError for a malformed plate
        """
        vehicle = to_plate(plate)
        self.logger.info(f"Processing park request for {vehicle}")

        self.ledger.park(vehicle)
        self._collect_events()

        return ParkingReceiptDTO(
            plate=str(vehicle),
            started_at=self.ledger.session_start(vehicle),
            outstanding=self.ledger.settled_seconds(vehicle) * self.ledger.rate_per_second
        )

    def withdraw(self, plate: PlateLike) -> WithdrawalReceiptDTO:
        """
        Use Case: Vehicle Exit

        Raises: NotParkedError, ValueError for a malformed plate
        """
        vehicle = to_plate(plate)
        self.logger.info(f"Processing withdraw request for {vehicle}")

        elapsed = self.ledger.withdraw(vehicle)
        self._collect_events()

        return WithdrawalReceiptDTO(
            plate=str(vehicle),
            elapsed_seconds=elapsed,
            settled_seconds=self.ledger.settled_seconds(vehicle),
            amount_due=self.ledger.current_bill(vehicle)
        )

    def settle_all(self) -> SettlementDTO:
        """
        Use Case: Close Billing Period

        Charges are listed in plate order and stored in the history.
        """
        charges = self.ledger.settle_all()
        settled_at = next(
            event.occurred_at for event in reversed(self._collect_events())
            if isinstance(event, PeriodSettledEvent)
        )

        record = self.settlements.add(SettlementRecord(charges=charges, settled_at=settled_at))
        self.logger.info(f"Recorded settlement {record.id}: total {record.total}")

        return SettlementDTO(
            settlement_id=record.id,
            settled_at=settled_at,
            charges=[
                ChargeDTO(plate=str(vehicle), amount=amount)
                for vehicle, amount in sorted(charges.items())
            ],
            recorded_at=record.recorded_at
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def current_bill(self, plate: PlateLike) -> BillDTO:
        vehicle = to_plate(plate)
        return BillDTO(
            plate=vehicle,
            amount=self.ledger.current_bill(vehicle),
            is_parked=self.ledger.is_parked(vehicle)
        )

    def get_status(self) -> LedgerStatusDTO:
        return LedgerStatusDTO(
            ledger_id=self.ledger.id,
            rate_per_second=self.ledger.rate_per_second,
            active_plates=[str(p) for p in sorted(self.ledger.active_sessions)],
            settled_seconds={str(p): s for p, s in sorted(self.ledger.settled_balances.items())},
            version=self.ledger.version
        )

    def settlement_history(self) -> List[SettlementRecord]:
        return self.settlements.get_all(limit=self.settlements.count())

    @property
    def events(self) -> List[DomainEvent]:
        """Domain events raised so far, oldest first"""
        return list(self._events)

    def clear_events(self) -> List[DomainEvent]:
        """Drain the collected domain events, oldest first"""
        events = list(self._events)
        self._events.clear()
        return events

    def _collect_events(self) -> List[DomainEvent]:
        events = self.ledger.clear_events()
        for event in events:
            self.logger.debug(f"Domain event: {event}")
        self._events.extend(events)
        return events


# ============================================================================
# SERVICE FACTORY
# ============================================================================

class LedgerServiceFactory:
    """Factory for creating ledger service instances"""

    @staticmethod
    def create_from_settings(settings: LedgerSettings, clock: Optional[Clock] = None) -> LedgerService:
        """Create a service from configuration, on the monotonic clock by default"""
        ledger = ParkingLedger(settings.rate_per_second, clock or MonotonicClock())
        return LedgerService(ledger)

    @staticmethod
    def create_test_service(rate_per_second: int = 10, clock: Optional[ManualClock] = None) -> LedgerService:
        """Create a service driven by a manual clock"""
        return LedgerService(ParkingLedger(rate_per_second, clock or ManualClock()))
