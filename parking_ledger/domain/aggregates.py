# File: parking_ledger/domain/aggregates.py
"""
Aggregate Roots for the Parking Ledger
Following Domain-Driven Design (DDD) Aggregate Pattern

Aggregates:
1. ParkingLedger - Root aggregate for sessions, balances and settlement

Key Concepts:
- The aggregate root enforces the ledger invariants
- Domain events are raised for every successful state change
- All modifications go through aggregate root methods
- Failed operations leave state and events untouched
"""

from collections import deque
from datetime import timedelta
from typing import Any, Deque, Dict, List, Optional
import logging
import uuid

from .clock import Clock
from .models import (
    VehiclePlate, DomainEvent,
    AlreadyParkedError, NotParkedError,
    VehicleParkedEvent, VehicleWithdrawnEvent, PeriodSettledEvent
)


# ============================================================================
# BASE AGGREGATE ROOT
# ============================================================================

class AggregateRoot:
    """
    Base class for all aggregate roots
    Provides identity, domain event collection and versioning

    Pending events are held until clear_events() drains them; only the
    newest max_pending_events are kept.
    """

    max_pending_events: int = 1000

    def __init__(self, id: Optional[str] = None):
        self._id = id or str(uuid.uuid4())
        self._version: int = 1
        self._changes: Deque[DomainEvent] = deque(maxlen=self.max_pending_events)
        self._logger = logging.getLogger(self.__class__.__name__)

    @property
    def id(self) -> str:
        """Get aggregate ID"""
        return self._id

    @property
    def version(self) -> int:
        """Get current aggregate version"""
        return self._version

    def _increment_version(self) -> None:
        """Increment version after state change"""
        self._version += 1

    def _add_domain_event(self, event: DomainEvent) -> None:
        """Add a domain event to the list of changes"""
        self._changes.append(event)
        self._logger.debug(f"Added domain event: {event.__class__.__name__}")

    def clear_events(self) -> List[DomainEvent]:
        """Clear and return all domain events"""
        events = list(self._changes)
        self._changes.clear()
        return events

    @property
    def has_changes(self) -> bool:
        """Check if aggregate has pending domain events"""
        return len(self._changes) > 0

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id})"


# ============================================================================
# PARKING LEDGER AGGREGATE
# ============================================================================

def elapsed_seconds(start, end) -> int:
    """
    Whole seconds between two clock instants, truncated toward zero.
    Accepts numeric instants or datetimes (timedelta differences).
    """
    delta = end - start
    if isinstance(delta, timedelta):
        delta = delta.total_seconds()
    return int(delta)


class ParkingLedger(AggregateRoot):
    """
    Aggregate Root: Billing ledger of a single parking facility

    Keeps two maps keyed by plate:
    - active: plate -> instant the open session started
    - settled: plate -> whole seconds accumulated since the last settlement

    A plate can be in both maps at once (parked again after an earlier
    withdrawal in the same billing period). Callers must serialize access.
    """

    def __init__(self, rate_per_second: int, clock: Clock, id: Optional[str] = None):
        super().__init__(id)

        if isinstance(rate_per_second, bool) or not isinstance(rate_per_second, int):
            raise ValueError(f"Rate must be an integer, got: {rate_per_second!r}")
        if rate_per_second < 0:
            raise ValueError(f"Rate cannot be negative: {rate_per_second}")

        self._rate_per_second = rate_per_second
        self._clock = clock
        self._active: Dict[VehiclePlate, Any] = {}
        self._settled: Dict[VehiclePlate, int] = {}

        self._logger.info(f"Created ParkingLedger at {rate_per_second}/s (ID: {self.id})")

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def rate_per_second(self) -> int:
        return self._rate_per_second

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def active_sessions(self) -> Dict[VehiclePlate, Any]:
        """Snapshot of open sessions: plate -> start instant"""
        return dict(self._active)

    @property
    def settled_balances(self) -> Dict[VehiclePlate, int]:
        """Snapshot of accumulated seconds per plate"""
        return dict(self._settled)

    def is_parked(self, plate: VehiclePlate) -> bool:
        return plate in self._active

    def session_start(self, plate: VehiclePlate) -> Optional[Any]:
        """Start instant of the vehicle's open session, None if not parked"""
        return self._active.get(plate)

    def settled_seconds(self, plate: VehiclePlate) -> int:
        return self._settled.get(plate, 0)

    # ------------------------------------------------------------------
    # Business operations
    # ------------------------------------------------------------------

    def park(self, plate: VehiclePlate) -> None:
        """
        Open a session for the vehicle

        Raises: AlreadyParkedError if the vehicle already has one
        """
        if plate in self._active:
            self._logger.warning(f"Rejected park: {plate} is already parked")
            raise AlreadyParkedError(plate)

        now = self._clock.now()
        self._active[plate] = now

        self._add_domain_event(VehicleParkedEvent(plate, occurred_at=now))
        self._increment_version()
        self._logger.info(f"Parked vehicle: {plate}")

    def withdraw(self, plate: VehiclePlate) -> int:
        """
        Close the vehicle's session and move its duration into the
        settled balance

        Returns: whole seconds billed for the closed session
        Raises: NotParkedError if the vehicle has no open session
        """
        if plate not in self._active:
            self._logger.warning(f"Rejected withdraw: {plate} is not parked")
            raise NotParkedError(plate)

        now = self._clock.now()
        elapsed = self._elapsed_since(plate, self._active[plate], now)
        settled = self._settled.get(plate, 0) + elapsed
        self._settled[plate] = settled
        del self._active[plate]

        self._add_domain_event(VehicleWithdrawnEvent(
            plate=plate,
            elapsed_seconds=elapsed,
            settled_seconds=settled,
            occurred_at=now
        ))
        self._increment_version()
        self._logger.info(f"Withdrew vehicle {plate} after {elapsed}s (balance {settled}s)")
        return elapsed

    def current_bill(self, plate: VehiclePlate) -> int:
        """
        Amount owed so far by the vehicle: open session plus settled
        balance, at the ledger rate. Unknown vehicles owe nothing.
        """
        seconds = self._settled.get(plate, 0)
        if plate in self._active:
            seconds += self._elapsed_since(plate, self._active[plate], self._clock.now())
        return seconds * self._rate_per_second

    def settle_all(self) -> Dict[VehiclePlate, int]:
        """
        Close the current billing period

        Settled balances with a nonzero duration are charged and cleared;
        zero-second balances are dropped without a charge entry. Every open
        session is charged up to now and re-based to now, so the same
        interval is never billed twice. Open sessions always appear in
        the result, even with a zero charge.

        Returns: plate -> amount owed for the period
        """
        now = self._clock.now()
        charges: Dict[VehiclePlate, int] = {}

        for plate, seconds in self._settled.items():
            if seconds:
                charges[plate] = seconds * self._rate_per_second

        for plate, started_at in self._active.items():
            elapsed = self._elapsed_since(plate, started_at, now)
            charges[plate] = charges.get(plate, 0) + elapsed * self._rate_per_second

        self._settled.clear()
        for plate in self._active:
            self._active[plate] = now

        self._add_domain_event(PeriodSettledEvent(
            charges=charges,
            occurred_at=now,
            rebased=len(self._active)
        ))
        self._increment_version()
        self._logger.info(
            f"Settled period: {len(charges)} vehicle(s), total {sum(charges.values())}, "
            f"{len(self._active)} session(s) re-based"
        )
        return charges

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _elapsed_since(self, plate: VehiclePlate, started_at, now) -> int:
        elapsed = elapsed_seconds(started_at, now)
        if elapsed < 0:
            self._logger.warning(f"Clock moved backwards for {plate}; billing 0s")
            return 0
        return elapsed

    def __repr__(self) -> str:
        return (
            f"ParkingLedger(id={self.id}, rate={self._rate_per_second}, "
            f"active={len(self._active)}, settled={len(self._settled)})"
        )
