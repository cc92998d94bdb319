# File: parking_ledger/infrastructure/repositories.py
"""
Repository Pattern Implementation for the Parking Ledger

Repositories provide a collection-like interface over stored records while
hiding the storage behind it. The ledger keeps no durable state, so the only
implementation here is in-memory: it holds the history of closed billing
periods for the lifetime of the process.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Generic, List, Optional, TypeVar, Union
import logging
import uuid

from ..domain.models import VehiclePlate

T = TypeVar('T')
ID = TypeVar('ID')


# ============================================================================
# REPOSITORY INTERFACES
# ============================================================================

class Repository(ABC, Generic[T, ID]):
    """Generic repository interface"""

    @abstractmethod
    def add(self, entity: T) -> T:
        """Add an entity to the repository"""
        pass

    @abstractmethod
    def get(self, id: ID) -> Optional[T]:
        """Get an entity by ID"""
        pass

    @abstractmethod
    def get_all(self, skip: int = 0, limit: int = 100) -> List[T]:
        """Get entities with pagination"""
        pass

    @abstractmethod
    def count(self) -> int:
        """Count stored entities"""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove every stored entity"""
        pass


# ============================================================================
# RECORDS
# ============================================================================

@dataclass(frozen=True)
class SettlementRecord:
    """A closed billing period as stored in the history"""
    charges: Dict[VehiclePlate, int]
    settled_at: Union[float, datetime]
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    recorded_at: datetime = field(default_factory=datetime.now)

    @property
    def total(self) -> int:
        return sum(self.charges.values())


# ============================================================================
# IN-MEMORY REPOSITORIES
# ============================================================================

class InMemorySettlementRepository(Repository[SettlementRecord, str]):
    """In-memory settlement history, kept in insertion order"""

    def __init__(self):
        self._storage: Dict[str, SettlementRecord] = {}
        self._logger = logging.getLogger(self.__class__.__name__)

    def add(self, entity: SettlementRecord) -> SettlementRecord:
        if entity.id in self._storage:
            raise KeyError(f"Settlement {entity.id} already stored")

        self._storage[entity.id] = entity
        self._logger.debug(f"Added settlement {entity.id} ({len(entity.charges)} charge(s))")
        return entity

    def get(self, id: str) -> Optional[SettlementRecord]:
        return self._storage.get(id)

    def get_all(self, skip: int = 0, limit: int = 100) -> List[SettlementRecord]:
        items = list(self._storage.values())
        return items[skip:skip + limit]

    def count(self) -> int:
        return len(self._storage)

    def latest(self) -> Optional[SettlementRecord]:
        """Most recently stored settlement"""
        if not self._storage:
            return None
        return next(reversed(self._storage.values()))

    def total_charged(self, plate: VehiclePlate) -> int:
        """Sum of everything charged to a plate across stored periods"""
        return sum(record.charges.get(plate, 0) for record in self._storage.values())

    def clear(self):
        """Clear all data (for testing)"""
        self._storage.clear()
