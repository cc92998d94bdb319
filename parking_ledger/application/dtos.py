# File: parking_ledger/application/dtos.py
"""
Data Transfer Objects (DTOs) for the Parking Ledger

This module defines DTOs for data transfer between layers:
1. Input DTOs - Plate requests received from callers
2. Output DTOs - Receipts, bills, settlements and status snapshots

DTO Principles:
- Plates cross the boundary as display strings (e.g. "AA111A99")
- Validation at creation
- No business logic, only data
- Serialization/deserialization support
"""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Union
import json

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..domain.models import VehiclePlate

# Ledger clocks yield numeric seconds or datetimes
Instant = Union[float, datetime]


# ============================================================================
# BASE DTO CLASSES
# ============================================================================

class BaseDTO(BaseModel):
    """Base DTO with common functionality"""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        frozen=True,
    )

    def to_dict(self, exclude_none: bool = False, **kwargs) -> Dict[str, Any]:
        """Convert DTO to dictionary"""
        return self.model_dump(exclude_none=exclude_none, **kwargs)

    def to_json(self, **kwargs) -> str:
        """Convert DTO to JSON string"""
        return self.model_dump_json(**kwargs)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BaseDTO':
        """Create DTO from dictionary"""
        return cls(**data)

    @classmethod
    def from_json(cls, json_str: str) -> 'BaseDTO':
        """Create DTO from JSON string"""
        data = json.loads(json_str)
        return cls(**data)


def _normalize_plate(v: Any) -> str:
    """Accept a VehiclePlate or its display string, return canonical text"""
    if isinstance(v, VehiclePlate):
        return str(v)
    return str(VehiclePlate.parse(v))


# ============================================================================
# INPUT DTOs
# ============================================================================

class PlateRequestDTO(BaseDTO):
    """Request naming a single vehicle"""
    plate: str = Field(description="Plate in display form, e.g. AA111A99")

    @field_validator('plate', mode='before')
    @classmethod
    def validate_plate(cls, v):
        return _normalize_plate(v)

    def to_plate(self) -> VehiclePlate:
        return VehiclePlate.parse(self.plate)


# ============================================================================
# OUTPUT DTOs
# ============================================================================

class ParkingReceiptDTO(BaseDTO):
    """Result of opening a session"""
    plate: str
    started_at: Instant = Field(description="Ledger clock instant the session started")
    outstanding: int = Field(ge=0, description="Amount already owed from earlier sessions")


class WithdrawalReceiptDTO(BaseDTO):
    """Result of closing a session"""
    plate: str
    elapsed_seconds: int = Field(ge=0)
    settled_seconds: int = Field(ge=0, description="Balance accumulated this period")
    amount_due: int = Field(ge=0, description="Current bill after the withdrawal")


class BillDTO(BaseDTO):
    """Running bill of one vehicle"""
    plate: str
    amount: int = Field(ge=0)
    is_parked: bool = False

    @field_validator('plate', mode='before')
    @classmethod
    def validate_plate(cls, v):
        return _normalize_plate(v)


class ChargeDTO(BaseDTO):
    """One line of a settlement"""
    plate: str
    amount: int = Field(ge=0)


class SettlementDTO(BaseDTO):
    """Result of closing a billing period"""
    settlement_id: str
    settled_at: Instant
    charges: List[ChargeDTO] = Field(default_factory=list)
    recorded_at: datetime = Field(default_factory=datetime.now)

    @property
    def total(self) -> int:
        return sum(charge.amount for charge in self.charges)

    def as_mapping(self) -> Dict[str, int]:
        """Charges keyed by plate display string"""
        return {charge.plate: charge.amount for charge in self.charges}


class LedgerStatusDTO(BaseDTO):
    """Snapshot of the ledger's state"""
    ledger_id: str
    rate_per_second: int = Field(ge=0)
    active_plates: List[str] = Field(default_factory=list)
    settled_seconds: Dict[str, int] = Field(default_factory=dict)
    version: int = Field(ge=1)

    @property
    def active_count(self) -> int:
        return len(self.active_plates)


# ============================================================================
# SCENARIO DTOs
# ============================================================================

class ScenarioStepDTO(BaseDTO):
    """One timed step of a replayed scenario"""
    at: float = Field(ge=0, description="Clock instant, in seconds, the step runs at")
    action: Literal["park", "withdraw", "bill", "settle"]
    plate: Optional[str] = None

    @field_validator('plate', mode='before')
    @classmethod
    def validate_plate(cls, v):
        if v is None:
            return v
        return _normalize_plate(v)

    @model_validator(mode='after')
    def validate_plate_required(self):
        if self.action != "settle" and self.plate is None:
            raise ValueError(f"Step '{self.action}' requires a plate")
        return self


class ScenarioDTO(BaseDTO):
    """A replayable script of ledger steps"""
    rate: Optional[int] = Field(default=None, ge=0, description="Overrides the configured rate")
    steps: List[ScenarioStepDTO] = Field(default_factory=list)

    @field_validator('steps')
    @classmethod
    def validate_order(cls, v):
        for previous, step in zip(v, v[1:]):
            if step.at < previous.at:
                raise ValueError(f"Step at {step.at} runs before the previous step at {previous.at}")
        return v
