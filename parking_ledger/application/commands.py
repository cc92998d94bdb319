# File: parking_ledger/application/commands.py
"""
Command Pattern Implementation for the Parking Ledger

Encapsulates ledger operations as first-class objects. Each command
represents one business operation that can be validated, executed, logged
and kept in a history.

Commands:
- ParkVehicleCommand: open a session
- WithdrawVehicleCommand: close a session
- SettlePeriodCommand: close the billing period

The CommandProcessor is the boundary where ledger errors become failed
results instead of exceptions.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
import logging
import uuid

from ..domain.models import LedgerError
from .ledger_service import LedgerService, PlateLike, to_plate


# ============================================================================
# COMMAND INTERFACES AND BASE CLASSES
# ============================================================================

class Command(ABC):
    """
    Abstract base class for all commands

    A command represents an intent to change the ledger state.
    Commands are named in the imperative (e.g., ParkVehicleCommand).
    """

    def __init__(self, command_id: Optional[str] = None):
        self.command_id = command_id or str(uuid.uuid4())
        self.executed_at: Optional[datetime] = None
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def execute(self, service: LedgerService) -> Dict[str, Any]:
        """
        Execute the command using the provided service

        Returns: Data describing the outcome
        Raises: LedgerError when the ledger rejects the operation
        """
        pass

    def validate(self) -> Tuple[bool, List[str]]:
        """
        Validate command parameters before execution

        Returns: (is_valid, error_messages)
        """
        return True, []

    def get_description(self) -> str:
        """Get human-readable command description"""
        return self.__class__.__name__.replace("Command", "")

    def to_dict(self) -> Dict[str, Any]:
        """Convert command to dictionary for serialization"""
        return {
            "command_id": self.command_id,
            "command_type": self.__class__.__name__,
            "executed_at": self.executed_at.isoformat() if self.executed_at else None,
        }


class PlateCommand(Command):
    """Base for commands that act on a single vehicle"""

    def __init__(self, plate: PlateLike, command_id: Optional[str] = None):
        super().__init__(command_id)
        self.plate = plate

    def validate(self) -> Tuple[bool, List[str]]:
        errors = []

        if not self.plate:
            errors.append("Plate is required")
        else:
            try:
                to_plate(self.plate)
            except ValueError as e:
                errors.append(str(e))

        return len(errors) == 0, errors

    def get_description(self) -> str:
        return f"{super().get_description()} {self.plate}"

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["plate"] = str(self.plate)
        return data


# ============================================================================
# COMMAND RESULT
# ============================================================================

@dataclass
class CommandResult:
    """Outcome of processing one command"""
    success: bool
    command_id: str
    command_type: str
    executed_at: datetime
    data: Optional[Dict[str, Any]] = None
    error_message: Optional[str] = None
    error_code: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "success": self.success,
            "command_id": self.command_id,
            "command_type": self.command_type,
            "executed_at": self.executed_at.isoformat(),
            "data": self.data,
            "error_message": self.error_message,
            "error_code": self.error_code,
            "metadata": self.metadata
        }


# ============================================================================
# LEDGER COMMANDS
# ============================================================================

class ParkVehicleCommand(PlateCommand):
    """Command: Park a vehicle"""

    def execute(self, service: LedgerService) -> Dict[str, Any]:
        self.logger.info(f"Executing ParkVehicleCommand for {self.plate}")
        receipt = service.park(self.plate)
        self.executed_at = datetime.now()
        return receipt.to_dict()


class WithdrawVehicleCommand(PlateCommand):
    """Command: Withdraw a vehicle and bank its session time"""

    def execute(self, service: LedgerService) -> Dict[str, Any]:
        self.logger.info(f"Executing WithdrawVehicleCommand for {self.plate}")
        receipt = service.withdraw(self.plate)
        self.executed_at = datetime.now()
        return receipt.to_dict()


class SettlePeriodCommand(Command):
    """Command: Close the billing period for every vehicle"""

    def execute(self, service: LedgerService) -> Dict[str, Any]:
        self.logger.info("Executing SettlePeriodCommand")
        settlement = service.settle_all()
        self.executed_at = datetime.now()
        return {
            "settlement_id": settlement.settlement_id,
            "settled_at": settlement.settled_at,
            "charges": settlement.as_mapping(),
            "total": settlement.total,
        }


COMMAND_TYPES = {
    "park": ParkVehicleCommand,
    "withdraw": WithdrawVehicleCommand,
    "settle": SettlePeriodCommand,
}


def create_command(action: str, plate: Optional[PlateLike] = None) -> Command:
    """Build a command from an action name"""
    command_class = COMMAND_TYPES.get(action)
    if command_class is None:
        raise ValueError(f"Unknown command type: {action}")
    if issubclass(command_class, PlateCommand):
        return command_class(plate)
    return command_class()


# ============================================================================
# COMMAND PROCESSOR
# ============================================================================

class CommandProcessor:
    """
    Processes commands against a LedgerService with:
    - Validation before execution
    - Conversion of ledger errors into failed results
    - Bounded command history
    """

    def __init__(self, service: LedgerService, max_history_size: int = 1000):
        self.service = service
        self.logger = logging.getLogger(self.__class__.__name__)
        self.command_history: List[Command] = []
        self.max_history_size = max_history_size

    def process(self, command: Command) -> CommandResult:
        """
        Process a command

        Args:
            command: Command to execute

        Returns: CommandResult; failures carry the error class in error_code
        """
        self.logger.info(f"Processing command: {command.get_description()}")

        is_valid, errors = command.validate()
        if not is_valid:
            self.logger.error(f"Validation failed for {command.get_description()}: {errors}")
            return self._failure(command, f"Validation failed: {errors}", "ValidationError")

        try:
            data = command.execute(self.service)
        except (LedgerError, ValueError) as e:
            self.logger.error(f"Error executing {command.get_description()}: {e}")
            return self._failure(command, str(e), type(e).__name__)

        self._add_to_history(command)
        return CommandResult(
            success=True,
            command_id=command.command_id,
            command_type=command.__class__.__name__,
            executed_at=command.executed_at or datetime.now(),
            data=data
        )

    def process_batch(self, commands: List[Command]) -> List[CommandResult]:
        """Process multiple commands in order; failures do not stop the batch"""
        return [self.process(command) for command in commands]

    def get_history(self, limit: int = 10) -> List[Dict[str, Any]]:
        """Most recent successful commands, newest last"""
        return [command.to_dict() for command in self.command_history[-limit:]]

    def _add_to_history(self, command: Command) -> None:
        self.command_history.append(command)
        if len(self.command_history) > self.max_history_size:
            self.command_history.pop(0)

    def _failure(self, command: Command, message: str, error_code: str) -> CommandResult:
        metadata = {}
        if isinstance(command, PlateCommand) and command.plate:
            metadata["plate"] = str(command.plate)
        return CommandResult(
            success=False,
            command_id=command.command_id,
            command_type=command.__class__.__name__,
            executed_at=datetime.now(),
            error_message=message,
            error_code=error_code,
            metadata=metadata
        )
