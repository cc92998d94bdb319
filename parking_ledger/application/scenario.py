# File: parking_ledger/application/scenario.py
"""
Scenario replay for the Parking Ledger

Drives a LedgerService through a timed script on a ManualClock. Each step
moves the clock to its instant and then runs as a command, so a failing
step is reported the same way the CommandProcessor reports it.
"""

from pathlib import Path
from typing import Any, Dict, List, Union
import logging

import yaml

from ..domain.clock import ManualClock
from ..infrastructure.config import ConfigurationError
from .commands import CommandProcessor, CommandResult, create_command
from .dtos import ScenarioDTO, ScenarioStepDTO
from .ledger_service import LedgerService, LedgerServiceFactory

logger = logging.getLogger(__name__)


def load_scenario(path: Union[str, Path]) -> ScenarioDTO:
    """Read a scenario from a YAML file"""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except OSError as e:
        raise ConfigurationError(f"Cannot read scenario {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in scenario {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Scenario {path} must contain a mapping")
    return ScenarioDTO.model_validate(data)


class ScenarioRunner:
    """Replays scenario steps against a ledger service on a manual clock"""

    def __init__(self, service: LedgerService, clock: ManualClock):
        self.service = service
        self.clock = clock
        self.processor = CommandProcessor(service)

    @classmethod
    def for_rate(cls, rate_per_second: int) -> 'ScenarioRunner':
        clock = ManualClock()
        return cls(LedgerServiceFactory.create_test_service(rate_per_second, clock), clock)

    def run_step(self, step: ScenarioStepDTO) -> Dict[str, Any]:
        self.clock.set_now(step.at)

        if step.action == "bill":
            bill = self.service.current_bill(step.plate)
            return {"at": step.at, "action": step.action, "success": True, "data": bill.to_dict()}

        result: CommandResult = self.processor.process(create_command(step.action, step.plate))
        outcome = {"at": step.at, "action": step.action, "success": result.success}
        if result.success:
            outcome["data"] = result.data
        else:
            outcome["error"] = result.error_message
            outcome["error_code"] = result.error_code
        return outcome

    def run(self, scenario: ScenarioDTO, stop_on_error: bool = True) -> List[Dict[str, Any]]:
        """
        Run every step in order

        Returns: One outcome dict per executed step
        """
        outcomes = []
        for step in scenario.steps:
            outcome = self.run_step(step)
            outcomes.append(outcome)
            if not outcome["success"]:
                logger.warning(f"Scenario step at {step.at} failed: {outcome['error']}")
                if stop_on_error:
                    break
        return outcomes
