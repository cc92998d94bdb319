#!/usr/bin/env python3
"""
Command Pattern Unit Tests
"""

import unittest

from parking_ledger.application.commands import (
    CommandProcessor, ParkVehicleCommand, SettlePeriodCommand,
    WithdrawVehicleCommand, create_command
)
from parking_ledger.application.ledger_service import LedgerServiceFactory
from parking_ledger.domain.clock import ManualClock


class TestCreateCommand(unittest.TestCase):

    def test_known_actions(self):
        self.assertIsInstance(create_command("park", "AA111A99"), ParkVehicleCommand)
        self.assertIsInstance(create_command("withdraw", "AA111A99"), WithdrawVehicleCommand)
        self.assertIsInstance(create_command("settle"), SettlePeriodCommand)

    def test_unknown_action(self):
        with self.assertRaises(ValueError):
            create_command("tow", "AA111A99")


class TestCommandValidation(unittest.TestCase):

    def test_valid_plate(self):
        self.assertEqual(ParkVehicleCommand("AA111A99").validate(), (True, []))

    def test_missing_plate(self):
        is_valid, errors = ParkVehicleCommand("").validate()
        self.assertFalse(is_valid)
        self.assertEqual(errors, ["Plate is required"])

    def test_malformed_plate(self):
        is_valid, errors = WithdrawVehicleCommand("nope").validate()
        self.assertFalse(is_valid)
        self.assertEqual(len(errors), 1)

    def test_settle_always_valid(self):
        self.assertEqual(SettlePeriodCommand().validate(), (True, []))

    def test_description_and_dict(self):
        command = ParkVehicleCommand("AA111A99")
        self.assertEqual(command.get_description(), "ParkVehicle AA111A99")

        data = command.to_dict()
        self.assertEqual(data["command_type"], "ParkVehicleCommand")
        self.assertEqual(data["plate"], "AA111A99")
        self.assertIsNone(data["executed_at"])


class TestCommandProcessor(unittest.TestCase):

    def setUp(self):
        self.clock = ManualClock()
        self.service = LedgerServiceFactory.create_test_service(10, self.clock)
        self.processor = CommandProcessor(self.service)

    def test_successful_command(self):
        result = self.processor.process(ParkVehicleCommand("AA111A99"))

        self.assertTrue(result.success)
        self.assertEqual(result.command_type, "ParkVehicleCommand")
        self.assertEqual(result.data["plate"], "AA111A99")
        self.assertIsNone(result.error_code)
        self.assertEqual(len(self.processor.command_history), 1)

    def test_ledger_error_becomes_failed_result(self):
        self.processor.process(ParkVehicleCommand("AA111A99"))
        result = self.processor.process(ParkVehicleCommand("AA111A99"))

        self.assertFalse(result.success)
        self.assertEqual(result.error_code, "AlreadyParkedError")
        self.assertEqual(result.metadata, {"plate": "AA111A99"})
        self.assertEqual(len(self.processor.command_history), 1)

    def test_not_parked(self):
        result = self.processor.process(WithdrawVehicleCommand("BB222B99"))
        self.assertFalse(result.success)
        self.assertEqual(result.error_code, "NotParkedError")

    def test_validation_failure(self):
        result = self.processor.process(ParkVehicleCommand("bad"))
        self.assertFalse(result.success)
        self.assertEqual(result.error_code, "ValidationError")
        self.assertEqual(self.service.get_status().active_plates, [])

    def test_settle_command_data(self):
        self.processor.process(ParkVehicleCommand("AA111A99"))
        self.clock.set_now(12)
        result = self.processor.process(SettlePeriodCommand())

        self.assertTrue(result.success)
        self.assertEqual(result.data["charges"], {"AA111A99": 120})
        self.assertEqual(result.data["total"], 120)
        self.assertEqual(result.data["settled_at"], 12.0)

    def test_batch_continues_after_failure(self):
        results = self.processor.process_batch([
            WithdrawVehicleCommand("AA111A99"),
            ParkVehicleCommand("AA111A99"),
            SettlePeriodCommand(),
        ])
        self.assertEqual([r.success for r in results], [False, True, True])

    def test_history_bounded(self):
        processor = CommandProcessor(self.service, max_history_size=2)
        processor.process(ParkVehicleCommand("AA111A99"))
        processor.process(ParkVehicleCommand("BB222B99"))
        processor.process(ParkVehicleCommand("CC333C99"))

        history = processor.get_history()
        self.assertEqual([entry["plate"] for entry in history], ["BB222B99", "CC333C99"])

    def test_result_to_dict(self):
        result = self.processor.process(WithdrawVehicleCommand("AA111A99"))
        data = result.to_dict()
        self.assertFalse(data["success"])
        self.assertEqual(data["error_code"], "NotParkedError")
        self.assertIn("executed_at", data)


if __name__ == "__main__":
    unittest.main()
