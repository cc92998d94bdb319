#!/usr/bin/env python3
"""
Configuration Unit Tests
"""

import os
import tempfile
import unittest

from parking_ledger.infrastructure.config import ConfigurationError, LedgerSettings, load_settings


class TestLedgerSettings(unittest.TestCase):

    def test_defaults(self):
        settings = LedgerSettings()
        self.assertEqual(settings.rate_per_second, 10)
        self.assertEqual(settings.log_level, "INFO")
        self.assertIsNone(settings.log_file)

    def test_log_level_normalized(self):
        self.assertEqual(LedgerSettings(log_level="debug").log_level, "DEBUG")

    def test_invalid_values(self):
        for data in [{"rate_per_second": -1}, {"log_level": "LOUD"}, {"unknown": 1}]:
            with self.assertRaises(ValueError, msg=f"Accepted {data}"):
                LedgerSettings(**data)


class TestLoadSettings(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)

    def write(self, text):
        path = os.path.join(self.tmpdir.name, "ledger.yaml")
        with open(path, "w", encoding="utf-8") as fh:
            fh.write(text)
        return path

    def test_no_file_no_env(self):
        self.assertEqual(load_settings(environ={}), LedgerSettings())

    def test_yaml_file(self):
        path = self.write("rate_per_second: 25\nlog_level: warning\n")
        settings = load_settings(path, environ={})
        self.assertEqual(settings.rate_per_second, 25)
        self.assertEqual(settings.log_level, "WARNING")

    def test_empty_yaml_file(self):
        self.assertEqual(load_settings(self.write(""), environ={}), LedgerSettings())

    def test_environment_overrides_file(self):
        path = self.write("rate_per_second: 25\n")
        settings = load_settings(path, environ={
            "PARKING_LEDGER_RATE": "40",
            "PARKING_LEDGER_LOG_FILE": "ledger.log",
        })
        self.assertEqual(settings.rate_per_second, 40)
        self.assertEqual(settings.log_file, "ledger.log")

    def test_invalid_environment_value(self):
        with self.assertRaises(ConfigurationError):
            load_settings(environ={"PARKING_LEDGER_RATE": "fast"})

    def test_missing_file(self):
        with self.assertRaises(ConfigurationError):
            load_settings(os.path.join(self.tmpdir.name, "missing.yaml"), environ={})

    def test_malformed_yaml(self):
        with self.assertRaises(ConfigurationError):
            load_settings(self.write("rate_per_second: [1, 2\n"), environ={})

    def test_non_mapping_yaml(self):
        with self.assertRaises(ConfigurationError):
            load_settings(self.write("- 1\n- 2\n"), environ={})

    def test_configuration_error_is_value_error(self):
        self.assertTrue(issubclass(ConfigurationError, ValueError))


if __name__ == "__main__":
    unittest.main()
