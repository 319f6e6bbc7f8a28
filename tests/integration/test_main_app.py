#!/usr/bin/env python3
"""
Main application tests

Covers argument parsing, configuration errors, logging setup and a full
console run through main().
"""

import unittest
from unittest.mock import Mock, patch
from io import StringIO
import logging
import os
import sys
import tempfile
from pathlib import Path

# Add the project root to the Python path
sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from parkir.main import build_parser, main, setup_logging


class TestArgumentParsing(unittest.TestCase):
    """Command-line flags map onto configuration overrides"""

    def test_defaults_leave_config_untouched(self):
        args = build_parser().parse_args([])
        self.assertIsNone(args.capacity)
        self.assertIsNone(args.config)
        self.assertIsNone(args.clear_screen)

    def test_flags(self):
        args = build_parser().parse_args(
            ["--capacity", "5", "--log-level", "debug", "--no-clear"]
        )
        self.assertEqual(args.capacity, 5)
        self.assertEqual(args.log_level, "debug")
        self.assertFalse(args.clear_screen)


@patch.dict(os.environ, {}, clear=True)
class TestMainFunction(unittest.TestCase):
    """Test main() wiring"""

    @patch('parkir.main.ParkirApplication')
    @patch('parkir.main.setup_logging')
    def test_main_builds_and_runs_app(self, mock_setup_logging, mock_app_class):
        mock_app = Mock()
        mock_app_class.return_value = mock_app

        code = main(["--capacity", "7", "--log-level", "info", "--no-clear"])

        self.assertEqual(code, 0)
        mock_setup_logging.assert_called_once_with("INFO", None)
        config = mock_app_class.call_args[0][0]
        self.assertEqual(config.capacity, 7)
        self.assertFalse(config.clear_screen)
        mock_app.run.assert_called_once()

    @patch('parkir.main.ParkirApplication')
    @patch('parkir.main.setup_logging')
    def test_environment_is_read(self, mock_setup_logging, mock_app_class):
        with patch.dict(os.environ, {"PARKIR_CAPACITY": "4"}):
            main([])
        self.assertEqual(mock_app_class.call_args[0][0].capacity, 4)

    @patch('parkir.main.ParkirApplication')
    def test_invalid_configuration_exits_with_2(self, mock_app_class):
        for argv in (["--capacity", "0"], ["--config", "/nonexistent/parkir.yaml"]):
            with patch('sys.stderr', new_callable=StringIO) as stderr:
                code = main(argv)
            self.assertEqual(code, 2, msg=str(argv))
            self.assertTrue(stderr.getvalue().startswith("parkir: "))
        mock_app_class.assert_not_called()

    @patch('parkir.main.ParkirApplication')
    def test_unwritable_log_file_exits_with_2(self, mock_app_class):
        with tempfile.TemporaryDirectory() as tmpdir:
            log_file = os.path.join(tmpdir, "missing", "parkir.log")
            with patch('sys.stderr', new_callable=StringIO) as stderr, \
                 patch('parkir.main.logging.basicConfig'):
                code = main(["--log-file", log_file, "--no-clear"])

        self.assertEqual(code, 2)
        self.assertIn("parkir: cannot open log file", stderr.getvalue())
        mock_app_class.assert_not_called()

    @patch('parkir.main.ParkirApplication')
    @patch('parkir.main.setup_logging')
    def test_keyboard_interrupt_is_a_clean_exit(self, mock_setup_logging, mock_app_class):
        mock_app_class.return_value.run.side_effect = KeyboardInterrupt
        with patch('sys.stderr', new_callable=StringIO):
            self.assertEqual(main(["--no-clear"]), 0)

    @patch('parkir.main.setup_logging')
    def test_full_console_run(self, mock_setup_logging):
        keys = "\n".join(["1", "B1234XY", "1", "", "3", "", "4"]) + "\n"
        with patch('sys.stdin', StringIO(keys)), \
             patch('sys.stdout', new_callable=StringIO) as stdout:
            code = main(["--capacity", "2", "--no-clear"])

        self.assertEqual(code, 0)
        out = stdout.getvalue()
        self.assertIn("Vehicle with plate B1234XY parked at spot #1", out)
        self.assertIn("Spot #1: Car - B1234XY", out)
        self.assertIn("Spot #2: Empty", out)


class TestSetupLogging(unittest.TestCase):
    """Test logging configuration"""

    def setUp(self):
        root = logging.getLogger()
        self.saved = (root.level, list(root.handlers))
        self.addCleanup(self.restore)

    def restore(self):
        root = logging.getLogger()
        for handler in root.handlers:
            if handler not in self.saved[1]:
                handler.close()
        root.handlers[:] = self.saved[1]
        root.setLevel(self.saved[0])

    def test_level_and_file_handler(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            log_file = os.path.join(tmpdir, "parkir.log")
            setup_logging("debug", log_file)
            root = logging.getLogger()

            self.assertEqual(root.level, logging.DEBUG)
            self.assertTrue(any(isinstance(h, logging.FileHandler) for h in root.handlers))

            logging.getLogger("ParkingArea").debug("spot released")
            for handler in root.handlers:
                handler.flush()
            with open(log_file, encoding="utf-8") as fh:
                self.assertIn("ParkingArea - DEBUG - spot released", fh.read())

            self.restore()


if __name__ == '__main__':
    unittest.main()
