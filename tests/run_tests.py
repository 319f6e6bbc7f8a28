# File: tests/run_tests.py
#!/usr/bin/env python3
"""
Test runner for Parkir.

Usage:
    python tests/run_tests.py                     # every suite
    python tests/run_tests.py unit                # one suite directory
    python tests/run_tests.py unit.test_models    # one module
    python tests/run_tests.py unit.test_models.TestVehicle
"""

import unittest
import sys
from pathlib import Path

# Add the project root to the Python path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

TESTS_DIR = Path(__file__).resolve().parent
SUITES = ("unit", "integration")


def run_all_tests(verbosity: int = 2) -> unittest.TestResult:
    """Run the unit and integration suites"""
    test_loader = unittest.TestLoader()
    test_suite = unittest.TestSuite(
        test_loader.discover(str(TESTS_DIR / suite), pattern='test_*.py',
                             top_level_dir=str(TESTS_DIR.parent))
        for suite in SUITES
    )
    return unittest.TextTestRunner(verbosity=verbosity).run(test_suite)


def run_specific_test(test_name: str, verbosity: int = 2) -> unittest.TestResult:
    """Run one suite, module, test case or test method"""
    test_loader = unittest.TestLoader()

    if test_name in SUITES:
        test_suite = test_loader.discover(str(TESTS_DIR / test_name), pattern='test_*.py',
                                          top_level_dir=str(TESTS_DIR.parent))
    else:
        test_suite = test_loader.loadTestsFromName(f'tests.{test_name}')

    return unittest.TextTestRunner(verbosity=verbosity).run(test_suite)


if __name__ == "__main__":
    if len(sys.argv) > 1:
        result = run_specific_test(sys.argv[1])
    else:
        result = run_all_tests()

    sys.exit(0 if result.wasSuccessful() else 1)
