# File: tests/coverage_report.py
#!/usr/bin/env python3
"""
Generate test coverage report for the Parking Ledger.
Requires the test extra: pip install -e .[test]
"""

import sys
from pathlib import Path

import coverage

ROOT = Path(__file__).parent.parent


def generate_coverage_report():
    """Run the whole suite under coverage and write console, HTML and XML reports"""
    cov = coverage.Coverage(
        source=['parking_ledger'],
        omit=['*/tests/*', '*/__pycache__/*', '*/__main__.py']
    )
    cov.start()

    try:
        from tests.run_tests import run_all_tests
        result = run_all_tests()
    finally:
        cov.stop()
        cov.save()

    print("\n" + "=" * 60)
    print("Test Coverage Report")
    print("=" * 60)

    cov.report()
    cov.html_report(directory='htmlcov')
    print("HTML report generated in 'htmlcov' directory")
    cov.xml_report(outfile='coverage.xml')
    print("XML report generated as 'coverage.xml'")

    return 0 if result.wasSuccessful() else 1


if __name__ == "__main__":
    sys.path.insert(0, str(ROOT))
    sys.exit(generate_coverage_report())
