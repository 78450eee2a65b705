"""
Test suites package.

Kept importable so page objects and framework modules can be reached as
`testsuites.ui_testing...` from tests, `run_tests.py` and IDEs.
"""
