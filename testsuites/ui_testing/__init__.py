"""
UI test suite for the OnlyTests site: framework, page objects and tests.
"""
