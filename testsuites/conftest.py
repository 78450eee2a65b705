"""
================================================================================
Test Suites Pytest Configuration
================================================================================

Registers the project markers and tags collected tests by location.

================================================================================
"""

import pytest


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""

    # Priority markers
    config.addinivalue_line(
        "markers", "P0: Critical priority tests - must pass for deployment"
    )
    config.addinivalue_line(
        "markers", "P1: High priority tests - important functionality"
    )
    config.addinivalue_line(
        "markers", "P2: Medium priority tests - edge cases and minor features"
    )
    config.addinivalue_line(
        "markers", "P3: Low priority tests - extensive validation"
    )

    # Test type markers
    config.addinivalue_line(
        "markers", "smoke: Quick verification tests"
    )
    config.addinivalue_line(
        "markers", "regression: Full regression test suite"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests simulating user flows"
    )

    # Domain markers
    config.addinivalue_line(
        "markers", "ui: Browser tests against the running site"
    )
    config.addinivalue_line(
        "markers", "unit: Tests that need no browser"
    )

    # Feature markers
    config.addinivalue_line(
        "markers", "navigation: Page-to-page navigation"
    )
    config.addinivalue_line(
        "markers", "tools: Test data and utility tools"
    )
    config.addinivalue_line(
        "markers", "templates: Test artifact templates"
    )


def pytest_collection_modifyitems(config, items):
    """Add 'ui' / 'unit' markers from the test's directory."""
    for item in items:
        parts = item.path.parts
        if "ui_testing" in parts:
            item.add_marker(pytest.mark.ui)
        elif "unit" in parts:
            item.add_marker(pytest.mark.unit)


def pytest_report_header(config):
    """Add custom header to pytest output."""
    return [
        "",
        "=" * 60,
        "OnlyTests UI Automation Suite",
        "=" * 60,
        "",
    ]
