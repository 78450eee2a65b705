"""
================================================================================
OnlyTests Tools
================================================================================

Infrastructure shared by the OnlyTests UI test suites.

Modules:
    - common: environment configuration, structured logging, config
      validation and run bootstrap

Example:
    from onlytests_tools.common import ConfigValidator, get_environment

    ConfigValidator(get_environment()).validate_all()

================================================================================
"""

__version__ = "1.0.0"

__all__ = [
    "common",
]
