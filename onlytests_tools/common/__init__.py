"""
================================================================================
OnlyTests Tools Common Utilities
================================================================================

Shared configuration, logging and run bootstrap for the UI suite.

Exports:
    - Environment / EnvironmentConfig: profile-based configuration store
    - ConfigurationError: raised for missing or invalid configuration
    - StructuredLogger / LogContext / LogLevel: structured loguru logging
    - ConfigValidator: start-up configuration checks
    - SuiteBootstrap: run initialisation, artifact folders, metrics

Usage:
    from onlytests_tools.common import get_environment, get_logger

    env = get_environment()
    get_logger().info(f"Testing against {env.get_base_url()}")

================================================================================
"""

from .config_validator import ConfigValidator
from .environment import (
    ConfigurationError,
    Environment,
    EnvironmentConfig,
    get_environment,
)
from .logger import LogContext, LogLevel, StructuredLogger, get_logger, init_logger
from .suite_bootstrap import RunMetrics, SuiteBootstrap

__all__ = [
    "ConfigValidator",
    "ConfigurationError",
    "Environment",
    "EnvironmentConfig",
    "LogContext",
    "LogLevel",
    "RunMetrics",
    "StructuredLogger",
    "SuiteBootstrap",
    "get_environment",
    "get_logger",
    "init_logger",
]
