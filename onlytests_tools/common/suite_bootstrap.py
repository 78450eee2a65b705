"""
================================================================================
Suite Bootstrap
================================================================================

One-time initialisation of a test run:
    - validate configuration (fails fast, before any browser starts)
    - log environment info and a configuration summary
    - create artifact directories under test-results/
    - collect per-test metrics for the end-of-run summary

Used by the UI pytest session fixtures and by run_tests.py.

================================================================================
"""

from __future__ import annotations

import json
import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .config_validator import ConfigValidator
from .environment import Environment
from .logger import LogContext, StructuredLogger


RESULTS_DIR = Path("test-results")
ARTIFACT_SUBDIRS = ("screenshots", "videos", "traces", "logs")


@dataclass
class RunMetrics:
    """Aggregated results for the current run. Durations in milliseconds."""

    total_tests: int = 0
    passed_tests: int = 0
    failed_tests: int = 0
    total_duration: int = 0

    @property
    def average_duration(self) -> float:
        return self.total_duration / self.total_tests if self.total_tests else 0.0

    @property
    def success_rate(self) -> float:
        return self.passed_tests / self.total_tests * 100 if self.total_tests else 0.0


class SuiteBootstrap:
    """
    Prepares the environment for a test run.

    Usage:
        >>> bootstrap = SuiteBootstrap()
        >>> bootstrap.initialize()
        >>> bootstrap.update_test_metrics("test_home", True, 1200)
        >>> bootstrap.cleanup()
    """

    def __init__(
        self,
        environment: Optional[Environment] = None,
        log: Optional[StructuredLogger] = None,
        results_dir: Path = RESULTS_DIR,
    ) -> None:
        self.env = environment or Environment.get_instance()
        self.log = log or StructuredLogger.get_instance()
        self.results_dir = Path(results_dir)
        self.validator = ConfigValidator(self.env, log=self.log)

        self._initialized = False
        self._started_at: Optional[float] = None
        self._metrics: Optional[RunMetrics] = None

    def initialize(self) -> None:
        """
        Initialise the run. Calling it again is a no-op.

        Raises:
            ConfigurationError: If configuration validation fails
        """
        if self._initialized:
            self.log.info("Test environment already initialized")
            return

        self.log.info("Initializing test environment...")
        try:
            self.validator.validate_all()
            self._log_environment_info()
            self.setup_test_directories()
        except Exception as e:
            self.log.error("Failed to initialize test environment", LogContext(action="INIT", error=e))
            raise

        self._started_at = time.monotonic()
        self._metrics = RunMetrics()
        self._initialized = True
        self.log.info("Test environment initialized successfully")

    def _log_environment_info(self) -> None:
        summary = self.validator.get_configuration_summary()
        self.log.log_environment_info(summary)
        self.log.log_configuration(summary)
        self.log.info(
            "Configuration summary:",
            LogContext(action="CONFIG_SUMMARY", page_url=json.dumps(dict(summary), indent=2)),
        )

    def setup_test_directories(self) -> None:
        """Create test-results/ and its artifact folders. Existing ones are kept."""
        self.log.info("Setting up test directories...")
        for path in [self.results_dir] + [self.results_dir / name for name in ARTIFACT_SUBDIRS]:
            path.mkdir(parents=True, exist_ok=True)
            self.log.debug(f"Ensured directory: {path}")
        self.log.info("Test directories setup completed")

    # =========================================================================
    # Metrics
    # =========================================================================

    def get_test_metrics(self) -> Optional[RunMetrics]:
        return self._metrics

    def update_test_metrics(self, test_name: str, success: bool, duration: int) -> None:
        if self._metrics is None:
            return

        metrics = self._metrics
        metrics.total_tests += 1
        metrics.total_duration += duration
        if success:
            metrics.passed_tests += 1
        else:
            metrics.failed_tests += 1

        self.log.debug(
            f"Updated test metrics for: {test_name}",
            LogContext(action="METRICS_UPDATE", duration=duration),
        )

    def log_test_summary(self) -> None:
        metrics = self._metrics
        if metrics is None or metrics.total_tests == 0:
            return

        summary = {
            **asdict(metrics),
            "success_rate": f"{metrics.success_rate:.2f}%",
            "total_duration": f"{metrics.total_duration}ms",
            "average_duration": f"{metrics.average_duration:.2f}ms",
        }
        if self._started_at is not None:
            summary["wall_time"] = f"{int((time.monotonic() - self._started_at) * 1000)}ms"
        self.log.info(
            "Test execution summary:",
            LogContext(action="TEST_SUMMARY", page_url=json.dumps(summary, indent=2)),
        )

    def cleanup(self) -> None:
        """Log the final summary and allow re-initialisation."""
        self.log.info("Cleaning up test environment...")
        self.log_test_summary()
        self._initialized = False
        self.log.info("Test environment cleanup completed")

    def is_ready(self) -> bool:
        return self._initialized

    def get_environment_status(self) -> Dict[str, Any]:
        env = self.env
        return {
            "initialized": self._initialized,
            "environment": env.get_environment(),
            "base_url": env.get_base_url(),
            "is_ci": env.is_ci(),
            "is_production": env.is_production(),
            "is_local": env.is_local(),
            "headless": env.is_headless(),
            "parallel": env.is_parallel(),
            "workers": env.get_workers(),
            "timeout": env.get_timeout(),
            "retries": env.get_retries(),
        }


__all__ = [
    "ARTIFACT_SUBDIRS",
    "RESULTS_DIR",
    "RunMetrics",
    "SuiteBootstrap",
]
