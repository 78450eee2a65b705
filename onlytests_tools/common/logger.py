"""
================================================================================
Structured Logger
================================================================================

Leveled, contextual log lines for the UI automation suite.

Every line follows one fixed layout so runs can be grepped and diffed:

    [<ISO8601>] [<LEVEL>] [<env>] [<test>]? [<action>]? [<n>ms]? [Retry: <n>]?
    <message> (URL: <url>)? (Error: <msg>)?

Lines are emitted through loguru. `init_logger()` configures the sinks once
per process (stderr, plus an optional rotating file when LOG_FILE is set).

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import IntEnum
from pathlib import Path
from typing import Any, Mapping, Optional

from loguru import logger


class LogLevel(IntEnum):
    """Ordered log levels. NONE silences everything."""

    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3
    NONE = 4


# Maps our level names onto loguru's built-in levels
_LOGURU_LEVELS = {
    LogLevel.DEBUG: "DEBUG",
    LogLevel.INFO: "INFO",
    LogLevel.WARN: "WARNING",
    LogLevel.ERROR: "ERROR",
}

_LEVEL_NAMES = {
    "debug": LogLevel.DEBUG,
    "info": LogLevel.INFO,
    "warn": LogLevel.WARN,
    "error": LogLevel.ERROR,
    "none": LogLevel.NONE,
}

DEFAULT_ENVIRONMENT = "local"

_logger_initialized: bool = False


@dataclass(frozen=True)
class LogContext:
    """
    Optional context attached to a single log call.

    Attributes:
        test_name: Name of the running test
        page_url: URL (or path) the message refers to
        action: Short action label, e.g. CLICK, NETWORK
        duration: Duration in milliseconds
        retry_count: Attempt number for retry-related messages
        error: Exception whose message is appended to the line
    """

    test_name: Optional[str] = None
    page_url: Optional[str] = None
    action: Optional[str] = None
    duration: Optional[int] = None
    retry_count: Optional[int] = None
    error: Optional[BaseException] = None


def parse_log_level(value: Optional[str]) -> LogLevel:
    """Parse a LOG_LEVEL value. Unknown or empty values mean INFO."""
    if not value:
        return LogLevel.INFO
    return _LEVEL_NAMES.get(value.strip().lower(), LogLevel.INFO)


def init_logger(log_file: Optional[str] = None) -> None:
    """
    Configure loguru sinks for structured output.

    Safe to call repeatedly; only the first call has an effect.

    Args:
        log_file: Optional file path. Defaults to the LOG_FILE env var.
    """
    global _logger_initialized

    if _logger_initialized:
        return

    # Structured lines are already fully formatted, level gating happens in
    # StructuredLogger.should_log, so sinks accept everything.
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG",
        format="{message}",
        colorize=False,
        backtrace=False,
        diagnose=False,
    )

    log_file = log_file or os.getenv("LOG_FILE")
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level="DEBUG",
            format="{message}",
            rotation="10 MB",
            retention="7 days",
            encoding="utf-8",
        )

    _logger_initialized = True


class StructuredLogger:
    """
    Process-wide structured logger.

    The level and debug flag are resolved once at construction. Tests may
    build isolated instances with explicit settings instead of touching the
    shared one.

    Usage:
        >>> log = StructuredLogger.get_instance()
        >>> log.info("Page opened", LogContext(test_name="home", duration=42))
    """

    _instance: Optional["StructuredLogger"] = None

    def __init__(
        self,
        level: Optional[LogLevel] = None,
        debug_enabled: Optional[bool] = None,
        environment: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        environ = os.environ if environ is None else environ

        self.level = level if level is not None else parse_log_level(environ.get("LOG_LEVEL"))
        if debug_enabled is None:
            debug_enabled = environ.get("ENABLE_DEBUG_LOGS") == "true"
        self.debug_enabled = debug_enabled
        self.environment = environment or environ.get("ENVIRONMENT") or DEFAULT_ENVIRONMENT

    @classmethod
    def get_instance(cls) -> "StructuredLogger":
        """Return the shared logger, creating it (and the sinks) on first use."""
        if cls._instance is None:
            init_logger()
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Drop the shared logger so the next access re-reads the environment."""
        cls._instance = None

    # =========================================================================
    # Formatting
    # =========================================================================

    def should_log(self, level: LogLevel) -> bool:
        return level >= self.level and (level != LogLevel.DEBUG or self.debug_enabled)

    def format_message(
        self,
        level: LogLevel,
        message: str,
        context: Optional[LogContext] = None,
        timestamp: Optional[datetime] = None,
    ) -> str:
        """
        Build one log line.

        Args:
            level: Level of the line
            message: Free-form message
            context: Optional bracketed/trailing annotations
            timestamp: Fixed timestamp (defaults to now, UTC)

        Returns:
            The formatted line
        """
        timestamp = timestamp or datetime.now(timezone.utc)
        iso = timestamp.isoformat(timespec="milliseconds").replace("+00:00", "Z")
        parts = [f"[{iso}] [{level.name}] [{self.environment}]"]

        ctx = context or LogContext()
        if ctx.test_name:
            parts.append(f"[{ctx.test_name}]")
        if ctx.action:
            parts.append(f"[{ctx.action}]")
        if ctx.duration is not None:
            parts.append(f"[{ctx.duration}ms]")
        if ctx.retry_count is not None:
            parts.append(f"[Retry: {ctx.retry_count}]")

        parts.append(message)

        if ctx.page_url:
            parts.append(f"(URL: {ctx.page_url})")
        if ctx.error is not None:
            parts.append(f"(Error: {ctx.error})")

        return " ".join(parts)

    def _emit(self, level: LogLevel, message: str, context: Optional[LogContext]) -> None:
        if not self.should_log(level):
            return
        try:
            line = self.format_message(level, message, context)
            logger.opt(depth=2).log(_LOGURU_LEVELS[level], line)
        except Exception:
            # A log call never fails its caller
            pass

    # =========================================================================
    # Leveled API
    # =========================================================================

    def debug(self, message: str, context: Optional[LogContext] = None) -> None:
        self._emit(LogLevel.DEBUG, message, context)

    def info(self, message: str, context: Optional[LogContext] = None) -> None:
        self._emit(LogLevel.INFO, message, context)

    def warn(self, message: str, context: Optional[LogContext] = None) -> None:
        self._emit(LogLevel.WARN, message, context)

    def error(self, message: str, context: Optional[LogContext] = None) -> None:
        self._emit(LogLevel.ERROR, message, context)

    # =========================================================================
    # Semantic Helpers
    # =========================================================================

    def log_test_start(self, test_name: str) -> None:
        self.info(f"Test started: {test_name}", LogContext(test_name=test_name))

    def log_test_end(self, test_name: str, duration: int, success: bool) -> None:
        status = "PASSED" if success else "FAILED"
        self.info(
            f"Test {status}: {test_name}",
            LogContext(test_name=test_name, duration=duration, action="PASS" if success else "FAIL"),
        )

    def log_page_action(self, action: str, page_url: str, duration: Optional[int] = None) -> None:
        self.debug(f"Page action: {action}", LogContext(action=action, page_url=page_url, duration=duration))

    def log_retry(self, action: str, retry_count: int, error: Optional[BaseException] = None) -> None:
        self.warn(f"Retrying action: {action}", LogContext(action=action, retry_count=retry_count, error=error))

    def log_element_interaction(self, selector: str, action: str, success: bool) -> None:
        outcome = "SUCCESS" if success else "FAILED"
        self.debug(f"Element: {action} on {selector} - {outcome}", LogContext(action="ELEMENT"))

    def log_performance_metrics(self, operation: str, duration: int) -> None:
        self.debug(f"Performance: {operation} took {duration}ms", LogContext(action=operation, duration=duration))

    def log_security_warning(self, message: str) -> None:
        self.warn(f"Security: {message}", LogContext(action="SECURITY"))

    def log_network_request(
        self,
        method: str,
        url: str,
        status: Optional[int] = None,
        duration: Optional[int] = None,
    ) -> None:
        self.debug(
            f"Network: {method} {url} {status if status is not None else ''}".rstrip(),
            LogContext(action="NETWORK", page_url=url, duration=duration),
        )

    def log_screenshot_taken(self, name: str, path: str) -> None:
        self.info(f"Screenshot taken: {name}", LogContext(action="SCREENSHOT", page_url=path))

    def log_video_recorded(self, name: str, path: str) -> None:
        self.info(f"Video recorded: {name}", LogContext(action="VIDEO", page_url=path))

    def log_configuration(self, summary: Mapping[str, Any]) -> None:
        """Log that configuration is loaded, pointing at the base URL."""
        self.info("Configuration loaded", LogContext(action="CONFIG", page_url=summary.get("base_url")))

    def log_environment_info(self, summary: Mapping[str, Any]) -> None:
        """Log the run-relevant environment flags, one line each."""
        ctx = LogContext(action="ENV")
        self.info(f"Environment: {summary.get('environment')}", ctx)
        self.info(f"CI Mode: {summary.get('is_ci')}", ctx)
        self.info(f"Headless: {summary.get('headless')}", ctx)
        self.info(f"Parallel: {summary.get('parallel')}", ctx)
        self.info(f"Workers: {summary.get('workers')}", ctx)


def get_logger() -> StructuredLogger:
    """Return the shared structured logger."""
    return StructuredLogger.get_instance()


__all__ = [
    "LogLevel",
    "LogContext",
    "StructuredLogger",
    "get_logger",
    "init_logger",
    "parse_log_level",
]
