"""
================================================================================
Environment Configuration
================================================================================

Runtime settings for the UI suite, resolved from a named profile.

Configuration hierarchy (highest to lowest priority):
    1. Environment variables (TIMEOUT, WORKERS, <PROFILE>_BASE_URL, ...)
    2. YAML profile file (config/environments.yaml)
    3. Built-in profile defaults

The profile is selected by ENVIRONMENT (default: local). A `.env` file in the
working directory is loaded first; variables already set in the process win.

Usage:
    >>> env = Environment.get_instance()
    >>> env.get_base_url()
    'http://localhost:3000'
    >>> env.update_config(workers=2)
    >>> env.reset_config()

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlparse

import yaml
from dotenv import find_dotenv, load_dotenv

from .logger import LogContext, StructuredLogger


DEFAULT_PROFILE = "local"
DEFAULT_PROFILES_PATH = Path(__file__).parent.parent.parent / "config" / "environments.yaml"

TIMEOUT_RANGE = (1000, 300000)
RETRIES_RANGE = (0, 10)
WORKERS_RANGE = (1, 10)

# Used when the profile file is missing or does not define a profile
BUILTIN_PROFILES: Dict[str, Dict[str, Any]] = {
    "local": {
        "base_url": "http://localhost:3000",
        "api_url": "http://localhost:3000/api",
        "timeout_ms": 30000,
        "retries": 2,
        "workers": 4,
    },
    "prod": {
        "base_url": "https://onlytests.io",
        "api_url": "https://onlytests.io/api",
        "timeout_ms": 30000,
        "retries": 2,
        "workers": 1,
    },
}


class ConfigurationError(Exception):
    """Raised when configuration cannot be loaded or fails validation."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause


@dataclass(frozen=True)
class EnvironmentConfig:
    """Resolved settings for one run. Timeouts are in milliseconds."""

    base_url: str
    api_url: str
    timeout_ms: int = 30000
    retries: int = 2
    headless: bool = True
    screenshot_on_failure: bool = True
    video_on_failure: bool = True
    trace_on_failure: bool = True
    parallel: bool = True
    workers: int = 4

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)


def is_absolute_url(value: str) -> bool:
    """True for http(s) URLs with a host."""
    if not isinstance(value, str):
        return False
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def validate_config(config: EnvironmentConfig) -> None:
    """
    Check every invariant of an EnvironmentConfig.

    Raises:
        ConfigurationError: On the first violated invariant
    """
    if not is_absolute_url(config.base_url):
        raise ConfigurationError(f"Base URL must be an absolute http(s) URL, got: {config.base_url!r}")
    if not is_absolute_url(config.api_url):
        raise ConfigurationError(f"API URL must be an absolute http(s) URL, got: {config.api_url!r}")

    for name in ("timeout_ms", "retries", "workers"):
        value = getattr(config, name)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigurationError(f"{name} must be an integer, got: {value!r}")

    low, high = TIMEOUT_RANGE
    if not low <= config.timeout_ms <= high:
        raise ConfigurationError(f"Timeout must be between {low}ms and {high}ms, got: {config.timeout_ms}")

    low, high = RETRIES_RANGE
    if not low <= config.retries <= high:
        raise ConfigurationError(f"Retries must be between {low} and {high}, got: {config.retries}")

    low, high = WORKERS_RANGE
    if not low <= config.workers <= high:
        raise ConfigurationError(f"Workers must be between {low} and {high}, got: {config.workers}")


def _flag(environ: Mapping[str, str], key: str) -> Optional[bool]:
    # Flags default to on; only the literal "false" turns them off
    value = environ.get(key)
    if value is None:
        return None
    return value.strip().lower() != "false"


def _int(environ: Mapping[str, str], key: str) -> Optional[int]:
    value = environ.get(key)
    if value is None or value.strip() == "":
        return None
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(f"{key} must be an integer, got: {value!r}", cause=e) from e


class Environment:
    """
    Environment configuration store.

    One shared instance per process is available through `get_instance()`.
    Constructing `Environment(...)` directly gives an isolated store, which is
    what unit tests and explicitly wired components use.

    Args:
        environ: Variable mapping to read (defaults to os.environ)
        profiles_path: YAML file with profile defaults
        log: Logger for load/update messages
    """

    _instance: Optional["Environment"] = None

    def __init__(
        self,
        environ: Optional[Mapping[str, str]] = None,
        profiles_path: Optional[Path] = None,
        log: Optional[StructuredLogger] = None,
    ) -> None:
        if environ is None:
            load_dotenv(find_dotenv(usecwd=True), override=False)
            environ = os.environ
        self._environ = environ

        profiles_file = profiles_path or environ.get("ENV_PROFILES_FILE")
        self._profiles_path = Path(profiles_file) if profiles_file else DEFAULT_PROFILES_PATH
        self._log = log or StructuredLogger.get_instance()
        self._config = self.load_config()

    @classmethod
    def get_instance(cls) -> "Environment":
        """Return the process-wide store, loading it on first access."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Forget the process-wide store. The next access reloads it."""
        cls._instance = None

    # =========================================================================
    # Loading
    # =========================================================================

    def _load_profiles(self) -> Dict[str, Dict[str, Any]]:
        profiles = {name: dict(values) for name, values in BUILTIN_PROFILES.items()}
        if not self._profiles_path.exists():
            return profiles

        try:
            with open(self._profiles_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Invalid profile file {self._profiles_path}: {e}", cause=e) from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Invalid profile file {self._profiles_path}: top level must be a mapping")
        file_profiles = data.get("profiles") or {}
        if not isinstance(file_profiles, dict):
            raise ConfigurationError(f"Invalid profile file {self._profiles_path}: 'profiles' must be a mapping")

        for name, values in file_profiles.items():
            values = values or {}
            if not isinstance(values, dict):
                raise ConfigurationError(
                    f"Invalid profile file {self._profiles_path}: profile '{name}' must be a mapping"
                )
            profiles.setdefault(name, {}).update(values)
        return profiles

    def _resolve(self, profile: str) -> EnvironmentConfig:
        profiles = self._load_profiles()
        if profile not in profiles:
            self._log.warn(
                f"Unknown environment '{profile}', falling back to '{DEFAULT_PROFILE}'",
                LogContext(action="CONFIG"),
            )
        defaults = profiles.get(profile, profiles[DEFAULT_PROFILE])

        prefix = profile.upper()
        environ = self._environ
        overrides = {
            "base_url": environ.get(f"{prefix}_BASE_URL"),
            "api_url": environ.get(f"{prefix}_API_URL"),
            "timeout_ms": _int(environ, "TIMEOUT"),
            "retries": _int(environ, "RETRIES"),
            "workers": _int(environ, "WORKERS"),
            "headless": _flag(environ, "HEADLESS"),
            "screenshot_on_failure": _flag(environ, "SCREENSHOT_ON_FAILURE"),
            "video_on_failure": _flag(environ, "VIDEO_ON_FAILURE"),
            "trace_on_failure": _flag(environ, "TRACE_ON_FAILURE"),
            "parallel": _flag(environ, "PARALLEL"),
        }

        values = dict(defaults)
        values.update({k: v for k, v in overrides.items() if v is not None})
        try:
            return EnvironmentConfig(**values)
        except TypeError as e:
            raise ConfigurationError(f"Invalid keys in profile '{profile}': {e}", cause=e) from e

    def load_config(self) -> EnvironmentConfig:
        """
        Resolve, validate and return the configuration for the active profile.

        Raises:
            ConfigurationError: If any value is missing, malformed or out of range
        """
        profile = self.get_environment()
        self._log.info(f"Loading configuration for environment: {profile}", LogContext(action="CONFIG"))

        try:
            config = self._resolve(profile)
            validate_config(config)
        except ConfigurationError as e:
            self._log.error("Failed to load configuration", LogContext(action="CONFIG", error=e))
            raise ConfigurationError(f"Configuration loading failed: {e}", cause=e.cause or e) from e

        self._log.info("Configuration loaded successfully", LogContext(action="CONFIG", page_url=config.base_url))
        return config

    def update_config(self, **updates: Any) -> None:
        """
        Override fields of the live configuration (test-time use).

        The merged result must still be valid; otherwise nothing changes.
        """
        try:
            merged = dataclasses.replace(self._config, **updates)
        except TypeError as e:
            raise ConfigurationError(f"Unknown configuration fields: {sorted(updates)}", cause=e) from e
        validate_config(merged)

        self._config = merged
        self._log.info(f"Configuration updated: {updates}", LogContext(action="CONFIG"))

    def reset_config(self) -> None:
        """Reload from source, discarding any update_config overrides."""
        self._config = self.load_config()
        self._log.info("Configuration reset to original values", LogContext(action="CONFIG"))

    # =========================================================================
    # Accessors
    # =========================================================================

    def get_config(self) -> EnvironmentConfig:
        return self._config

    def get_base_url(self) -> str:
        return self._config.base_url

    def get_api_url(self) -> str:
        return self._config.api_url

    def get_timeout(self) -> int:
        return self._config.timeout_ms

    def get_retries(self) -> int:
        return self._config.retries

    def is_headless(self) -> bool:
        return self._config.headless

    def should_take_screenshot_on_failure(self) -> bool:
        return self._config.screenshot_on_failure

    def should_record_video_on_failure(self) -> bool:
        return self._config.video_on_failure

    def should_trace_on_failure(self) -> bool:
        return self._config.trace_on_failure

    def is_parallel(self) -> bool:
        return self._config.parallel

    def get_workers(self) -> int:
        return self._config.workers

    def get_environment(self) -> str:
        return self._environ.get("ENVIRONMENT") or DEFAULT_PROFILE

    def is_production(self) -> bool:
        return self.get_environment() == "prod"

    def is_local(self) -> bool:
        return self.get_environment() == "local"

    def is_ci(self) -> bool:
        return self._environ.get("CI") == "true"

    @property
    def environ(self) -> Mapping[str, str]:
        """The variable mapping this store reads from."""
        return self._environ


def get_environment() -> Environment:
    """Return the shared environment store."""
    return Environment.get_instance()


__all__ = [
    "ConfigurationError",
    "Environment",
    "EnvironmentConfig",
    "get_environment",
    "is_absolute_url",
    "validate_config",
]
