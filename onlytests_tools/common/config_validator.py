"""
================================================================================
Configuration Validator
================================================================================

Start-up checks run before any browser is launched:

    1. Required variables are present for the active profile
    2. Values are within accepted ranges and URLs are well formed
    3. Security posture (warn only): plain HTTP against production

`validate_all()` stops at the first hard failure.

================================================================================
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, List, Mapping, Optional

from .environment import ConfigurationError, Environment, validate_config
from .logger import LogContext, StructuredLogger


# Substrings that must never appear in a summary key
_SECRET_MARKERS = ("token", "secret", "password", "key")


class ConfigValidator:
    """
    Validates the resolved environment configuration.

    Args:
        environment: Store to validate (defaults to the shared one)
        environ: Variable mapping for presence checks (defaults to the store's)
        log: Logger (defaults to the shared one)
    """

    def __init__(
        self,
        environment: Optional[Environment] = None,
        environ: Optional[Mapping[str, str]] = None,
        log: Optional[StructuredLogger] = None,
    ) -> None:
        self.env = environment or Environment.get_instance()
        self.environ = environ if environ is not None else self.env.environ
        self.log = log or StructuredLogger.get_instance()

    def required_variables(self) -> List[str]:
        prefix = self.env.get_environment().upper()
        return [f"{prefix}_BASE_URL", f"{prefix}_API_URL"]

    def validate_environment(self) -> None:
        """Fail if any required variable for the active profile is unset."""
        self.log.info("Validating environment configuration...")

        missing = [name for name in self.required_variables() if not self.environ.get(name)]
        if missing:
            message = f"Missing required environment variables: {', '.join(missing)}"
            self.log.error(message, LogContext(action="CONFIG_VALIDATION"))
            raise ConfigurationError(message)

        self.log.info("Environment configuration validation passed")

    def validate_configuration(self) -> None:
        """Fail if a value is out of range or a URL is malformed."""
        self.log.info("Validating configuration values...")
        validate_config(self.env.get_config())
        self.log.info("Configuration values validation passed")

    def validate_security(self) -> None:
        """Warn about insecure transport in production. Never raises."""
        self.log.info("Validating security configuration...")

        if self.env.is_production() and self.env.get_base_url().startswith("http://"):
            self.log.log_security_warning("Using HTTP in production environment. Consider using HTTPS.")

        self.log.info("Security configuration validation passed")

    def validate_all(self) -> None:
        try:
            self.validate_environment()
            self.validate_configuration()
            self.validate_security()
        except ConfigurationError as e:
            self.log.error("Configuration validation failed", LogContext(action="CONFIG_VALIDATION", error=e))
            raise

        self.log.info("All configuration validations passed successfully")

    def get_configuration_summary(self) -> Mapping[str, Any]:
        """
        Read-only snapshot of the resolved configuration for diagnostics.

        Secret-looking fields are never included.
        """
        summary = {"environment": self.env.get_environment()}
        summary.update(self.env.get_config().to_dict())
        summary.update(
            is_ci=self.env.is_ci(),
            is_production=self.env.is_production(),
            is_local=self.env.is_local(),
        )
        safe = {k: v for k, v in summary.items() if not any(m in k.lower() for m in _SECRET_MARKERS)}
        return MappingProxyType(safe)


__all__ = [
    "ConfigValidator",
]
