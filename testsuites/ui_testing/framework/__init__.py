"""
================================================================================
UI Testing Framework
================================================================================

Playwright-based UI automation framework for the OnlyTests site.

Components:
    - retry: Bounded retry loop with typed outcomes
    - element_actions: Retry-wrapped clicks/fills, strict and advisory waits
    - page_base: Base page object for common operations
    - browser_manager: Browser lifecycle management
    - data_factory: Random inputs and static site expectations

The page factory lives in `page_factory` and is imported from there, since
it depends on the page objects.

Author: Automation Team
License: MIT
================================================================================
"""

from .retry import (
    ExhaustedFailure,
    InteractionError,
    InteractionExhaustedError,
    InteractionTimeoutError,
    RetryPolicy,
    Success,
    run_with_retry,
)
from .element_actions import ElementActions, VisibilityResult
from .page_base import BasePage
from .browser_manager import BrowserManager
from .data_factory import SITE_DATA, generate_random_email, generate_random_string

__all__ = [
    "ExhaustedFailure",
    "InteractionError",
    "InteractionExhaustedError",
    "InteractionTimeoutError",
    "RetryPolicy",
    "Success",
    "run_with_retry",
    "ElementActions",
    "VisibilityResult",
    "BasePage",
    "BrowserManager",
    "SITE_DATA",
    "generate_random_email",
    "generate_random_string",
]
