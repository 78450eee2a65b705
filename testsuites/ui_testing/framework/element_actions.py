# ================================================================================
# Element Actions Module
# ================================================================================
#
# Retry-wrapped interaction primitives used by every page object.
#
# Two kinds of operations live here and must not be confused:
#
#   Required actions   safe_click / safe_fill / wait_for_element /
#                      wait_for_network_idle. Failure (after retries, where
#                      they apply) raises to the caller.
#   Advisory waits     observe_element / element_exists. A timeout is an
#                      answer (NOT_OBSERVED / False), never an error.
#
# All timeouts are milliseconds and default to the configured global timeout.
#
# ================================================================================

from __future__ import annotations

import asyncio
import re
import time
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, Pattern, Union

import allure
from playwright.async_api import Locator, Page, expect
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from onlytests_tools.common.environment import Environment
from onlytests_tools.common.logger import LogContext, StructuredLogger
from onlytests_tools.common.suite_bootstrap import RESULTS_DIR

from .retry import InteractionTimeoutError, RetryPolicy, run_with_retry


Target = Union[str, Locator]
UrlPattern = Union[str, Pattern[str]]

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BACKOFF_MS = 1000
SCREENSHOT_DIR = RESULTS_DIR / "screenshots"


class VisibilityResult(Enum):
    """Answer of an advisory visibility wait."""

    OBSERVED = "observed"
    NOT_OBSERVED = "not_observed"

    @property
    def observed(self) -> bool:
        return self is VisibilityResult.OBSERVED


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


def _url_matches(url: str, pattern: UrlPattern) -> bool:
    if isinstance(pattern, str):
        return pattern in url
    return pattern.search(url) is not None


class ElementActions:
    """
    Interaction primitives bound to one Playwright page.

    Environment and logger are injected; when omitted the shared instances
    are used.

    Example:
        actions = ElementActions(page)
        await actions.safe_fill("#numUsers", "5")
        await actions.safe_click("button:has-text('Regenerate Data')")
        if not (await actions.observe_element("h1")).observed:
            ...
    """

    def __init__(
        self,
        page: Page,
        environment: Optional[Environment] = None,
        log: Optional[StructuredLogger] = None,
        backoff_ms: int = DEFAULT_BACKOFF_MS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        screenshot_dir: Path = SCREENSHOT_DIR,
    ):
        """
        Args:
            page: Playwright Page object
            environment: Configuration store (global timeout)
            log: Structured logger
            backoff_ms: Pause between click/fill attempts in milliseconds
            sleep: Awaitable sleep, replaced in unit tests
            screenshot_dir: Where take_screenshot writes files
        """
        self.page = page
        self.env = environment or Environment.get_instance()
        self.log = log or StructuredLogger.get_instance()
        self.backoff_ms = backoff_ms
        self._sleep = sleep
        self.screenshot_dir = Path(screenshot_dir)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _get_locator(self, target: Target) -> Locator:
        """Convert a selector to a Locator; string selectors act on the first match."""
        if isinstance(target, str):
            return self.page.locator(target).first
        return target

    @staticmethod
    def _describe(target: Target) -> str:
        return target if isinstance(target, str) else str(target)

    def _timeout(self, timeout: Optional[int]) -> int:
        return timeout if timeout is not None else self.env.get_timeout()

    def _policy(self, max_attempts: int) -> RetryPolicy:
        return RetryPolicy(max_attempts=max_attempts, backoff_ms=self.backoff_ms)

    # =========================================================================
    # Required Actions (retried)
    # =========================================================================

    async def safe_click(
        self,
        target: Target,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        timeout: Optional[int] = None,
    ) -> None:
        """
        Click with bounded retry.

        Raises:
            InteractionExhaustedError: When every attempt failed
        """
        description = self._describe(target)
        timeout = self._timeout(timeout)

        async def attempt() -> None:
            await self._get_locator(target).click(timeout=timeout)

        with allure.step(f"Click: {description}"):
            outcome = await run_with_retry(
                attempt,
                self._policy(max_attempts),
                label="click",
                target=description,
                log=self.log,
                sleep=self._sleep,
            )
            outcome.unwrap()

    async def safe_fill(
        self,
        target: Target,
        value: str,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        timeout: Optional[int] = None,
    ) -> None:
        """
        Fill an input with bounded retry.

        Raises:
            InteractionExhaustedError: When every attempt failed
        """
        description = self._describe(target)
        timeout = self._timeout(timeout)

        async def attempt() -> None:
            await self._get_locator(target).fill(value, timeout=timeout)

        with allure.step(f"Fill {description}: {value[:50]}"):
            outcome = await run_with_retry(
                attempt,
                self._policy(max_attempts),
                label="fill",
                target=description,
                log=self.log,
                sleep=self._sleep,
            )
            outcome.unwrap()

    # =========================================================================
    # Waits
    # =========================================================================

    async def wait_for_element(self, target: Target, timeout: Optional[int] = None) -> Locator:
        """
        Strict wait: the target must become visible.

        Returns:
            The resolved Locator

        Raises:
            InteractionTimeoutError: If it is not visible within the timeout
        """
        description = self._describe(target)
        timeout = self._timeout(timeout)
        locator = self._get_locator(target)

        started = time.perf_counter()
        try:
            await locator.wait_for(state="visible", timeout=timeout)
        except PlaywrightTimeoutError as e:
            self.log.log_element_interaction(description, "waitForElement", False)
            raise InteractionTimeoutError(f"{description} not visible within {timeout}ms", timeout) from e
        except Exception:
            self.log.log_element_interaction(description, "waitForElement", False)
            raise

        self.log.log_element_interaction(description, "waitForElement", True)
        self.log.log_performance_metrics("waitForElement", _elapsed_ms(started))
        return locator

    async def observe_element(self, target: Target, timeout: Optional[int] = None) -> VisibilityResult:
        """
        Advisory wait: report whether the target became visible.

        A timeout yields NOT_OBSERVED; the element may still be present but
        hidden. Callers that need visibility must use wait_for_element.
        """
        description = self._describe(target)
        timeout = self._timeout(timeout)

        try:
            await self._get_locator(target).wait_for(state="visible", timeout=timeout)
        except PlaywrightTimeoutError:
            self.log.debug(f"Not visible within {timeout}ms: {description}", LogContext(action="OBSERVE"))
            return VisibilityResult.NOT_OBSERVED

        return VisibilityResult.OBSERVED

    async def wait_for_network_idle(self, timeout: Optional[int] = None) -> None:
        """
        Wait until the page reports network idle.

        Raises:
            InteractionTimeoutError: On timeout
        """
        timeout = self._timeout(timeout)
        started = time.perf_counter()
        try:
            await self.page.wait_for_load_state("networkidle", timeout=timeout)
        except PlaywrightTimeoutError as e:
            self.log.error("Failed to wait for network idle", LogContext(action="NETWORK_IDLE", error=e))
            raise InteractionTimeoutError(f"Network not idle within {timeout}ms", timeout) from e
        except Exception as e:
            self.log.error("Failed to wait for network idle", LogContext(action="NETWORK_IDLE", error=e))
            raise

        self.log.log_performance_metrics("waitForNetworkIdle", _elapsed_ms(started))

    async def wait_for_page_load(self, state: str = "networkidle", timeout: Optional[int] = None) -> None:
        """Wait for a load state ('load', 'domcontentloaded', 'networkidle')."""
        timeout = self._timeout(timeout)
        started = time.perf_counter()
        try:
            await self.page.wait_for_load_state(state, timeout=timeout)
        except Exception as e:
            self.log.error("Failed to wait for page load", LogContext(action="PAGE_LOAD", error=e))
            raise

        self.log.log_performance_metrics("waitForPageLoad", _elapsed_ms(started))

    async def _wait_for_network_event(
        self,
        event: str,
        url_pattern: UrlPattern,
        timeout: Optional[int],
        label: str,
    ) -> Any:
        timeout = self._timeout(timeout)
        pattern_text = url_pattern if isinstance(url_pattern, str) else url_pattern.pattern

        started = time.perf_counter()
        try:
            result = await self.page.wait_for_event(
                event,
                predicate=lambda item: _url_matches(item.url, url_pattern),
                timeout=timeout,
            )
        except PlaywrightTimeoutError as e:
            self.log.error(f"Failed to wait for {event}: {pattern_text}", LogContext(action=label, error=e))
            raise InteractionTimeoutError(f"No {event} matching {pattern_text} within {timeout}ms", timeout) from e

        self.log.log_network_request(label, pattern_text, duration=_elapsed_ms(started))
        return result

    async def wait_for_request(self, url_pattern: UrlPattern, timeout: Optional[int] = None) -> Any:
        """Wait for a request whose URL contains (str) or matches (regex) the pattern."""
        return await self._wait_for_network_event("request", url_pattern, timeout, "WAIT_REQUEST")

    async def wait_for_response(self, url_pattern: UrlPattern, timeout: Optional[int] = None) -> Any:
        """Wait for a response whose URL contains (str) or matches (regex) the pattern."""
        return await self._wait_for_network_event("response", url_pattern, timeout, "WAIT_RESPONSE")

    # =========================================================================
    # Reads and Navigation
    # =========================================================================

    async def navigate_to(self, url: str, wait_until: str = "load") -> None:
        started = time.perf_counter()
        try:
            with allure.step(f"Navigate to {url}"):
                await self.page.goto(url, wait_until=wait_until, timeout=self.env.get_timeout())
        except Exception as e:
            self.log.error(f"Failed to navigate to: {url}", LogContext(action="NAVIGATE", page_url=url, error=e))
            raise

        duration = _elapsed_ms(started)
        self.log.log_page_action("navigate", url, duration)
        self.log.log_performance_metrics("navigate", duration)

    async def element_exists(self, selector: Target, timeout: int = 5000) -> bool:
        """Advisory existence check; never raises on timeout."""
        result = await self.observe_element(selector, timeout)
        self.log.log_element_interaction(self._describe(selector), "exists", result.observed)
        return result.observed

    async def get_element_text(self, target: Target, timeout: Optional[int] = None) -> str:
        description = self._describe(target)
        try:
            locator = await self.wait_for_element(target, timeout)
            text = await locator.text_content() or ""
        except Exception:
            self.log.log_element_interaction(description, "getText", False)
            raise

        self.log.log_element_interaction(description, "getText", True)
        return text

    async def take_screenshot(self, name: str, full_page: bool = True, attach_to_allure: bool = True) -> Path:
        """
        Save a timestamped screenshot and optionally attach it to Allure.

        Returns:
            Path to the saved file
        """
        self.screenshot_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%dT%H%M%S%f")
        path = self.screenshot_dir / f"{name}-{timestamp}.png"

        try:
            await self.page.screenshot(path=str(path), full_page=full_page)
        except Exception as e:
            self.log.error("Failed to take screenshot", LogContext(action="SCREENSHOT", error=e))
            raise

        if attach_to_allure:
            with open(path, "rb") as f:
                allure.attach(f.read(), name=name, attachment_type=allure.attachment_type.PNG)

        self.log.log_screenshot_taken(name, str(path))
        return path

    # =========================================================================
    # Assertions
    # =========================================================================

    async def assert_element_visible(self, target: Target) -> None:
        description = self._describe(target)
        try:
            await expect(self._get_locator(target)).to_be_visible(timeout=self.env.get_timeout())
        except AssertionError:
            self.log.log_element_interaction(description, "assertVisible", False)
            raise
        self.log.log_element_interaction(description, "assertVisible", True)

    async def assert_element_has_text(self, target: Target, text: str) -> None:
        description = self._describe(target)
        try:
            await expect(self._get_locator(target)).to_have_text(text, timeout=self.env.get_timeout())
        except AssertionError:
            self.log.log_element_interaction(description, "assertHasText", False)
            raise
        self.log.log_element_interaction(description, "assertHasText", True)

    async def assert_element_contains_text(self, target: Target, text: str) -> None:
        description = self._describe(target)
        try:
            await expect(self._get_locator(target)).to_contain_text(text, timeout=self.env.get_timeout())
        except AssertionError:
            self.log.log_element_interaction(description, "assertContainsText", False)
            raise
        self.log.log_element_interaction(description, "assertContainsText", True)

    async def assert_url_contains(self, path: str) -> None:
        try:
            await expect(self.page).to_have_url(re.compile(re.escape(path)), timeout=self.env.get_timeout())
        except AssertionError as e:
            self.log.error(f"URL assertion failed: {path}", LogContext(action="URL_ASSERT", error=e))
            raise
        self.log.debug(f"URL assertion passed: {path}", LogContext(action="URL_ASSERT"))


__all__ = [
    "DEFAULT_BACKOFF_MS",
    "DEFAULT_MAX_ATTEMPTS",
    "ElementActions",
    "Target",
    "VisibilityResult",
]
