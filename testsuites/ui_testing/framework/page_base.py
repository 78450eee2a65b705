"""
================================================================================
Base Page Object
================================================================================

Foundation class for Page Object Model implementation.

Provides:
    - Navigation and load waiting
    - Common reads (title, URL, main content)
    - Retry-wrapped field interactions via ElementActions
    - Screenshot and failure capture

Page objects hold no cached values: every getter reads the live page.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import allure
from playwright.async_api import Locator, Page

from onlytests_tools.common.environment import Environment
from onlytests_tools.common.logger import StructuredLogger

from .element_actions import ElementActions, VisibilityResult


class BasePage:
    """
    Base class for all page objects.

    Subclasses set URL_PATH and, where the page needs it, override
    `wait_for_page_load`.

    Usage:
        class AboutPage(BasePage):
            URL_PATH = "/about"

            async def get_sections(self) -> List[str]:
                return await self._all_texts(self.page.locator("h2"))
    """

    # Override in subclasses
    URL_PATH: str = "/"
    LOAD_STATE: str = "domcontentloaded"

    MAIN_CONTENT_SELECTOR = "main, .main, #main, .content, #content"
    TITLE_SELECTOR = "h1"
    ERROR_SELECTOR = ".error-message"

    # Advisory wait used by wait_for_page_load
    LOAD_WAIT_TIMEOUT = 10000

    def __init__(
        self,
        page: Page,
        base_url: str = "",
        environment: Optional[Environment] = None,
        log: Optional[StructuredLogger] = None,
        actions: Optional[ElementActions] = None,
    ):
        """
        Initialize page object.

        Args:
            page: Playwright Page object
            base_url: Application base URL (defaults to the configured one)
            environment: Configuration store
            log: Structured logger
            actions: Interaction primitives bound to `page`
        """
        self.page = page
        self.env = environment or Environment.get_instance()
        self.log = log or StructuredLogger.get_instance()
        self.base_url = (base_url or self.env.get_base_url()).rstrip("/")
        self.actions = actions or ElementActions(page, environment=self.env, log=self.log)

    @property
    def url(self) -> str:
        """Get full page URL."""
        return f"{self.base_url}{self.URL_PATH}"

    # =========================================================================
    # Common Elements
    # =========================================================================

    @property
    def main_content(self) -> Locator:
        return self.page.locator(self.MAIN_CONTENT_SELECTOR).first

    @property
    def page_title(self) -> Locator:
        return self.page.locator(self.TITLE_SELECTOR).first

    @property
    def error_messages(self) -> Locator:
        return self.page.locator(self.ERROR_SELECTOR)

    # =========================================================================
    # Navigation
    # =========================================================================

    async def navigate(self) -> None:
        """Navigate to this page and wait for it to load."""
        with allure.step(f"Navigate to {self.URL_PATH}"):
            await self.actions.navigate_to(self.url, wait_until=self.LOAD_STATE)
            await self.wait_for_page_load()

    async def navigate_to(self, path: str) -> None:
        """Navigate to a path relative to the base URL."""
        await self.actions.navigate_to(f"{self.base_url}{path}")

    async def wait_for_page_load(self) -> None:
        """
        Wait for the load state, then give the title a chance to render.

        The title wait is advisory: some pages render their heading late or
        keep it hidden, which is not a load failure.
        """
        await self.wait_for_load_state(self.LOAD_STATE)
        await self._observe(self.page_title, self.LOAD_WAIT_TIMEOUT)

    async def wait_for_load_state(self, state: str = "networkidle") -> None:
        await self.actions.wait_for_page_load(state)

    # =========================================================================
    # Reads
    # =========================================================================

    async def get_page_title(self) -> str:
        return await self.page_title.text_content() or ""

    async def get_current_url(self) -> str:
        return self.page.url

    async def get_page_content(self) -> str:
        return await self.main_content.text_content() or ""

    async def is_content_visible(self) -> bool:
        return await self.main_content.count() > 0

    async def get_element_text(self, selector: str) -> str:
        return await self.page.locator(selector).first.text_content() or ""

    async def element_exists(self, selector: str) -> bool:
        """Immediate presence check (no waiting)."""
        return await self.page.locator(selector).count() > 0

    # =========================================================================
    # Interaction Helpers
    # =========================================================================

    async def _observe(self, locator: Locator, timeout: Optional[int] = None) -> VisibilityResult:
        return await self.actions.observe_element(locator, timeout)

    async def _click(self, locator: Locator) -> None:
        await self.actions.safe_click(locator)

    async def _fill(self, locator: Locator, value: str) -> None:
        await self.actions.safe_fill(locator, value)

    async def _select(self, locator: Locator, value: str) -> None:
        await locator.select_option(value, timeout=self.env.get_timeout())

    async def _input_value(self, locator: Locator) -> str:
        return await locator.input_value(timeout=self.env.get_timeout())

    async def _is_enabled(self, locator: Locator) -> bool:
        return await locator.is_enabled(timeout=self.env.get_timeout())

    async def _all_texts(self, locator: Locator) -> List[str]:
        return await locator.all_text_contents()

    # =========================================================================
    # Screenshot and Debug Utilities
    # =========================================================================

    async def screenshot(self, name: str, full_page: bool = True) -> Path:
        return await self.actions.take_screenshot(name, full_page=full_page)

    async def capture_failure(self, test_name: str) -> None:
        """
        Capture debugging information on test failure.

        Saves:
            - Screenshot
            - Current URL
        """
        with allure.step("Capture failure details"):
            await self.screenshot(f"failure_{test_name}")
            allure.attach(
                self.page.url,
                name="Current URL",
                attachment_type=allure.attachment_type.TEXT,
            )


__all__ = [
    "BasePage",
]
