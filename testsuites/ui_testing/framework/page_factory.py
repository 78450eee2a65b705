"""
================================================================================
Page Factory
================================================================================

Builds page objects for one browser page with a shared configuration and
logger. Fixtures create one factory per test; pages are never reused across
tests.

================================================================================
"""

from __future__ import annotations

from typing import Dict, Optional

from playwright.async_api import Page

from onlytests_tools.common.environment import Environment
from onlytests_tools.common.logger import StructuredLogger

from testsuites.ui_testing.pages import (
    AboutPage,
    HomePage,
    TestCasesPage,
    TextGeneratorPage,
    ToolsPage,
    UserDataPage,
)

from .page_base import BasePage


class PageFactory:
    """
    Creates page objects bound to the configured base URL.

    Usage:
        factory = PageFactory()
        home = factory.create_home_page(page)
        pages = factory.create_all_pages(page)
    """

    def __init__(
        self,
        environment: Optional[Environment] = None,
        log: Optional[StructuredLogger] = None,
    ):
        self.env = environment or Environment.get_instance()
        self.log = log or StructuredLogger.get_instance()

    def _create(self, page_class, page: Page):
        return page_class(
            page,
            base_url=self.env.get_base_url(),
            environment=self.env,
            log=self.log,
        )

    def create_home_page(self, page: Page) -> HomePage:
        return self._create(HomePage, page)

    def create_tools_page(self, page: Page) -> ToolsPage:
        return self._create(ToolsPage, page)

    def create_about_page(self, page: Page) -> AboutPage:
        return self._create(AboutPage, page)

    def create_user_data_page(self, page: Page) -> UserDataPage:
        return self._create(UserDataPage, page)

    def create_text_generator_page(self, page: Page) -> TextGeneratorPage:
        return self._create(TextGeneratorPage, page)

    def create_test_cases_page(self, page: Page) -> TestCasesPage:
        return self._create(TestCasesPage, page)

    def create_all_pages(self, page: Page) -> Dict[str, BasePage]:
        """All page objects for `page`, keyed by fixture name."""
        return {
            "home_page": self.create_home_page(page),
            "tools_page": self.create_tools_page(page),
            "about_page": self.create_about_page(page),
            "user_data_page": self.create_user_data_page(page),
            "text_generator_page": self.create_text_generator_page(page),
            "test_cases_page": self.create_test_cases_page(page),
        }


__all__ = [
    "PageFactory",
]
