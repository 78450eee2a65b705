"""
================================================================================
Home Page Object (Async / Playwright)
================================================================================

Landing page: welcome heading, section headings and tool cards, plus
shortcuts into the tools and templates.

================================================================================
"""

from __future__ import annotations

from typing import List

import allure

from testsuites.ui_testing.framework.page_base import BasePage


MAIN_SECTIONS = ("Test Data Generation", "Utility Tools", "Templates")


class HomePage(BasePage):
    """Home page object (async)."""

    URL_PATH = ""
    EXPECTED_TITLE = "OnlyTests"

    @property
    def welcome_message(self):
        return self.page.locator("h1").first

    @property
    def home_description(self):
        return self.page.locator("p.text-lg").first

    @property
    def section_titles(self):
        return self.page.locator("h2.text-2xl")

    @property
    def card_titles(self):
        return self.page.locator(".card h3")

    async def get_welcome_message(self) -> str:
        return await self.welcome_message.text_content() or ""

    async def get_home_description(self) -> str:
        return await self.home_description.text_content() or ""

    async def get_section_titles(self) -> List[str]:
        return await self._all_texts(self.section_titles)

    async def get_card_titles(self) -> List[str]:
        return await self._all_texts(self.card_titles)

    async def is_section_visible(self, section_name: str) -> bool:
        return await self.element_exists(f'h2:has-text("{section_name}")')

    @allure.step("Verify all main sections are visible")
    async def verify_all_sections_visible(self) -> bool:
        for section in MAIN_SECTIONS:
            if not await self.is_section_visible(section):
                return False
        return True

    async def verify_welcome_message(self) -> bool:
        message = await self.get_welcome_message()
        return self.EXPECTED_TITLE.lower() in message.lower()

    # =========================================================================
    # Shortcuts
    # =========================================================================

    @allure.step("Open test data tools")
    async def navigate_to_test_data_tools(self) -> None:
        await self.navigate_to("/tools/user-data")

    @allure.step("Open utility tools")
    async def navigate_to_utility_tools(self) -> None:
        await self.navigate_to("/tools/count-tool")

    @allure.step("Open templates")
    async def navigate_to_templates(self) -> None:
        await self.navigate_to("/templates/test-cases")

    @allure.step("Open about page")
    async def navigate_to_about(self) -> None:
        await self.navigate_to("/about")

    @allure.step("Open terms page")
    async def navigate_to_terms(self) -> None:
        await self.navigate_to("/terms")
