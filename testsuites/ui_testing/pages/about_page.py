"""
================================================================================
About Page Object (Async / Playwright)
================================================================================
"""

from __future__ import annotations

from typing import List

import allure

from testsuites.ui_testing.framework.page_base import BasePage


class AboutPage(BasePage):
    """About page object (async)."""

    URL_PATH = "/about"
    EXPECTED_TITLE = "About"

    @property
    def about_content(self):
        return self.page.locator("main").first

    @property
    def about_sections(self):
        return self.page.locator("h2")

    async def get_page_content(self) -> str:
        return await self.about_content.text_content() or ""

    async def get_about_sections(self) -> List[str]:
        return await self._all_texts(self.about_sections)

    async def has_section(self, section_name: str) -> bool:
        return await self.element_exists(f'h2:has-text("{section_name}")')

    @allure.step("Navigate back to home")
    async def navigate_to_home(self) -> None:
        await self.navigate_to("")

    @allure.step("Verify about page loaded")
    async def verify_about_page_loaded(self) -> bool:
        current_url = await self.get_current_url()
        title = await self.get_page_title()
        return (
            "/about" in current_url
            and self.EXPECTED_TITLE.lower() in title.lower()
            and await self.is_content_visible()
        )
