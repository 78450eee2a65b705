"""
================================================================================
About Page UI Tests (Async / Playwright)
================================================================================
"""

import allure
import pytest

from testsuites.ui_testing.pages.about_page import AboutPage


pytestmark = pytest.mark.asyncio(loop_scope="session")


@allure.epic("UI Testing")
@allure.feature("About Page")
class TestAboutPage:
    """About page UI test suite (async)."""

    @allure.title("About page loads")
    @allure.severity(allure.severity_level.CRITICAL)
    @pytest.mark.P1
    @pytest.mark.smoke
    async def test_about_page_loaded(self, about_page: AboutPage):
        await about_page.navigate()

        assert await about_page.verify_about_page_loaded()

    @allure.title("About page has content and sections")
    @pytest.mark.P2
    async def test_about_content(self, about_page: AboutPage):
        await about_page.navigate()

        assert await about_page.get_page_content()
        sections = await about_page.get_about_sections()
        if sections:
            assert await about_page.has_section(sections[0].strip())

    @allure.title("About page links back to home")
    @pytest.mark.P2
    @pytest.mark.navigation
    async def test_back_to_home(self, about_page: AboutPage):
        await about_page.navigate()
        await about_page.navigate_to_home()

        url = await about_page.get_current_url()
        assert "/about" not in url
