"""
================================================================================
User Data Generator Page Object (Async / Playwright)
================================================================================

Tool at /tools/user-data. Generates fake user profiles; each profile card
renders its fields as "Label: Value" paragraphs.

================================================================================
"""

from __future__ import annotations

from typing import Dict, List

import allure

from testsuites.ui_testing.framework.page_base import BasePage


EXPECTED_USER_FIELDS = (
    "Full Name",
    "Username",
    "Job Title",
    "Phone",
    "Email",
    "Country",
    "State",
    "City",
    "Address",
    "Zip Code",
)


def parse_user_field(text: str):
    """
    Split a "Label: Value" paragraph.

    Returns (label, value), or None when there is no label before the colon.
    """
    label, sep, value = text.partition(":")
    if not sep or not label.strip():
        return None
    return label.strip(), value.strip()


class UserDataPage(BasePage):
    """User data generator page object (async)."""

    URL_PATH = "/tools/user-data"
    LOAD_STATE = "networkidle"

    # Regeneration has no completion signal; give the cards time to rerender
    GENERATION_SETTLE_MS = 2000

    # =========================================================================
    # Elements
    # =========================================================================

    @property
    def number_of_users_input(self):
        return self.page.locator('input[id="numUsers"]')

    @property
    def language_select(self):
        return self.page.locator('select[id="language"]')

    @property
    def regenerate_button(self):
        return self.page.locator('button:has-text("Regenerate Data")')

    @property
    def country_select(self):
        return self.page.locator("select").nth(3)

    @property
    def state_select(self):
        return self.page.locator("select").nth(1)

    @property
    def city_select(self):
        return self.page.locator("select").nth(2)

    @property
    def user_cards(self):
        return self.page.locator("main main > div:last-child > div")

    @property
    def user_avatars(self):
        return self.page.locator('img[alt="User Avatar"]')

    @property
    def download_avatar_buttons(self):
        return self.page.locator('button:has-text("Download Avatar")')

    # =========================================================================
    # Settings
    # =========================================================================

    async def get_tool_title(self) -> str:
        return await self.get_page_title()

    @allure.step("Set number of users: {count}")
    async def set_number_of_users(self, count: int) -> None:
        await self._fill(self.number_of_users_input, str(count))

    async def get_number_of_users(self) -> int:
        return int(await self._input_value(self.number_of_users_input))

    @allure.step("Set language: {language}")
    async def set_language(self, language: str) -> None:
        await self._select(self.language_select, language)

    async def get_current_language(self) -> str:
        return await self._input_value(self.language_select)

    async def select_country(self, country: str) -> None:
        await self._select(self.country_select, country)

    async def select_state(self, state: str) -> None:
        await self._select(self.state_select, state)

    async def select_city(self, city: str) -> None:
        await self._select(self.city_select, city)

    async def is_location_selection_working(self) -> bool:
        # More than the placeholder option
        return await self.country_select.locator("option").count() > 1

    @allure.step("Regenerate user data")
    async def regenerate_data(self) -> None:
        await self._click(self.regenerate_button)
        await self.page.wait_for_timeout(self.GENERATION_SETTLE_MS)

    # =========================================================================
    # Generated Profiles
    # =========================================================================

    async def get_number_of_user_cards(self) -> int:
        return await self.user_cards.count()

    async def get_user_data(self, card_index: int = 0) -> Dict[str, str]:
        """Read one profile card into a {label: value} dict."""
        fields = self.user_cards.nth(card_index).locator("> div")
        user_data: Dict[str, str] = {}

        for i in range(await fields.count()):
            paragraph = fields.nth(i).locator("p")
            if await paragraph.count() == 0:
                continue
            parsed = parse_user_field(await paragraph.first.text_content() or "")
            if parsed:
                label, value = parsed
                user_data[label] = value

        return user_data

    async def get_all_user_data(self) -> List[Dict[str, str]]:
        return [
            await self.get_user_data(i)
            for i in range(await self.get_number_of_user_cards())
        ]

    @allure.step("Verify generated data structure")
    async def verify_generated_data_structure(self) -> bool:
        user_data = await self.get_user_data(0)
        missing = [field for field in EXPECTED_USER_FIELDS if field not in user_data]
        if missing:
            self.log.warn(f"User card is missing fields: {', '.join(missing)}")
        return not missing

    async def download_avatar(self, card_index: int = 0) -> None:
        await self._click(self.download_avatar_buttons.nth(card_index))

    async def is_avatar_download_available(self, card_index: int = 0) -> bool:
        return await self._is_enabled(self.download_avatar_buttons.nth(card_index))
