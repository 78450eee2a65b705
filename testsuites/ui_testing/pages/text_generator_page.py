"""
================================================================================
Text Generator Page Object (Async / Playwright)
================================================================================

Lorem-ipsum generator at /tools/text-generator: a number input, a
characters/words unit switch, a "count spaces" checkbox and the generated
text area.

================================================================================
"""

from __future__ import annotations

import re
from typing import Optional

import allure
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from testsuites.ui_testing.framework.page_base import BasePage


CHARACTERS = "characters"
WORDS = "words"

LOREM_WORDS = ("lorem", "ipsum", "dolor", "sit", "amet", "consectetur", "adipiscing")


def count_words(text: str) -> int:
    return len(text.split())


def matches_requested_size(text: str, number: int, unit: str, tolerance: float = 0.2) -> bool:
    """
    Whether generated text has the requested size.

    Word counts must match exactly. Character counts may differ by
    `tolerance` (relative) because the generator cuts at word boundaries.
    """
    if unit == WORDS:
        return count_words(text) == number
    if unit == CHARACTERS:
        return number * (1 - tolerance) <= len(text) <= number * (1 + tolerance)
    raise ValueError(f"Unknown unit: {unit!r}")


def looks_like_lorem(text: str) -> bool:
    """Non-empty, spaced, no runs of 3+ whitespace, and has a lorem ipsum word."""
    lowered = text.lower()
    return (
        bool(text)
        and re.search(r"\s", text) is not None
        and re.search(r"\s{3,}", text) is None
        and any(word in lowered for word in LOREM_WORDS)
    )


class TextGeneratorPage(BasePage):
    """Text generator tool page object (async)."""

    URL_PATH = "/tools/text-generator"

    # Polling budget for the text area to fill after a parameter change
    GENERATION_TIMEOUT_MS = 5000
    GENERATION_FALLBACK_MS = 1000

    DEFAULT_NUMBER = "100"
    DESCRIPTION_TEXT = "Generate custom text content with our free online text generator"

    # =========================================================================
    # Locators
    # =========================================================================

    @property
    def number_input(self):
        return self.page.get_by_role("spinbutton", name="Number:")

    @property
    def characters_radio(self):
        return self.page.get_by_role("radio", name="Characters")

    @property
    def words_radio(self):
        return self.page.get_by_role("radio", name="Words")

    @property
    def count_spaces_checkbox(self):
        return self.page.get_by_role("checkbox", name="Count spaces")

    @property
    def copy_button(self):
        return self.page.get_by_role("button", name="Copy to Clipboard")

    @property
    def generated_text_area(self):
        return self.page.get_by_role("textbox", name="Enter your text here...")

    @property
    def back_to_home_link(self):
        return self.page.get_by_role("link", name="Back to Home")

    @property
    def page_description(self):
        return self.page.get_by_text(self.DESCRIPTION_TEXT)

    # =========================================================================
    # Parameters
    # =========================================================================

    async def set_number(self, value: int) -> None:
        await self._fill(self.number_input, str(value))

    async def get_number_value(self) -> str:
        return await self._input_value(self.number_input)

    async def select_unit(self, unit: str) -> None:
        if unit == CHARACTERS:
            await self._click(self.characters_radio)
        elif unit == WORDS:
            await self._click(self.words_radio)
        else:
            raise ValueError(f"Unknown unit: {unit!r}")

    async def toggle_count_spaces(self) -> None:
        await self._click(self.count_spaces_checkbox)

    async def is_characters_selected(self) -> bool:
        return await self.characters_radio.is_checked()

    async def is_words_selected(self) -> bool:
        return await self.words_radio.is_checked()

    async def is_count_spaces_checked(self) -> bool:
        if await self.count_spaces_checkbox.count() == 0:
            return False
        return await self.count_spaces_checkbox.is_checked()

    # =========================================================================
    # Generation
    # =========================================================================

    async def get_generated_text(self) -> str:
        return await self._input_value(self.generated_text_area)

    async def wait_for_text_generation(self) -> None:
        """Wait until the text area has content, or pause briefly if it never does."""
        try:
            await self.page.wait_for_function(
                "() => { const el = document.querySelector('textarea'); return el && el.value.length > 0; }",
                timeout=self.GENERATION_TIMEOUT_MS,
            )
        except PlaywrightTimeoutError:
            self.log.debug("Generated text did not appear, pausing instead")
            await self.page.wait_for_timeout(self.GENERATION_FALLBACK_MS)

    @allure.step("Generate {number} {unit}")
    async def generate_text(self, number: int, unit: str = CHARACTERS) -> str:
        await self.set_number(number)
        await self.select_unit(unit)
        await self.wait_for_text_generation()
        return await self.get_generated_text()

    async def copy_to_clipboard(self) -> Optional[str]:
        """Click copy and accept the confirmation dialog. Returns its message."""
        async with self.page.expect_event("dialog", timeout=self.env.get_timeout()) as dialog_info:
            await self._click(self.copy_button)
        dialog = await dialog_info.value
        message = dialog.message
        await dialog.accept()
        return message

    async def go_back_home(self) -> None:
        await self._click(self.back_to_home_link)

    # =========================================================================
    # Verification
    # =========================================================================

    async def verify_page_loaded(self) -> bool:
        for locator in (
            self.page_description,
            self.number_input,
            self.characters_radio,
            self.words_radio,
            self.copy_button,
            self.generated_text_area,
        ):
            if not (await self._observe(locator, self.LOAD_WAIT_TIMEOUT)).observed:
                return False
        return True

    async def is_default_state(self) -> bool:
        return (
            await self.get_number_value() == self.DEFAULT_NUMBER
            and await self.is_characters_selected()
            and not await self.is_words_selected()
            and bool(await self.get_generated_text())
        )
