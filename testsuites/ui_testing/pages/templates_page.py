"""
================================================================================
Test Case Template Page Object (Async / Playwright)
================================================================================

Form at /templates/test-cases for drafting a test case: basic information,
steps, additional and related information, tags, and DOC/Excel export.

The form has few stable attributes, so most fields are addressed by their
position among the inputs, selects and textareas inside <main>.

================================================================================
"""

from __future__ import annotations

from typing import Dict, List, Tuple

import allure

from testsuites.ui_testing.framework.page_base import BasePage


PREDEFINED_TAGS = ("Smoke", "Regression", "Sanity", "Critical")

REQUIRED_FIELDS = (
    ("test_case_id", "Test Case ID is required"),
    ("title", "Title is required"),
    ("description", "Description is required"),
)

# field name -> (element selector, index among matches)
FORM_FIELDS: Dict[str, Tuple[str, int]] = {
    "test_case_id": ("main input", 0),
    "title": ("main input", 1),
    "test_phase": ("main input", 2),
    "test_environment": ("main input", 3),
    "test_area": ("main input", 4),
    "test_script_reference": ("main input", 5),
    "created_by": ("main input", 6),
    "requirement_id": ("main input", 9),
    "user_story_link": ("main input", 10),
    "creation_date": ('main input[type="date"]', 0),
    "last_updated": ('main input[type="date"]', 1),
    "description": ("main textarea", 0),
    "preconditions": ("main textarea", 1),
    "test_data": ("main textarea", 2),
}

SELECT_FIELDS: Dict[str, int] = {
    "priority": 0,
    "test_type": 1,
    "test_level": 2,
    "automation_status": 3,
}

# Description/preconditions/test data come before the step textareas
_STEP_TEXTAREA_OFFSET = 3


class TestCasesPage(BasePage):
    """Test case template page object (async)."""

    __test__ = False

    URL_PATH = "/templates/test-cases"

    EXPORT_SETTLE_MS = 1000

    # =========================================================================
    # Elements
    # =========================================================================

    def field(self, name: str):
        try:
            selector, index = FORM_FIELDS[name]
        except KeyError:
            raise KeyError(f"Unknown form field: {name}") from None
        return self.page.locator(selector).nth(index)

    def select(self, name: str):
        try:
            index = SELECT_FIELDS[name]
        except KeyError:
            raise KeyError(f"Unknown select field: {name}") from None
        return self.page.locator("main select").nth(index)

    @property
    def add_step_button(self):
        return self.page.locator('button:has-text("Add Step")')

    @property
    def remove_step_buttons(self):
        return self.page.locator('button:has-text("Remove Step")')

    @property
    def new_tag_input(self):
        return self.page.locator('input[placeholder="Add Tag"]')

    @property
    def add_tag_button(self):
        return self.page.locator('button:has-text("Add Tag")')

    @property
    def export_to_doc_button(self):
        return self.page.locator('button:has-text("Export to DOC")')

    @property
    def export_to_excel_button(self):
        return self.page.locator('button:has-text("Export to Excel")')

    def _step_textarea(self, step_index: int, offset: int):
        return self.page.locator("textarea").nth(step_index * 2 + _STEP_TEXTAREA_OFFSET + offset)

    # =========================================================================
    # Generic Field Access
    # =========================================================================

    async def get_template_title(self) -> str:
        return await self.get_page_title()

    async def set_field(self, name: str, value: str) -> None:
        with allure.step(f"Set {name}"):
            await self._fill(self.field(name), value)

    async def get_field(self, name: str) -> str:
        return await self._input_value(self.field(name))

    async def set_select(self, name: str, value: str) -> None:
        with allure.step(f"Select {name}: {value}"):
            await self._select(self.select(name), value)

    async def get_select(self, name: str) -> str:
        return await self._input_value(self.select(name))

    # =========================================================================
    # Basic Information
    # =========================================================================

    async def set_test_case_id(self, test_case_id: str) -> None:
        await self.set_field("test_case_id", test_case_id)

    async def get_test_case_id(self) -> str:
        return await self.get_field("test_case_id")

    async def set_title(self, title: str) -> None:
        await self.set_field("title", title)

    async def get_title(self) -> str:
        return await self.get_field("title")

    async def set_description(self, description: str) -> None:
        await self.set_field("description", description)

    async def get_description(self) -> str:
        return await self.get_field("description")

    async def set_priority(self, priority: str) -> None:
        await self.set_select("priority", priority)

    async def get_priority(self) -> str:
        return await self.get_select("priority")

    async def set_automation_status(self, status: str) -> None:
        await self.set_select("automation_status", status)

    async def get_automation_status(self) -> str:
        return await self.get_select("automation_status")

    # =========================================================================
    # Steps
    # =========================================================================

    @allure.step("Add step")
    async def add_step(self) -> None:
        await self._click(self.add_step_button)

    async def remove_step(self, step_index: int) -> None:
        if step_index < await self.remove_step_buttons.count():
            await self._click(self.remove_step_buttons.nth(step_index))

    async def get_number_of_steps(self) -> int:
        return await self.remove_step_buttons.count()

    async def set_step_description(self, step_index: int, description: str) -> None:
        await self._fill(self._step_textarea(step_index, 0), description)

    async def get_step_description(self, step_index: int) -> str:
        return await self._input_value(self._step_textarea(step_index, 0))

    async def set_step_expected_result(self, step_index: int, expected: str) -> None:
        await self._fill(self._step_textarea(step_index, 1), expected)

    async def get_step_expected_result(self, step_index: int) -> str:
        return await self._input_value(self._step_textarea(step_index, 1))

    # =========================================================================
    # Tags
    # =========================================================================

    @allure.step("Add tag: {tag}")
    async def add_tag(self, tag: str) -> None:
        await self._fill(self.new_tag_input, tag)
        await self._click(self.add_tag_button)

    async def add_predefined_tag(self, tag: str) -> None:
        await self._click(self.page.locator(f'button:has-text("{tag}")').first)

    async def remove_tag(self, tag_index: int) -> None:
        remove_buttons = self.page.locator('button:has-text("x")')
        if tag_index < await remove_buttons.count():
            await self._click(remove_buttons.nth(tag_index))

    async def get_tags(self) -> List[str]:
        """Predefined tags currently attached to the test case."""
        tags = []
        for text in await self._all_texts(self.page.locator("span")):
            cleaned = text.replace("x", "", 1).strip()
            if cleaned in PREDEFINED_TAGS:
                tags.append(cleaned)
        return tags

    # =========================================================================
    # Export
    # =========================================================================

    @allure.step("Export to DOC")
    async def export_to_doc(self) -> None:
        await self._click(self.export_to_doc_button)
        await self.page.wait_for_timeout(self.EXPORT_SETTLE_MS)

    @allure.step("Export to Excel")
    async def export_to_excel(self) -> None:
        await self._click(self.export_to_excel_button)
        await self.page.wait_for_timeout(self.EXPORT_SETTLE_MS)

    # =========================================================================
    # Validation
    # =========================================================================

    async def get_validation_errors(self) -> List[str]:
        errors = []
        for name, message in REQUIRED_FIELDS:
            if not await self.get_field(name):
                errors.append(message)
        return errors

    async def is_form_valid(self) -> bool:
        return not await self.get_validation_errors()
