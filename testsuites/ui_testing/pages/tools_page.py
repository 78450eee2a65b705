"""
================================================================================
Tools Page Object (Async / Playwright)
================================================================================

Generic tool page. Each tool lives under /tools/<tool-path>; this object
opens any of them and reads the common parts.

================================================================================
"""

from __future__ import annotations

import re

import allure

from testsuites.ui_testing.framework.page_base import BasePage


_TOOL_PATH = re.compile(r"/tools/(.+)$")


class ToolsPage(BasePage):
    """Tools page object (async)."""

    URL_PATH = "/tools"

    @property
    def tool_content(self):
        return self.page.locator(
            "main, .main, #main, .content, #content, [data-testid], .tool-content"
        ).first

    @allure.step("Open tool: {tool_path}")
    async def navigate_to_tool(self, tool_path: str) -> None:
        await self.actions.navigate_to(f"{self.base_url}/tools/{tool_path}", wait_until=self.LOAD_STATE)
        await self.wait_for_page_load()

    async def wait_for_page_load(self) -> None:
        await self.wait_for_load_state(self.LOAD_STATE)
        await self._observe(self.tool_content, self.LOAD_WAIT_TIMEOUT)

    async def get_tool_path(self) -> str:
        match = _TOOL_PATH.search(self.page.url)
        return match.group(1) if match else ""

    async def get_tool_title(self) -> str:
        return await self.get_page_title()

    async def is_tool_content_visible(self) -> bool:
        return await self.tool_content.count() > 0

    async def get_page_content(self) -> str:
        return await self.page.content()
