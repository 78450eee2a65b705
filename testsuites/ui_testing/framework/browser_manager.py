"""
================================================================================
Browser Manager
================================================================================

Browser lifecycle management for UI automation.

Features:
    - One browser per session, one isolated context per test
    - Launch and context options driven by the environment configuration
    - Video recording and tracing when failure artifacts are enabled

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from loguru import logger
from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Page,
    Playwright,
)

from onlytests_tools.common.environment import Environment
from onlytests_tools.common.suite_bootstrap import RESULTS_DIR


SUPPORTED_BROWSERS = ("chromium", "firefox", "webkit")


class BrowserManager:
    """
    Manages the browser instance and per-test contexts.

    Usage:
        async with BrowserManager() as manager:
            context = await manager.new_context()
            page = await context.new_page()
            ...
            await manager.close_context(context, failed=True)
    """

    DEFAULT_CONTEXT_OPTIONS: Dict[str, Any] = {
        "viewport": {"width": 1920, "height": 1080},
        "ignore_https_errors": True,
    }

    def __init__(
        self,
        environment: Optional[Environment] = None,
        browser_type: Optional[str] = None,
        headless: Optional[bool] = None,
        results_dir: Path = RESULTS_DIR,
    ):
        """
        Initialize browser manager.

        Args:
            environment: Configuration store (defaults to the shared one)
            browser_type: 'chromium', 'firefox' or 'webkit' (defaults to $BROWSER)
            headless: Overrides the configured headless flag
            results_dir: Root of the artifact directories
        """
        self.env = environment or Environment.get_instance()
        self.browser_type = browser_type or self.env.environ.get("BROWSER", "chromium")
        if self.browser_type not in SUPPORTED_BROWSERS:
            raise ValueError(
                f"Unsupported browser '{self.browser_type}', "
                f"expected one of: {', '.join(SUPPORTED_BROWSERS)}"
            )
        self.headless = self.env.is_headless() if headless is None else headless
        self.results_dir = results_dir

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._contexts: List[BrowserContext] = []

    async def __aenter__(self) -> "BrowserManager":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def start(self) -> None:
        """Start Playwright and launch the browser."""
        self._playwright = await async_playwright().start()
        launcher = getattr(self._playwright, self.browser_type)
        try:
            self._browser = await launcher.launch(headless=self.headless)
        except Exception:
            await self._playwright.stop()
            self._playwright = None
            raise
        logger.debug(f"Browser started: {self.browser_type} (headless={self.headless})")

    async def close(self) -> None:
        """Close all contexts and the browser."""
        for context in list(self._contexts):
            await self.close_context(context)

        if self._browser:
            await self._browser.close()
            self._browser = None

        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

        logger.debug("Browser closed")

    async def is_reachable(self, url: str, timeout: int = 10000) -> bool:
        """Probe `url` over HTTP. Any response, even an error status, counts."""
        if not self._playwright:
            raise RuntimeError("Browser not started. Call start() first.")

        request = await self._playwright.request.new_context(ignore_https_errors=True)
        try:
            await request.get(url, timeout=timeout)
        except PlaywrightError as e:
            logger.warning(f"Site not reachable: {url} ({e})")
            return False
        finally:
            await request.dispose()
        return True

    def context_options(self) -> Dict[str, Any]:
        """Context options for the current configuration."""
        options = {
            **self.DEFAULT_CONTEXT_OPTIONS,
            "base_url": self.env.get_base_url(),
        }
        if self.env.should_record_video_on_failure():
            options["record_video_dir"] = str(self.results_dir / "videos")
        return options

    async def new_context(self, **options: Any) -> BrowserContext:
        """
        Create an isolated browser context.

        Tracing starts immediately when traces are kept for failures.
        """
        if not self._browser:
            raise RuntimeError("Browser not started. Call start() first.")

        context = await self._browser.new_context(**{**self.context_options(), **options})
        context.set_default_timeout(self.env.get_timeout())
        if self.env.should_trace_on_failure():
            await context.tracing.start(screenshots=True, snapshots=True)

        self._contexts.append(context)
        return context

    async def new_page(self, context: Optional[BrowserContext] = None) -> Page:
        if context is None:
            context = await self.new_context()
        return await context.new_page()

    async def close_context(
        self,
        context: BrowserContext,
        failed: bool = False,
        name: str = "test",
    ) -> None:
        """
        Close a context, keeping its trace only when the test failed.

        Videos are finalized by Playwright when the context closes; passing
        tests have theirs removed.
        """
        if context not in self._contexts:
            return
        self._contexts.remove(context)

        videos = []
        try:
            videos = [page.video for page in context.pages if page.video]
            if self.env.should_trace_on_failure():
                if failed:
                    trace_path = self.results_dir / "traces" / f"{name}.zip"
                    await context.tracing.stop(path=str(trace_path))
                    logger.info(f"Trace saved: {trace_path}")
                else:
                    await context.tracing.stop()
        finally:
            await context.close()

        for video in videos:
            if failed:
                logger.info(f"Video saved: {await video.path()}")
            else:
                await video.delete()

    @property
    def browser(self) -> Optional[Browser]:
        """Get browser instance."""
        return self._browser


__all__ = [
    "BrowserManager",
    "SUPPORTED_BROWSERS",
]
