"""
================================================================================
UI Testing Pytest Configuration
================================================================================

Fixtures for browser tests against the OnlyTests site.

Key Features:
- Suite bootstrap (config validation, artifact directories, run metrics)
- Browser and context lifecycle, skipped when no browser or site is available
- Page Object fixtures built by the PageFactory
- Screenshot, trace and video capture on failure
- Per-test start/end logging

================================================================================
"""

import time
from typing import AsyncGenerator, Dict, Generator

import pytest
from playwright.async_api import BrowserContext, Page

from onlytests_tools.common import Environment, StructuredLogger, SuiteBootstrap
from testsuites.ui_testing.framework import SITE_DATA, BrowserManager
from testsuites.ui_testing.framework.page_base import BasePage
from testsuites.ui_testing.framework.page_factory import PageFactory
from testsuites.ui_testing.pages import (
    AboutPage,
    HomePage,
    TestCasesPage,
    TextGeneratorPage,
    ToolsPage,
    UserDataPage,
)


# ================================================================================
# Session Fixtures
# ================================================================================

@pytest.fixture(scope="session")
def environment() -> Environment:
    """Shared configuration store."""
    return Environment.get_instance()


@pytest.fixture(scope="session")
def structured_logger() -> StructuredLogger:
    return StructuredLogger.get_instance()


@pytest.fixture(scope="session")
def bootstrap(environment: Environment, structured_logger: StructuredLogger) -> Generator[SuiteBootstrap, None, None]:
    """
    Validate configuration and prepare artifact directories once per session.

    A configuration error fails every UI test at setup.
    """
    suite = SuiteBootstrap(environment=environment, log=structured_logger)
    suite.initialize()
    yield suite
    suite.cleanup()


@pytest.fixture(scope="session")
async def browser_manager(
    bootstrap: SuiteBootstrap,
    environment: Environment,
) -> AsyncGenerator[BrowserManager, None]:
    """
    Session-scoped browser.

    Skips the UI tests when the browser cannot be launched (for example,
    browsers not installed with `playwright install`).
    """
    manager = BrowserManager(environment=environment)
    try:
        await manager.start()
    except Exception as e:
        pytest.skip(f"Browser could not be launched: {e}")

    yield manager
    await manager.close()


@pytest.fixture(scope="session")
async def live_site(browser_manager: BrowserManager, environment: Environment) -> str:
    """Base URL of the site under test; skips when it does not answer."""
    base_url = environment.get_base_url()
    if not await browser_manager.is_reachable(base_url):
        pytest.skip(f"Site under test is not reachable: {base_url}")
    return base_url


# ================================================================================
# Per-Test Fixtures
# ================================================================================

def _failed(request: pytest.FixtureRequest) -> bool:
    report = getattr(request.node, "rep_call", None)
    return report is not None and report.failed


@pytest.fixture(autouse=True)
def _test_lifecycle(
    request: pytest.FixtureRequest,
    bootstrap: SuiteBootstrap,
    structured_logger: StructuredLogger,
) -> Generator[None, None, None]:
    """Log test start/end and feed the run metrics."""
    name = request.node.name
    structured_logger.log_test_start(name)
    started = time.perf_counter()

    yield

    duration = int((time.perf_counter() - started) * 1000)
    report = getattr(request.node, "rep_call", None)
    success = report is not None and report.passed
    structured_logger.log_test_end(name, duration, success)
    bootstrap.update_test_metrics(name, success, duration)


@pytest.fixture
async def context(
    request: pytest.FixtureRequest,
    browser_manager: BrowserManager,
    live_site: str,
) -> AsyncGenerator[BrowserContext, None]:
    """Isolated browser context per test. Traces/videos are kept on failure."""
    context = await browser_manager.new_context()
    yield context
    await browser_manager.close_context(context, failed=_failed(request), name=request.node.name)


@pytest.fixture
async def page(
    request: pytest.FixtureRequest,
    context: BrowserContext,
    environment: Environment,
    structured_logger: StructuredLogger,
) -> AsyncGenerator[Page, None]:
    """
    New page per test.

    On failure a screenshot is saved and attached to the Allure report. The
    page is closed together with its context so the video is finalized.
    """
    page = await context.new_page()
    yield page

    if _failed(request) and environment.should_take_screenshot_on_failure():
        failed_page = BasePage(page, environment=environment, log=structured_logger)
        await failed_page.capture_failure(request.node.name)


# ================================================================================
# Page Object Fixtures
# ================================================================================

@pytest.fixture
def page_factory(environment: Environment, structured_logger: StructuredLogger) -> PageFactory:
    return PageFactory(environment=environment, log=structured_logger)


@pytest.fixture
def pages(page: Page, page_factory: PageFactory) -> Dict[str, BasePage]:
    """All page objects bound to this test's page."""
    return page_factory.create_all_pages(page)


@pytest.fixture
def home_page(page: Page, page_factory: PageFactory) -> HomePage:
    return page_factory.create_home_page(page)


@pytest.fixture
def about_page(page: Page, page_factory: PageFactory) -> AboutPage:
    return page_factory.create_about_page(page)


@pytest.fixture
def tools_page(page: Page, page_factory: PageFactory) -> ToolsPage:
    return page_factory.create_tools_page(page)


@pytest.fixture
def user_data_page(page: Page, page_factory: PageFactory) -> UserDataPage:
    return page_factory.create_user_data_page(page)


@pytest.fixture
def text_generator_page(page: Page, page_factory: PageFactory) -> TextGeneratorPage:
    return page_factory.create_text_generator_page(page)


@pytest.fixture
def test_cases_page(page: Page, page_factory: PageFactory) -> TestCasesPage:
    return page_factory.create_test_cases_page(page)


@pytest.fixture
def site_data():
    """Static expectations about the site: paths, titles, sections."""
    return SITE_DATA


# ================================================================================
# Test Lifecycle Hooks
# ================================================================================

@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Expose each phase's report on the item (rep_setup, rep_call, rep_teardown)."""
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)
