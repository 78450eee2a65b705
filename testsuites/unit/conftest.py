"""
Fixtures and Playwright doubles for unit tests. No browser is started.
"""

from types import SimpleNamespace
from typing import Dict, List, Optional

import pytest
from loguru import logger
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from onlytests_tools.common.environment import Environment
from onlytests_tools.common.logger import LogLevel, StructuredLogger


BASE_ENV = {
    "ENVIRONMENT": "local",
    "LOCAL_BASE_URL": "http://localhost:3000",
    "LOCAL_API_URL": "http://localhost:3000/api",
}


class FakeLocator:
    """
    Locator double.

    `failures` calls of click/fill raise before one succeeds; None means
    every call fails. `visible=False` makes wait_for time out.
    """

    def __init__(self, selector: str = "#target", failures: Optional[int] = 0, visible: bool = True, text: str = ""):
        self.selector = selector
        self.failures = failures
        self.visible = visible
        self.text = text
        self.value = ""
        self.checked = False
        self.texts: List[str] = []
        self.children: Dict[int, "FakeLocator"] = {}
        self.calls: List[tuple] = []

    @property
    def first(self) -> "FakeLocator":
        return self

    def _attempt(self, name: str, *args) -> None:
        self.calls.append((name,) + args)
        attempts = sum(1 for call in self.calls if call[0] == name)
        if self.failures is None or attempts <= self.failures:
            raise PlaywrightTimeoutError(f"{name} timed out on {self.selector}")

    async def click(self, timeout=None) -> None:
        self._attempt("click", timeout)

    async def fill(self, value, timeout=None) -> None:
        self._attempt("fill", value, timeout)
        self.value = value

    async def select_option(self, value, timeout=None) -> None:
        self.calls.append(("select_option", value, timeout))
        self.value = value

    async def input_value(self, timeout=None) -> str:
        return self.value

    async def is_enabled(self, timeout=None) -> bool:
        return self.visible

    async def is_checked(self, timeout=None) -> bool:
        return self.checked

    async def all_text_contents(self) -> List[str]:
        return list(self.texts)

    def nth(self, index: int) -> "FakeLocator":
        return self.children.setdefault(index, FakeLocator(f"{self.selector} >> nth={index}"))

    async def wait_for(self, state="visible", timeout=None) -> None:
        self.calls.append(("wait_for", state, timeout))
        if not self.visible:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for {self.selector}")

    async def text_content(self) -> str:
        return self.text

    async def count(self) -> int:
        return 1 if self.visible else 0

    def __str__(self) -> str:
        return f"FakeLocator({self.selector})"


class FakePage:
    """Page double holding a selector -> FakeLocator map."""

    def __init__(self, locators: Optional[Dict[str, FakeLocator]] = None, url: str = "http://localhost:3000/"):
        self.locators = locators or {}
        self.url = url
        self.load_state_error: Optional[Exception] = None
        self.events: List[SimpleNamespace] = []
        self.function_ready = True
        self.calls: List[tuple] = []

    def locator(self, selector: str) -> FakeLocator:
        return self.locators.setdefault(selector, FakeLocator(selector))

    def get_by_role(self, role: str, name: str = "") -> FakeLocator:
        return self.locator(f"role={role}[name={name}]")

    def get_by_text(self, text: str) -> FakeLocator:
        return self.locator(f"text={text}")

    async def wait_for_function(self, expression, timeout=None) -> None:
        self.calls.append(("wait_for_function", timeout))
        if not self.function_ready:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded")

    async def goto(self, url, wait_until="load", timeout=None) -> None:
        self.calls.append(("goto", url, wait_until))
        self.url = url

    async def wait_for_load_state(self, state="load", timeout=None) -> None:
        self.calls.append(("wait_for_load_state", state, timeout))
        if self.load_state_error:
            raise self.load_state_error

    async def wait_for_event(self, event, predicate=None, timeout=None):
        for item in self.events:
            if item.event == event and (predicate is None or predicate(item)):
                return item
        raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded while waiting for event \"{event}\"")

    async def wait_for_timeout(self, timeout) -> None:
        self.calls.append(("wait_for_timeout", timeout))

    async def screenshot(self, path=None, full_page=False) -> bytes:
        data = b"\x89PNG fake"
        if path:
            with open(path, "wb") as f:
                f.write(data)
        return data


@pytest.fixture
def log_lines():
    """Structured lines emitted through loguru during the test."""
    lines: List[str] = []
    handler_id = logger.add(lambda message: lines.append(str(message).rstrip("\n")), format="{message}", level="DEBUG")
    yield lines
    logger.remove(handler_id)


@pytest.fixture
def structured_log() -> StructuredLogger:
    """Isolated logger that emits everything, debug included."""
    return StructuredLogger(level=LogLevel.DEBUG, debug_enabled=True, environment="test", environ={})


@pytest.fixture
def env_vars() -> Dict[str, str]:
    return dict(BASE_ENV)


@pytest.fixture
def make_environment(tmp_path, structured_log):
    """Build an isolated Environment from a variable dict (built-in profiles only)."""

    def _make(environ: Optional[Dict[str, str]] = None, profiles_path=None) -> Environment:
        return Environment(
            environ=dict(BASE_ENV) if environ is None else environ,
            profiles_path=profiles_path or tmp_path / "no-profiles.yaml",
            log=structured_log,
        )

    return _make


@pytest.fixture
def environment(make_environment) -> Environment:
    return make_environment()


@pytest.fixture
def sleeps():
    """Recorded backoff delays, in seconds."""
    return []


@pytest.fixture
def fake_sleep(sleeps):
    async def _sleep(seconds: float) -> None:
        sleeps.append(seconds)

    return _sleep


@pytest.fixture
def make_locator():
    """FakeLocator factory."""
    return FakeLocator


@pytest.fixture
def fake_page() -> FakePage:
    return FakePage()
