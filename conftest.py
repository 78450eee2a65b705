"""
Repository-level pytest configuration.

Provides safe defaults for local runs so the suite works right after a
clone: the local profile points at a dev server on localhost:3000, and the
production profile at the public site. Values set by the user, CI or a
`.env` file always win.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator

import pytest


DEMO_SAFE_DEFAULTS = {
    "ENVIRONMENT": "local",
    "LOCAL_BASE_URL": "http://localhost:3000",
    "LOCAL_API_URL": "http://localhost:3000/api",
    "PROD_BASE_URL": "https://onlytests.io",
    "PROD_API_URL": "https://onlytests.io/api",
}


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent


@pytest.fixture(scope="session", autouse=True)
def _demo_safe_env_defaults() -> Generator[None, None, None]:
    """Set environment defaults if not already provided by the user/CI."""
    for k, v in DEMO_SAFE_DEFAULTS.items():
        os.environ.setdefault(k, v)

    yield
