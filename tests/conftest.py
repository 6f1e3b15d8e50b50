"""
Pytest configuration and shared fixtures for pageguard tests.

Unit tests run against the in-memory FakeSession and FakeClock from
``fakes.py``. Tests marked ``browser`` drive a real Chromium through
Playwright and are skipped when no browser can be launched.
"""

import os
import sys
from typing import Generator

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src"))

from fakes import FakeClock, FakeSession
from pageguard import EngineConfig, GuardedActions, OutcomeLog


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "browser: tests that drive a real Chromium")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def session(clock) -> FakeSession:
    return FakeSession(clock)


@pytest.fixture
def log() -> OutcomeLog:
    return OutcomeLog()


@pytest.fixture
def config() -> EngineConfig:
    return EngineConfig(timeout=5.0, poll_interval=0.1)


@pytest.fixture
def actions(session, log, config, clock) -> GuardedActions:
    return GuardedActions(session, recorder=log, config=config, clock=clock)


@pytest.fixture(scope="session")
def playwright_browser():
    """Session-scoped Chromium, or skip when Playwright cannot launch one."""
    sync_api = pytest.importorskip("playwright.sync_api")
    with sync_api.sync_playwright() as p:
        try:
            browser = p.chromium.launch(headless=True)
        except sync_api.Error as e:
            pytest.skip(f"Chromium is not available: {e}")
        yield browser
        browser.close()


@pytest.fixture
def browser_page(playwright_browser) -> Generator:
    """Page fixture that creates a fresh page for each test."""
    page = playwright_browser.new_page()
    yield page
    page.close()
