"""
pageguard - Guarded browser actions with a reviewable audit trail

Test code states intent ("click this", "type that", "wait for this element")
and pageguard turns it into a deterministic pass/fail outcome:

1. Locators are resolved fresh against the live document on every check
2. Conditions (present, displayed, enabled, dialog open) are polled up to a
   bounded timeout
3. Mutating actions wait out present -> displayed -> enabled before acting
4. Every action or explicit wait produces exactly one outcome record

Unready pages never raise: an action that cannot run records a FAILURE and
returns 1, so a test can collect failures and keep going.

Quick Start:
    ```python
    from playwright.sync_api import sync_playwright
    from pageguard import GuardedActions, Locator, OutcomeLog
    from pageguard.drivers import PlaywrightSession

    with sync_playwright() as p:
        browser = p.chromium.launch()
        page = browser.new_page()

        log = OutcomeLog(echo=True)
        actions = GuardedActions(PlaywrightSession(page), recorder=log)

        actions.goto_url("http://localhost:8888/login")
        actions.type(Locator.of("id", "email"), "test@example.com")
        actions.type(Locator.of("name", "password"), "secret123")
        actions.click(Locator.of("xpath", "//button[@type='submit']"))
        actions.wait_for_element_displayed(Locator.of("classname", "dashboard"), 10)

        print(log.summary())
        browser.close()
    ```

Dialogs:
    ```python
    actions.click(Locator.of("id", "delete"))
    actions.dismiss_confirmation()
    ```
"""

from .actions import (
    GuardedActions,
    create_actions,
)
from .config import (
    EngineConfig,
)
from .errors import (
    ConfigurationError,
    InvalidActionError,
    InvalidLocatorKind,
    NoDialogPresentError,
    NotReadyError,
    PageGuardError,
    StaleElementError,
)
from .locators import (
    Found,
    Locator,
    LocatorKind,
    LocatorResolver,
    NotFound,
    selector_for,
)
from .outcome import (
    OutcomeLog,
    OutcomeRecord,
    OutcomeRecorder,
    Result,
)
from .polling import (
    Clock,
    PollResult,
    SystemClock,
    poll_until,
)
from .predicates import (
    StatePredicates,
)

__version__ = "0.1.0"
__license__ = "MIT"

__all__ = [
    # Main classes
    "GuardedActions",
    "create_actions",
    "StatePredicates",
    "EngineConfig",
    # Locators
    "Locator",
    "LocatorKind",
    "LocatorResolver",
    "Found",
    "NotFound",
    "selector_for",
    # Outcomes
    "OutcomeLog",
    "OutcomeRecord",
    "OutcomeRecorder",
    "Result",
    # Polling
    "Clock",
    "SystemClock",
    "PollResult",
    "poll_until",
    # Errors
    "PageGuardError",
    "ConfigurationError",
    "InvalidLocatorKind",
    "InvalidActionError",
    "NotReadyError",
    "StaleElementError",
    "NoDialogPresentError",
]
