"""
Browser session drivers for pageguard.

The engine only talks to the BrowserSession interface. Each driver adapts
one automation tool to it.

Available Drivers:
    - PlaywrightSession: Playwright sync API (Chromium, Firefox, WebKit)

You can also drive other tools by extending BrowserSession.

Example:
    ```python
    from pageguard import GuardedActions
    from pageguard.drivers import PlaywrightSession

    actions = GuardedActions(PlaywrightSession(page))
    ```
"""

from .base import (
    BrowserSession,
    DialogHandle,
    ElementHandle,
)
from .playwright import PlaywrightSession

__all__ = [
    "BrowserSession",
    "DialogHandle",
    "ElementHandle",
    "PlaywrightSession",
]
