"""
Abstract browser session interface.

This module defines the narrow capability interface the engine drives.
Sessions can be swapped out to use different automation tools; pageguard
ships a Playwright implementation.

Conventions every implementation must follow:
- ``find_element`` returns None when nothing matches (never raises for that).
- Element operations on a node that has left the document raise
  StaleElementError.
- ``switch_to_alert`` raises NoDialogPresentError when no dialog is open.
- Any other failure (lost session, crashed browser) is raised as-is.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional


class ElementHandle(ABC):
    """
    Short-lived reference to one node in the document.

    Only valid for the duration of a single check or action; the engine
    re-resolves before every use.
    """

    @abstractmethod
    def click(self) -> None:
        pass

    @abstractmethod
    def submit(self) -> None:
        """Submit the form this element belongs to."""
        pass

    @abstractmethod
    def send_keys(self, text: str) -> None:
        pass

    @abstractmethod
    def hover(self) -> None:
        pass

    @abstractmethod
    def scroll_into_view(self) -> None:
        pass

    @abstractmethod
    def is_displayed(self) -> bool:
        pass

    @abstractmethod
    def is_enabled(self) -> bool:
        pass

    @abstractmethod
    def is_selected(self) -> bool:
        """Whether a checkbox/radio is checked or an option is selected."""
        pass

    @abstractmethod
    def get_text(self) -> str:
        """Visible text of the element."""
        pass

    @abstractmethod
    def get_attribute(self, name: str) -> Optional[str]:
        pass

    @abstractmethod
    def get_css_value(self, name: str) -> str:
        pass

    @abstractmethod
    def location_y(self) -> int:
        """Top offset of the element relative to the document, in pixels."""
        pass

    @abstractmethod
    def find_elements(self, query: str) -> List["ElementHandle"]:
        """Descendants of this element matching the query."""
        pass


class DialogHandle(ABC):
    """An open native alert, confirmation or prompt."""

    @abstractmethod
    def accept(self) -> None:
        pass

    @abstractmethod
    def dismiss(self) -> None:
        pass

    @abstractmethod
    def send_keys(self, text: str) -> None:
        pass

    @property
    @abstractmethod
    def text(self) -> str:
        pass


class BrowserSession(ABC):
    """
    Abstract interface for a single browser session.

    An engine instance owns exactly one session; sessions are never shared
    between threads.
    """

    @abstractmethod
    def find_element(self, query: str) -> Optional[ElementHandle]:
        """First element matching the query, or None."""
        pass

    @abstractmethod
    def find_elements(self, query: str) -> List[ElementHandle]:
        pass

    @abstractmethod
    def switch_to_alert(self) -> DialogHandle:
        """Focus the open dialog. Raises NoDialogPresentError if none."""
        pass

    @abstractmethod
    def switch_to_default_content(self) -> None:
        """Return focus to the main document."""
        pass

    @abstractmethod
    def execute_script(self, script: str, *args: Any) -> Any:
        """Evaluate a JavaScript expression in the page and return its value."""
        pass

    @abstractmethod
    def navigate(self, url: str) -> None:
        pass

    @property
    @abstractmethod
    def current_url(self) -> str:
        pass

    @property
    @abstractmethod
    def title(self) -> str:
        pass

    @property
    @abstractmethod
    def page_source(self) -> str:
        pass
