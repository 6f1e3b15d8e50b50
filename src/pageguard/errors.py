"""
Exception hierarchy for pageguard.

Two families:
- ConfigurationError: the caller asked for something that can never work
  (unknown locator kind, select index out of range). Raised immediately.
- NotReadyError: the page is not in the wanted state *yet*. The poller and the
  predicates swallow these; guarded actions turn them into FAILURE records.

Anything else coming out of the browser driver is a real defect and is left
to propagate.
"""


class PageGuardError(Exception):
    """Base class for all pageguard errors."""


class ConfigurationError(PageGuardError, ValueError):
    """Invalid engine configuration or call parameters."""


class InvalidLocatorKind(ConfigurationError):
    """Locator kind is not one of the supported kinds."""

    def __init__(self, kind):
        self.kind = kind
        super().__init__(f"{kind} is not a valid locator type")


class InvalidActionError(ConfigurationError):
    """An action was called with parameters that cannot be satisfied."""


class NotReadyError(PageGuardError):
    """The requested element or dialog is not available right now."""


class StaleElementError(NotReadyError):
    """An element handle no longer points at a node in the document."""


class NoDialogPresentError(NotReadyError):
    """No native alert, confirmation or prompt is open."""
