"""
Playwright implementation of the browser session interface.

Wraps a Playwright sync-API ``Page``. Creating and closing the browser is the
caller's job:

    ```python
    from playwright.sync_api import sync_playwright
    from pageguard.drivers import PlaywrightSession

    with sync_playwright() as p:
        browser = p.chromium.launch()
        session = PlaywrightSession(browser.new_page())
        ...
        browser.close()
    ```

Native dialogs: Playwright auto-dismisses dialogs unless a listener is
attached, and an action that opens a dialog does not return until the dialog
is answered. So this session keeps a listener that parks the open dialog, and
clicks/submits are actionability-checked with a trial click and then fired
from a page task. That way the call returns, the engine can see the dialog,
and decide to accept or dismiss it.
"""

from typing import Any, List, Optional

from playwright.sync_api import Error as PlaywrightError

from ..errors import NoDialogPresentError, StaleElementError
from .base import BrowserSession, DialogHandle, ElementHandle

# Messages Playwright uses while the page is between documents
NAVIGATION_MARKERS = (
    "Execution context was destroyed",
    "Cannot find context",
)

# Messages Playwright uses when a handle outlives its node
DETACHED_MARKERS = (
    "not attached to the DOM",
    "Element is not attached",
    "handle is disposed",
    "JSHandle is disposed",
) + NAVIGATION_MARKERS

DEFERRED_CLICK_SCRIPT = """
(el) => {
    if (el.tagName === 'OPTION') {
        const select = el.closest('select');
        el.selected = true;
        if (select) {
            select.dispatchEvent(new Event('input', { bubbles: true }));
            select.dispatchEvent(new Event('change', { bubbles: true }));
        }
        return;
    }
    window.setTimeout(() => el.click(), 0);
}
"""

DEFERRED_SUBMIT_SCRIPT = """
(el) => {
    const form = el.tagName === 'FORM' ? el : (el.form || el.closest('form'));
    if (!form) {
        throw new Error('Element is not part of a form');
    }
    window.setTimeout(() => form.submit(), 0);
}
"""

SELECTED_SCRIPT = "(el) => !!(el.checked || el.selected)"

VALUE_SCRIPT = "(el) => (el.value === undefined || el.value === null) ? null : String(el.value)"

CSS_SCRIPT = "(el, name) => window.getComputedStyle(el).getPropertyValue(name)"

LOCATION_SCRIPT = "(el) => Math.round(el.getBoundingClientRect().top + window.scrollY)"


def _is_detached(error: Exception) -> bool:
    message = str(error)
    return any(marker in message for marker in DETACHED_MARKERS)


def _is_navigating(error: Exception) -> bool:
    message = str(error)
    return any(marker in message for marker in NAVIGATION_MARKERS)


class PlaywrightElement(ElementHandle):
    """ElementHandle backed by a Playwright ``ElementHandle``."""

    def __init__(self, session: "PlaywrightSession", handle):
        self._session = session
        self._handle = handle

    def _call(self, method: str, *args, **kwargs):
        try:
            return getattr(self._handle, method)(*args, **kwargs)
        except PlaywrightError as e:
            if _is_detached(e):
                raise StaleElementError(str(e)) from e
            raise

    def click(self) -> None:
        if self.get_tag_name() != "option":
            self._call("click", trial=True)
        self._call("evaluate", DEFERRED_CLICK_SCRIPT)
        self._session.settle()

    def submit(self) -> None:
        self._call("evaluate", DEFERRED_SUBMIT_SCRIPT)
        self._session.settle()

    def send_keys(self, text: str) -> None:
        self._call("type", text)

    def hover(self) -> None:
        self._call("hover")

    def scroll_into_view(self) -> None:
        self._call("scroll_into_view_if_needed")

    def is_displayed(self) -> bool:
        return bool(self._call("is_visible"))

    def is_enabled(self) -> bool:
        return bool(self._call("is_enabled"))

    def is_selected(self) -> bool:
        return bool(self._call("evaluate", SELECTED_SCRIPT))

    def get_text(self) -> str:
        return self._call("inner_text")

    def get_tag_name(self) -> str:
        return str(self._call("evaluate", "(el) => el.tagName")).lower()

    def get_attribute(self, name: str) -> Optional[str]:
        if name == "value":
            return self._call("evaluate", VALUE_SCRIPT)
        return self._call("get_attribute", name)

    def get_css_value(self, name: str) -> str:
        return self._call("evaluate", CSS_SCRIPT, name)

    def location_y(self) -> int:
        return int(self._call("evaluate", LOCATION_SCRIPT))

    def find_elements(self, query: str) -> List[ElementHandle]:
        handles = self._call("query_selector_all", query)
        return [PlaywrightElement(self._session, h) for h in handles]


class PlaywrightDialog(DialogHandle):
    """The dialog currently parked by a PlaywrightSession."""

    def __init__(self, session: "PlaywrightSession", dialog):
        self._session = session
        self._dialog = dialog

    def accept(self) -> None:
        prompt_text = self._session._prompt_text
        if prompt_text is not None:
            self._dialog.accept(prompt_text)
        else:
            self._dialog.accept()
        self._session._clear_dialog(self._dialog)

    def dismiss(self) -> None:
        self._dialog.dismiss()
        self._session._clear_dialog(self._dialog)

    def send_keys(self, text: str) -> None:
        # Playwright only delivers prompt text on accept; keep it until then
        self._session._prompt_text = (self._session._prompt_text or "") + text

    @property
    def text(self) -> str:
        return self._dialog.message

    @property
    def kind(self) -> str:
        """'alert', 'confirm', 'prompt' or 'beforeunload'."""
        return self._dialog.type


class PlaywrightSession(BrowserSession):
    """
    BrowserSession driving one Playwright page.

    Args:
        page: Playwright sync-API Page
        settle_ms: Pause after a deferred click/submit so it lands before
            the next command
    """

    def __init__(self, page, settle_ms: float = 25):
        self.page = page
        self.settle_ms = settle_ms
        self._dialog = None
        self._prompt_text: Optional[str] = None
        page.on("dialog", self._on_dialog)

    def _on_dialog(self, dialog):
        self._dialog = dialog
        self._prompt_text = None

    def _clear_dialog(self, dialog):
        if self._dialog is dialog:
            self._dialog = None
            self._prompt_text = None

    def settle(self) -> None:
        """Let the page run queued tasks and deliver pending events."""
        self.page.wait_for_timeout(self.settle_ms)

    def find_element(self, query: str) -> Optional[ElementHandle]:
        try:
            handle = self.page.query_selector(query)
        except PlaywrightError as e:
            # a navigation is replacing the document; nothing to find yet
            if _is_navigating(e):
                return None
            raise
        if handle is None:
            return None
        return PlaywrightElement(self, handle)

    def find_elements(self, query: str) -> List[ElementHandle]:
        try:
            handles = self.page.query_selector_all(query)
        except PlaywrightError as e:
            if _is_navigating(e):
                return []
            raise
        return [PlaywrightElement(self, h) for h in handles]

    def switch_to_alert(self) -> DialogHandle:
        if self._dialog is None:
            # dialog events are only delivered while a Playwright call runs
            self.page.wait_for_timeout(0)
        if self._dialog is None:
            raise NoDialogPresentError("No dialog is open")
        return PlaywrightDialog(self, self._dialog)

    def switch_to_default_content(self) -> None:
        # Playwright never moves command focus into a dialog; the main frame
        # stays the target, so there is nothing to restore.
        pass

    def execute_script(self, script: str, *args: Any) -> Any:
        if not args:
            return self.page.evaluate(script)
        if len(args) == 1:
            return self.page.evaluate(script, args[0])
        return self.page.evaluate(script, list(args))

    def navigate(self, url: str) -> None:
        self.page.goto(url)

    @property
    def current_url(self) -> str:
        return self.page.url

    @property
    def title(self) -> str:
        return self.page.title()

    @property
    def page_source(self) -> str:
        return self.page.content()
