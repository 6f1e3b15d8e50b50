"""In-memory browser session and clock for testing without a real browser."""

import re
from typing import Any, Dict, List, Optional

from pageguard.drivers.base import BrowserSession, DialogHandle, ElementHandle
from pageguard.errors import NoDialogPresentError, StaleElementError
from pageguard.polling import Clock


class FakeClock(Clock):
    """Clock that only moves when something sleeps."""

    def __init__(self, start: float = 0.0):
        self.t = start
        self.sleeps: List[float] = []

    def now(self) -> float:
        return self.t

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.t += seconds

    def advance(self, seconds: float) -> None:
        self.t += seconds


class FakeElement(ElementHandle):
    """
    Element with scriptable state.

    ``displayed_at`` / ``enabled_at`` make the element become visible or
    enabled once the session clock reaches that time.
    """

    def __init__(
        self,
        text: str = "",
        displayed: bool = True,
        enabled: bool = True,
        selected: bool = False,
        attributes: Optional[Dict[str, str]] = None,
        css: Optional[Dict[str, str]] = None,
        y: int = 0,
        children: Optional[Dict[str, List["FakeElement"]]] = None,
        displayed_at: Optional[float] = None,
        enabled_at: Optional[float] = None,
    ):
        self.text = text
        self.displayed = displayed
        self.enabled = enabled
        self.selected = selected
        self.attributes = attributes or {}
        self.css = css or {}
        self.y = y
        self.children = children or {}
        self.displayed_at = displayed_at
        self.enabled_at = enabled_at
        self.detached = False
        self.clock: Optional[FakeClock] = None
        self.session: Optional["FakeSession"] = None

        self.clicks = 0
        self.submits = 0
        self.hovers = 0
        self.scrolls_into_view = 0
        self.typed: List[str] = []

    def _check_attached(self):
        if self.detached:
            raise StaleElementError("Element is not attached to the DOM")

    def _now(self) -> float:
        return self.clock.now() if self.clock else 0.0

    def click(self) -> None:
        self._check_attached()
        self.clicks += 1

    def submit(self) -> None:
        self._check_attached()
        self.submits += 1

    def send_keys(self, text: str) -> None:
        self._check_attached()
        self.typed.append(text)

    def hover(self) -> None:
        self._check_attached()
        self.hovers += 1

    def scroll_into_view(self) -> None:
        self._check_attached()
        self.scrolls_into_view += 1
        if self.session is not None:
            self.session.on_scroll_into_view(self)

    def is_displayed(self) -> bool:
        self._check_attached()
        if self.displayed_at is not None:
            return self._now() >= self.displayed_at
        return self.displayed

    def is_enabled(self) -> bool:
        self._check_attached()
        if self.enabled_at is not None:
            return self._now() >= self.enabled_at
        return self.enabled

    def is_selected(self) -> bool:
        self._check_attached()
        return self.selected

    def get_text(self) -> str:
        self._check_attached()
        return self.text

    def get_attribute(self, name: str) -> Optional[str]:
        self._check_attached()
        return self.attributes.get(name)

    def get_css_value(self, name: str) -> str:
        self._check_attached()
        return self.css.get(name, "")

    def location_y(self) -> int:
        self._check_attached()
        return self.y

    def find_elements(self, query: str) -> List[ElementHandle]:
        self._check_attached()
        return list(self.children.get(query, []))


def fake_select(*labels: str, values: Optional[List[str]] = None) -> FakeElement:
    """A <select> with one <option> per label."""
    values = values or [label.lower() for label in labels]
    options = [
        FakeElement(text=label, attributes={"value": value})
        for label, value in zip(labels, values)
    ]
    return FakeElement(children={"option": options})


class FakeDialog(DialogHandle):
    def __init__(self, session: "FakeSession", message: str):
        self.session = session
        self.message = message
        self.accepted = False
        self.dismissed = False
        self.keys: List[str] = []
        self.accept_error: Optional[Exception] = None

    def accept(self) -> None:
        if self.accept_error is not None:
            raise self.accept_error
        self.accepted = True
        self.session.dialog = None

    def dismiss(self) -> None:
        self.dismissed = True
        self.session.dialog = None

    def send_keys(self, text: str) -> None:
        self.keys.append(text)

    @property
    def text(self) -> str:
        return self.message


class FakeSession(BrowserSession):
    """
    BrowserSession over a dictionary of query -> elements.

    Elements can be scheduled to appear or vanish at a given clock time.
    """

    SCROLL_TO = re.compile(r"window\.scrollTo\(0, (-?\d+)\)")
    SCROLL_BY = re.compile(r"window\.scrollBy\(0, (-?\d+)\)")

    def __init__(self, clock: Optional[FakeClock] = None):
        self.clock = clock or FakeClock()
        self._elements: List[Dict[str, Any]] = []
        self.dialog: Optional[FakeDialog] = None
        self._dialog_at: Optional[float] = None
        self.default_content_calls = 0
        self.alert_switches = 0
        self.queries: List[str] = []
        self.scripts: List[str] = []
        self.scroll_y = 0
        self.max_scroll: Optional[int] = None
        self.url = "about:blank"
        self.page_title = ""
        self.source = "<html><body></body></html>"
        self.broken_urls: Dict[str, Exception] = {}
        self.visible_after_scroll: List[FakeElement] = []

    def add(
        self,
        query: str,
        element: FakeElement,
        appear_at: float = 0.0,
        vanish_at: Optional[float] = None,
    ) -> FakeElement:
        element.clock = self.clock
        element.session = self
        self._elements.append(
            {"query": query, "element": element, "appear_at": appear_at, "vanish_at": vanish_at}
        )
        return element

    def open_dialog(self, message: str = "", at: Optional[float] = None) -> None:
        self.dialog = FakeDialog(self, message)
        self._dialog_at = at

    def _live(self, query: str) -> List[FakeElement]:
        now = self.clock.now()
        found = []
        for entry in self._elements:
            if entry["query"] != query:
                continue
            if now < entry["appear_at"]:
                continue
            if entry["vanish_at"] is not None and now >= entry["vanish_at"]:
                continue
            found.append(entry["element"])
        return found

    def on_scroll_into_view(self, element: FakeElement) -> None:
        if element in self.visible_after_scroll:
            element.displayed = True

    def find_element(self, query: str) -> Optional[ElementHandle]:
        self.queries.append(query)
        live = self._live(query)
        return live[0] if live else None

    def find_elements(self, query: str) -> List[ElementHandle]:
        self.queries.append(query)
        return list(self._live(query))

    def switch_to_alert(self) -> DialogHandle:
        self.alert_switches += 1
        if self.dialog is None:
            raise NoDialogPresentError("No dialog is open")
        if self._dialog_at is not None and self.clock.now() < self._dialog_at:
            raise NoDialogPresentError("No dialog is open")
        return self.dialog

    def switch_to_default_content(self) -> None:
        self.default_content_calls += 1

    def execute_script(self, script: str, *args: Any) -> Any:
        self.scripts.append(script)
        if script == "window.scrollY":
            return self.scroll_y
        match = self.SCROLL_TO.fullmatch(script)
        if match:
            self._scroll_to(int(match.group(1)))
            return None
        match = self.SCROLL_BY.fullmatch(script)
        if match:
            self._scroll_to(self.scroll_y + int(match.group(1)))
            for element in self.visible_after_scroll:
                element.displayed = True
            return None
        raise AssertionError(f"Unexpected script: {script}")

    def _scroll_to(self, position: int) -> None:
        position = max(position, 0)
        if self.max_scroll is not None:
            position = min(position, self.max_scroll)
        self.scroll_y = position

    def navigate(self, url: str) -> None:
        if url in self.broken_urls:
            raise self.broken_urls[url]
        self.url = url

    @property
    def current_url(self) -> str:
        return self.url

    @property
    def title(self) -> str:
        return self.page_title

    @property
    def page_source(self) -> str:
        return self.source


class StubHandle:
    """Stands in for a Playwright ElementHandle."""

    def __init__(self, tag: str = "button", text: str = "", error: Optional[Exception] = None):
        self.tag = tag
        self.text = text
        self.error = error
        self.calls: List[tuple] = []

    def _record(self, name: str, *args, **kwargs):
        self.calls.append((name, args, kwargs))
        if self.error is not None:
            raise self.error

    def click(self, **kwargs):
        self._record("click", **kwargs)

    def evaluate(self, script: str, *args):
        self._record("evaluate", script, *args)
        if script == "(el) => el.tagName":
            return self.tag.upper()
        return None

    def type(self, text: str):
        self._record("type", text)

    def hover(self):
        self._record("hover")

    def scroll_into_view_if_needed(self):
        self._record("scroll_into_view_if_needed")

    def is_visible(self) -> bool:
        self._record("is_visible")
        return True

    def is_enabled(self) -> bool:
        self._record("is_enabled")
        return True

    def inner_text(self) -> str:
        self._record("inner_text")
        return self.text

    def get_attribute(self, name: str):
        self._record("get_attribute", name)
        return None

    def query_selector_all(self, query: str):
        self._record("query_selector_all", query)
        return []


class StubDialog:
    """Stands in for a Playwright Dialog."""

    def __init__(self, message: str = "", type: str = "alert"):
        self.message = message
        self.type = type
        self.accepted_with: List[Optional[str]] = []
        self.dismissed = False

    def accept(self, prompt_text: Optional[str] = None):
        self.accepted_with.append(prompt_text)

    def dismiss(self):
        self.dismissed = True


class StubPage:
    """
    Stands in for a Playwright sync-API Page.

    ``query_results`` is consumed one entry per ``query_selector`` call: an
    exception is raised, anything else is returned. When it runs out the
    ``default_handle`` is returned. ``pending_dialog`` is delivered to the
    dialog listener on the next ``wait_for_timeout``, the way Playwright
    delivers events while a call is running.
    """

    def __init__(self, default_handle: Optional[StubHandle] = None):
        self.default_handle = default_handle
        self.query_results: List[Any] = []
        self.query_all_results: List[Any] = []
        self.listeners: Dict[str, List[Any]] = {}
        self.pending_dialog: Optional[StubDialog] = None
        self.timeouts: List[float] = []
        self.evaluated: List[tuple] = []
        self.url = "about:blank"

    def on(self, event: str, handler) -> None:
        self.listeners.setdefault(event, []).append(handler)

    def fire_dialog(self, dialog: StubDialog) -> None:
        for handler in self.listeners.get("dialog", []):
            handler(dialog)

    def _next(self, results: List[Any], default: Any) -> Any:
        if not results:
            return default
        result = results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    def query_selector(self, query: str):
        return self._next(self.query_results, self.default_handle)

    def query_selector_all(self, query: str):
        default = [self.default_handle] if self.default_handle else []
        return self._next(self.query_all_results, default)

    def wait_for_timeout(self, ms: float) -> None:
        self.timeouts.append(ms)
        if self.pending_dialog is not None:
            dialog, self.pending_dialog = self.pending_dialog, None
            self.fire_dialog(dialog)

    def evaluate(self, script: str, arg: Any = None):
        self.evaluated.append((script, arg))
        return None

    def goto(self, url: str) -> None:
        self.url = url

    def title(self) -> str:
        return ""

    def content(self) -> str:
        return "<html></html>"
