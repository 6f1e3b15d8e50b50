"""
Guarded actions.

Every mutating action walks the same precondition chain before it touches
the page:

    present -> displayed -> enabled -> execute

Each stage that does not hold yet is waited out for up to the default timeout
(a fresh budget per stage). The first stage still failing after its wait ends
the action with a single FAILURE record ("Unable to click id login as it is
not displayed"). When every stage passes, the element is resolved again and
the action runs, followed by a single SUCCESS record.

Actions return the number of failures (0 or 1) instead of raising, so a test
can keep going and add the failures up. Parameters that can never work raise
InvalidActionError, and errors from the browser driver propagate untouched.

Dialogs (alert, confirmation, prompt) use a two-stage chain: wait for the
dialog, then act on it. Focus always goes back to the main document.
"""

from functools import partial
from typing import Callable, List, Optional, Sequence, Union

from .config import EngineConfig
from .drivers.base import DialogHandle, ElementHandle
from .errors import InvalidActionError, NoDialogPresentError
from .locators import Locator, NotFound
from .outcome import OutcomeLog, OutcomeRecorder, Result
from .polling import Clock
from .predicates import StatePredicates, format_seconds

PRESENT = "present"
DISPLAYED = "displayed"
ENABLED = "enabled"

FULL_CHAIN = (PRESENT, DISPLAYED, ENABLED)
VISIBLE_CHAIN = (PRESENT, DISPLAYED)


class GuardedActions(StatePredicates):
    """
    Guarded actions bound to one browser session.

    Usage:
        actions = GuardedActions(PlaywrightSession(page))

        failures = 0
        failures += actions.goto_url("http://localhost:8888/login")
        failures += actions.type(Locator.of("id", "email"), "test@example.com")
        failures += actions.click(Locator.of("xpath", "//button[@type='submit']"))
        failures += actions.wait_for_element_displayed(
            Locator.of("classname", "dashboard")
        ).failures

        assert failures == 0, actions.recorder.failed_records()
    """

    def _stage_check(self, stage: str) -> Callable[[Locator], bool]:
        return {
            PRESENT: self._present,
            DISPLAYED: self._displayed,
            ENABLED: self._enabled,
        }[stage]

    def _first_unmet(self, locator: Locator, stages: Sequence[str]) -> Optional[str]:
        """Run the chain; return the first stage that never held, or None."""
        for stage in stages:
            if not self._await(partial(self._stage_check(stage), locator)):
                return stage
        return None

    def _guarded(
        self,
        locator: Locator,
        action: str,
        expected: str,
        verb: str,
        operation: Callable[[ElementHandle], None],
        done: str,
        stages: Sequence[str] = FULL_CHAIN,
    ) -> int:
        start = self.clock.now()
        unmet = self._first_unmet(locator, stages)
        if unmet is None:
            resolution = self.resolver.resolve(locator)
            if isinstance(resolution, NotFound):
                unmet = PRESENT
        if unmet is not None:
            self._record(
                action,
                expected,
                f"Unable to {verb} {locator} as it is not {unmet}",
                Result.FAILURE,
                self._since(start),
            )
            return 1

        operation(resolution.handle)
        self._record(action, expected, done, Result.SUCCESS, self._since(start))
        return 0

    # ------------------------------------------------------------------
    # element actions
    # ------------------------------------------------------------------

    def click(self, locator: Locator) -> int:
        return self._guarded(
            locator,
            f"Clicking {locator}",
            f"{locator} is present, displayed, and enabled to be clicked",
            "click",
            lambda el: el.click(),
            f"Clicked {locator}",
        )

    def submit(self, locator: Locator) -> int:
        return self._guarded(
            locator,
            f"Submitting {locator}",
            f"{locator} is present, displayed, and enabled to be submitted",
            "submit",
            lambda el: el.submit(),
            f"Submitted {locator}",
        )

    def hover(self, locator: Locator) -> int:
        """Move the mouse over the element. Disabled elements can be hovered."""
        return self._guarded(
            locator,
            f"Hovering over {locator}",
            f"{locator} is present, and displayed to be hovered over",
            "hover over",
            lambda el: el.hover(),
            f"Hovered over {locator}",
            stages=VISIBLE_CHAIN,
        )

    def type(self, locator: Locator, text: str) -> int:
        """Type text into the element, appending to what is already there."""
        return self._guarded(
            locator,
            f"Typing text '{text}' in {locator}",
            f"{locator} is present, displayed, and enabled to have text {text} typed in",
            "type in",
            lambda el: el.send_keys(text),
            f"Typed text '{text}' in {locator}",
        )

    def select(self, locator: Locator, value: Union[str, int]) -> int:
        """
        Select an option of a drop down.

        Args:
            locator: The select element
            value: Visible text of the option(s) to select, or the 0-based
                index of the option

        Every option whose visible text equals ``value`` exactly is clicked,
        so duplicates are all activated. A text that matches nothing clicks
        nothing and is still recorded as selected.

        Raises:
            InvalidActionError: index is outside the current option list
        """
        if isinstance(value, bool):
            raise InvalidActionError(f"Cannot select option {value!r}: use text or an index")
        if isinstance(value, int):
            return self._select_index(locator, value)
        return self._select_text(locator, str(value))

    def _select_text(self, locator: Locator, value: str) -> int:
        def choose(element: ElementHandle):
            for option in element.find_elements("option"):
                if option.get_text() == value:
                    option.click()

        return self._guarded(
            locator,
            f"Selecting {value} in {locator}",
            f"{locator} is present, displayed, and enabled to have the value {value} selected",
            "select",
            choose,
            f"Selected {value} in {locator}",
        )

    def _select_index(self, locator: Locator, index: int) -> int:
        start = self.clock.now()
        if self._await(partial(self._present, locator)):
            resolution = self.resolver.resolve(locator)
        else:
            resolution = NotFound(locator)
        if isinstance(resolution, NotFound):
            self._record(
                f"Selecting option {index} in {locator}",
                f"{locator} is present, displayed, and enabled to have option {index} selected",
                f"Unable to select {locator} as it is not present",
                Result.FAILURE,
                self._since(start),
            )
            return 1

        labels = [option.get_text() for option in resolution.handle.find_elements("option")]
        if not 0 <= index < len(labels):
            raise InvalidActionError(
                f"Option index {index} is out of range for {locator}, "
                f"which has {len(labels)} options"
            )
        return self._select_text(locator, labels[index])

    def move(self, locator: Locator, offset: Optional[int] = None) -> int:
        """
        Scroll the page so the element is on screen.

        Args:
            locator: The element to bring into view
            offset: If given, scroll so the element sits this many pixels
                below the top of the window instead

        Success means the element is displayed afterwards, not merely that the
        scroll ran.
        """
        if offset is None:
            action = f"Moving screen to {locator}"
        else:
            action = f"Moving screen to {offset} pixels above {locator}"
        expected = f"{locator} is now present on the visible page"
        start = self.clock.now()

        if self._await(partial(self._present, locator)):
            resolution = self.resolver.resolve(locator)
        else:
            resolution = NotFound(locator)
        if isinstance(resolution, NotFound):
            self._record(
                action,
                expected,
                f"Unable to move to {locator} as it is not present",
                Result.FAILURE,
                self._since(start),
            )
            return 1

        element = resolution.handle
        if offset is None:
            element.scroll_into_view()
        else:
            distance = element.location_y() - offset
            self.session.execute_script(f"window.scrollBy(0, {int(distance)})")

        if not self._displayed(locator):
            self._record(
                action,
                expected,
                f"{locator} is not present on visible page",
                Result.FAILURE,
                self._since(start),
            )
            return 1
        self._record(
            action,
            expected,
            f"{locator} is present on visible page",
            Result.SUCCESS,
            self._since(start),
        )
        return 0

    def scroll(self, position: int) -> int:
        """Scroll the window to an absolute vertical position."""
        start = self.clock.now()
        initial = self._scroll_y()
        action = f"Scrolling page from {initial} to {position}"
        expected = f"Page is now set at position {position}"

        self.session.execute_script(f"window.scrollTo(0, {int(position)})")
        current = self._scroll_y()

        result = Result.SUCCESS if current == position else Result.FAILURE
        self._record(
            action, expected, f"Page is now set at position {current}", result, self._since(start)
        )
        return 0 if result == Result.SUCCESS else 1

    def _scroll_y(self) -> int:
        return int(round(self.session.execute_script("window.scrollY") or 0))

    # ------------------------------------------------------------------
    # dialogs
    # ------------------------------------------------------------------

    def _dialog_action(
        self,
        action: str,
        expected: str,
        missing: str,
        operation: Callable[[DialogHandle], None],
        done: str,
    ) -> int:
        start = self.clock.now()
        handled = False
        if self._await(self._dialog_open):
            try:
                operation(self.session.switch_to_alert())
                handled = True
            except NoDialogPresentError:
                pass
            finally:
                self.session.switch_to_default_content()

        if not handled:
            self._record(action, expected, missing, Result.FAILURE, self._since(start))
            return 1
        self._record(action, expected, done, Result.SUCCESS, self._since(start))
        return 0

    def accept_alert(self) -> int:
        """Click 'OK' on an alert."""
        return self._dialog_action(
            "Clicking 'OK' on an alert",
            "Alert is present to be clicked",
            "Unable to click alert as it is not present",
            lambda dialog: dialog.accept(),
            "Clicked 'OK' on the alert",
        )

    def accept_confirmation(self) -> int:
        return self._dialog_action(
            "Clicking 'OK' on a confirmation",
            "Confirmation is present to be clicked",
            "Unable to click confirmation as it is not present",
            lambda dialog: dialog.accept(),
            "Clicked 'OK' on the confirmation",
        )

    def dismiss_confirmation(self) -> int:
        return self._dialog_action(
            "Clicking 'Cancel' on a confirmation",
            "Confirmation is present to be clicked",
            "Unable to click confirmation as it is not present",
            lambda dialog: dialog.dismiss(),
            "Clicked 'Cancel' on the confirmation",
        )

    def accept_prompt(self) -> int:
        return self._dialog_action(
            "Clicking 'OK' on a prompt",
            "Prompt is present to be clicked",
            "Unable to click prompt as it is not present",
            lambda dialog: dialog.accept(),
            "Clicked 'OK' on the prompt",
        )

    def dismiss_prompt(self) -> int:
        return self._dialog_action(
            "Clicking 'Cancel' on a prompt",
            "Prompt is present to be clicked",
            "Unable to click prompt as it is not present",
            lambda dialog: dialog.dismiss(),
            "Clicked 'Cancel' on the prompt",
        )

    def type_into_prompt(self, text: str) -> int:
        """Type text into an open prompt. The prompt stays open."""
        return self._dialog_action(
            f"Typing text '{text}' into prompt",
            f"Prompt is present and enabled to have text {text} typed in",
            "Unable to type in prompt as it is not present",
            lambda dialog: dialog.send_keys(text),
            f"Typed text '{text}' into prompt",
        )

    def _dialog_text(self) -> str:
        if not self._await(self._dialog_open):
            return ""
        try:
            return self.session.switch_to_alert().text
        except NoDialogPresentError:
            return ""
        finally:
            self.session.switch_to_default_content()

    def get_alert(self) -> str:
        """Text of the open alert, or "" if none shows up."""
        return self._dialog_text()

    def get_confirmation(self) -> str:
        return self._dialog_text()

    def get_prompt(self) -> str:
        return self._dialog_text()

    # ------------------------------------------------------------------
    # navigation and pauses
    # ------------------------------------------------------------------

    def goto_url(self, url: str) -> int:
        start = self.clock.now()
        action = f"Loading {url}"
        expected = f"Loaded {url}"
        try:
            self.session.navigate(url)
        except Exception as e:
            self._record(
                action, expected, f"Fail to Load {url}: {e}", Result.FAILURE, self._since(start)
            )
            return 1
        elapsed = self._since(start)
        self._record(
            action,
            expected,
            f"Loaded {url} in {format_seconds(elapsed)} seconds",
            Result.SUCCESS,
            elapsed,
        )
        return 0

    def wait(self, seconds: float) -> int:
        """Pause for a fixed number of seconds."""
        if seconds < 0:
            raise InvalidActionError(f"Cannot wait a negative time ({seconds} seconds)")
        shown = format_seconds(seconds)
        self.clock.sleep(seconds)
        self._record(
            f"Wait {shown} seconds",
            f"Waited {shown} seconds",
            f"Waited {shown} seconds",
            Result.SUCCESS,
            float(seconds),
        )
        return 0

    # ------------------------------------------------------------------
    # reads
    # ------------------------------------------------------------------

    def _options(self, locator: Locator) -> List[ElementHandle]:
        if not self._await(partial(self._present, locator)):
            return []
        resolution = self.resolver.resolve(locator)
        if isinstance(resolution, NotFound):
            return []
        return resolution.handle.find_elements("option")

    def get_select_options(self, locator: Locator) -> List[str]:
        """Values of all options in a drop down ([] if it never appears)."""
        return [option.get_attribute("value") or "" for option in self._options(locator)]

    def get_num_of_select_options(self, locator: Locator) -> int:
        return len(self._options(locator))

    def _read(self, locator: Locator, read: Callable[[ElementHandle], str]) -> Optional[str]:
        resolution = self.resolver.resolve(locator)
        if isinstance(resolution, NotFound):
            return None
        return read(resolution.handle)

    def get_text(self, locator: Locator) -> Optional[str]:
        """Visible text of the element, None if it is not present."""
        return self._read(locator, lambda el: el.get_text())

    def get_value(self, locator: Locator) -> Optional[str]:
        return self._read(locator, lambda el: el.get_attribute("value"))

    def get_css(self, locator: Locator, attribute: str) -> Optional[str]:
        return self._read(locator, lambda el: el.get_css_value(attribute))

    def get_location(self) -> str:
        """Current URL."""
        return self.session.current_url

    def get_title(self) -> str:
        return self.session.title

    def get_html_source(self) -> str:
        return self.session.page_source

    def is_text_present(self, expected_text: str) -> bool:
        """Whether the visible text of the page body contains the text."""
        body = self.session.find_element("body")
        if body is None:
            return False
        return expected_text in body.get_text()

    def is_text_present_in_source(self, expected_text: str) -> bool:
        return expected_text in self.session.page_source


def create_actions(
    page,
    recorder: Optional[OutcomeRecorder] = None,
    config: Optional[EngineConfig] = None,
    clock: Optional[Clock] = None,
) -> GuardedActions:
    """
    Create GuardedActions for a Playwright page with sensible defaults.

    Configuration is read from PAGEGUARD_* environment variables when not
    provided.

    Example:
        actions = create_actions(page)
        actions.click(Locator.of("id", "login"))
    """
    from .drivers.playwright import PlaywrightSession

    config = config or EngineConfig.from_env()
    if recorder is None:
        recorder = OutcomeLog(echo=config.echo)
    return GuardedActions(PlaywrightSession(page), recorder=recorder, config=config, clock=clock)
