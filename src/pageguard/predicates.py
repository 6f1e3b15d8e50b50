"""
State predicates and explicit waits.

Each predicate answers one question about the live page right now:
present, displayed, enabled, checked, or whether an alert, confirmation or
prompt is open. Predicates re-resolve the locator on every call and treat an
element that is missing (or detaches mid-check) as a plain "no".

Each ``wait_for_*`` method polls one predicate for up to ``timeout`` seconds
and records exactly one OutcomeRecord, which it also returns.

    ```python
    checks = StatePredicates(session)
    login = Locator.of("id", "login")

    if checks.is_element_displayed(login):
        ...

    outcome = checks.wait_for_element_enabled(login, timeout=10)
    assert outcome.passed, outcome.actual
    ```
"""

from functools import partial
from typing import Callable, Optional

from .config import EngineConfig
from .drivers.base import BrowserSession, ElementHandle
from .errors import NoDialogPresentError, StaleElementError
from .locators import Locator, LocatorResolver, NotFound
from .outcome import OutcomeLog, OutcomeRecord, OutcomeRecorder, Result
from .polling import Clock, PollResult, SystemClock, poll_until


def format_seconds(seconds: float) -> str:
    """Seconds as shown in outcome messages: 5, 0.25, 1.002."""
    return f"{round(seconds, 3):g}"


class StatePredicates:
    """
    Predicates and waits bound to one browser session.

    Args:
        session: The BrowserSession to inspect
        recorder: Where outcome records go (defaults to an OutcomeLog)
        config: Timeouts and echo setting (defaults to EngineConfig())
        clock: Time source for polling (defaults to SystemClock)
    """

    def __init__(
        self,
        session: BrowserSession,
        recorder: Optional[OutcomeRecorder] = None,
        config: Optional[EngineConfig] = None,
        clock: Optional[Clock] = None,
    ):
        self.session = session
        self.config = config or EngineConfig()
        self.recorder = recorder if recorder is not None else OutcomeLog(echo=self.config.echo)
        self.clock = clock or SystemClock()
        self.resolver = LocatorResolver(session)

    # ------------------------------------------------------------------
    # plumbing
    # ------------------------------------------------------------------

    def _timeout(self, timeout: Optional[float]) -> float:
        return self.config.timeout if timeout is None else float(timeout)

    def _poll(self, check: Callable[[], bool], timeout: float) -> PollResult:
        return poll_until(check, timeout, clock=self.clock, interval=self.config.poll_interval)

    def _await(self, check: Callable[[], bool], timeout: Optional[float] = None) -> bool:
        """Silent wait: True at once if the check passes, else poll for it."""
        if check():
            return True
        return self._poll(check, self._timeout(timeout)).satisfied

    def _since(self, start: float) -> float:
        return max(self.clock.now() - start, 0.0)

    def _record(
        self,
        action: str,
        expected: str,
        actual: str,
        result: Result,
        elapsed: Optional[float] = None,
    ) -> OutcomeRecord:
        return self.recorder.record_action(action, expected, actual, result, elapsed)

    # ------------------------------------------------------------------
    # silent checks
    # ------------------------------------------------------------------

    def _present(self, locator: Locator) -> bool:
        return not isinstance(self.resolver.resolve(locator), NotFound)

    def _element_state(self, locator: Locator, state: Callable[[ElementHandle], bool]) -> bool:
        resolution = self.resolver.resolve(locator)
        if isinstance(resolution, NotFound):
            return False
        try:
            return bool(state(resolution.handle))
        except StaleElementError:
            return False

    def _displayed(self, locator: Locator) -> bool:
        return self._element_state(locator, lambda el: el.is_displayed())

    def _enabled(self, locator: Locator) -> bool:
        return self._element_state(locator, lambda el: el.is_enabled())

    def _checked(self, locator: Locator) -> bool:
        return self._element_state(locator, lambda el: el.is_selected())

    def _dialog_open(self) -> bool:
        try:
            self.session.switch_to_alert()
            return True
        except NoDialogPresentError:
            return False
        finally:
            self.session.switch_to_default_content()

    # ------------------------------------------------------------------
    # public predicates
    # ------------------------------------------------------------------

    def is_element_present(self, locator: Locator, record: bool = False) -> bool:
        """Whether any element matches the locator."""
        if record:
            self.recorder.record_expected(f"Checking for {locator} to be present")
        return self._present(locator)

    def is_element_displayed(self, locator: Locator, record: bool = False) -> bool:
        if record:
            self.recorder.record_expected(f"Checking for {locator} to be displayed")
        return self._displayed(locator)

    def is_element_enabled(self, locator: Locator, record: bool = False) -> bool:
        if record:
            self.recorder.record_expected(f"Checking for {locator} to be enabled")
        return self._enabled(locator)

    def is_element_checked(self, locator: Locator, record: bool = False) -> bool:
        """Whether a checkbox/radio is checked (or an option selected)."""
        if record:
            self.recorder.record_expected(f"Checking for {locator} to be checked")
        return self._checked(locator)

    def is_alert_present(self, record: bool = False) -> bool:
        if record:
            self.recorder.record_expected("Checking for alert to be present")
        return self._dialog_open()

    def is_confirmation_present(self, record: bool = False) -> bool:
        if record:
            self.recorder.record_expected("Checking for confirmation to be present")
        return self._dialog_open()

    def is_prompt_present(self, record: bool = False) -> bool:
        if record:
            self.recorder.record_expected("Checking for prompt to be present")
        return self._dialog_open()

    # ------------------------------------------------------------------
    # element waits
    # ------------------------------------------------------------------

    def _wait_for_element(
        self,
        locator: Locator,
        timeout: Optional[float],
        state: str,
        check: Callable[[Locator], bool],
        negated: bool = False,
        require_present: bool = False,
    ) -> OutcomeRecord:
        timeout = self._timeout(timeout)
        target = f"not be {state}" if negated else f"be {state}"
        action = f"Wait up to {format_seconds(timeout)} seconds for {locator} to {target}"
        expected = f"{locator} is {'not ' if negated else ''}{state}"
        start = self.clock.now()

        if require_present and not self._present(locator):
            presence = self._poll(partial(self._present, locator), timeout)
            if not presence.satisfied:
                return self._record(
                    action,
                    expected,
                    f"After waiting {format_seconds(presence.elapsed)} seconds "
                    f"for {locator} is not present",
                    Result.FAILURE,
                    presence.elapsed,
                )

        if negated:
            poll = self._poll(lambda: not check(locator), timeout)
        else:
            poll = self._poll(partial(check, locator), timeout)
        elapsed = self._since(start) if require_present else poll.elapsed

        if not poll.satisfied:
            still = "is still" if negated else "is not"
            return self._record(
                action,
                expected,
                f"After waiting {format_seconds(elapsed)} seconds for {locator} {still} {state}",
                Result.FAILURE,
                elapsed,
            )
        return self._record(
            action,
            expected,
            f"Waited {format_seconds(elapsed)} seconds for {locator} to {target}",
            Result.SUCCESS,
            elapsed,
        )

    def wait_for_element_present(
        self, locator: Locator, timeout: Optional[float] = None
    ) -> OutcomeRecord:
        """Wait until the element is in the document."""
        return self._wait_for_element(locator, timeout, "present", self._present)

    def wait_for_element_not_present(
        self, locator: Locator, timeout: Optional[float] = None
    ) -> OutcomeRecord:
        """Wait until no element matches the locator."""
        return self._wait_for_element(locator, timeout, "present", self._present, negated=True)

    def wait_for_element_displayed(
        self, locator: Locator, timeout: Optional[float] = None
    ) -> OutcomeRecord:
        """
        Wait until the element is visible.

        If the element is not even present, presence is awaited first with its
        own budget of ``timeout`` seconds.
        """
        return self._wait_for_element(
            locator, timeout, "displayed", self._displayed, require_present=True
        )

    def wait_for_element_not_displayed(
        self, locator: Locator, timeout: Optional[float] = None
    ) -> OutcomeRecord:
        """Wait until the element is hidden. A missing element counts as hidden."""
        return self._wait_for_element(
            locator, timeout, "displayed", self._displayed, negated=True
        )

    def wait_for_element_enabled(
        self, locator: Locator, timeout: Optional[float] = None
    ) -> OutcomeRecord:
        return self._wait_for_element(
            locator, timeout, "enabled", self._enabled, require_present=True
        )

    def wait_for_element_not_enabled(
        self, locator: Locator, timeout: Optional[float] = None
    ) -> OutcomeRecord:
        """Wait until the element is disabled. A missing element counts as disabled."""
        return self._wait_for_element(locator, timeout, "enabled", self._enabled, negated=True)

    # ------------------------------------------------------------------
    # dialog waits
    # ------------------------------------------------------------------

    def _wait_for_dialog(self, noun: str, article: str, timeout: Optional[float]) -> OutcomeRecord:
        timeout = self._timeout(timeout)
        action = f"Wait up to {format_seconds(timeout)} seconds for {article} {noun} to be present"
        expected = f"{article.capitalize()} {noun} is present"

        poll = self._poll(self._dialog_open, timeout)
        seconds = format_seconds(poll.elapsed)
        if not poll.satisfied:
            return self._record(
                action,
                expected,
                f"After waiting {seconds} seconds, {article} {noun} is not present",
                Result.FAILURE,
                poll.elapsed,
            )
        return self._record(
            action,
            expected,
            f"Waited {seconds} seconds for {article} {noun} to be present",
            Result.SUCCESS,
            poll.elapsed,
        )

    def wait_for_alert_present(self, timeout: Optional[float] = None) -> OutcomeRecord:
        return self._wait_for_dialog("alert", "an", timeout)

    def wait_for_confirmation_present(self, timeout: Optional[float] = None) -> OutcomeRecord:
        return self._wait_for_dialog("confirmation", "a", timeout)

    def wait_for_prompt_present(self, timeout: Optional[float] = None) -> OutcomeRecord:
        return self._wait_for_dialog("prompt", "a", timeout)
