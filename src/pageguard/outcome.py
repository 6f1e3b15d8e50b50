"""
Outcome records for guarded actions and waits.

Every guarded action or explicit wait produces exactly one OutcomeRecord and
hands it to an OutcomeRecorder. The recorder owns what happens next
(screenshots, HTML reports, console output); the engine never formats files.

OutcomeLog is the default in-memory recorder:

    ```python
    log = OutcomeLog(echo=True)
    actions = GuardedActions(session, recorder=log)
    actions.click(Locator.of("id", "login"))

    print(log.summary())
    for record in log.records:
        print(record.to_dict())
    ```
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class Result(Enum):
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class OutcomeRecord:
    """Result of one guarded action or wait."""

    action: str
    expected: str
    actual: str
    result: Result
    elapsed: Optional[float] = None  # seconds
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def passed(self) -> bool:
        return self.result == Result.SUCCESS

    @property
    def failures(self) -> int:
        """0 on success, 1 on failure, so results can be summed."""
        return 0 if self.passed else 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "action": self.action,
            "expected": self.expected,
            "actual": self.actual,
            "result": "PASS" if self.passed else "FAIL",
            "elapsed": self.elapsed,
            "timestamp": self.timestamp.isoformat(),
        }


class OutcomeRecorder(ABC):
    """
    Consumer of outcome records.

    Implement this to route records into your own reporting.
    """

    @abstractmethod
    def record(self, outcome: OutcomeRecord) -> None:
        """Take ownership of one outcome record."""
        pass

    @abstractmethod
    def record_expected(self, description: str) -> None:
        """Note an explicit state check made by the test."""
        pass

    def record_action(
        self,
        action: str,
        expected: str,
        actual: str,
        result: Result,
        elapsed: Optional[float] = None,
    ) -> OutcomeRecord:
        """Build a record from its parts and record it."""
        outcome = OutcomeRecord(
            action=action,
            expected=expected,
            actual=actual,
            result=result,
            elapsed=elapsed,
        )
        self.record(outcome)
        return outcome


@dataclass
class OutcomeLog(OutcomeRecorder):
    """
    Keeps every outcome in memory.

    With ``echo=True`` each record is also printed as one line.
    """

    records: List[OutcomeRecord] = field(default_factory=list)
    expectations: List[str] = field(default_factory=list)
    echo: bool = False

    def record(self, outcome: OutcomeRecord) -> None:
        self.records.append(outcome)
        if self.echo:
            print(self.format_line(outcome))

    def record_expected(self, description: str) -> None:
        self.expectations.append(description)
        if self.echo:
            print(f"[CHECK] {description}")

    @staticmethod
    def format_line(outcome: OutcomeRecord) -> str:
        status = "PASS" if outcome.passed else "FAIL"
        line = f"[{status}] {outcome.action}: {outcome.actual}"
        if not outcome.passed:
            line += f" (expected: {outcome.expected})"
        return line

    @property
    def failures(self) -> int:
        return sum(r.failures for r in self.records)

    @property
    def passes(self) -> int:
        return sum(1 for r in self.records if r.passed)

    @property
    def last(self) -> Optional[OutcomeRecord]:
        return self.records[-1] if self.records else None

    def failed_records(self) -> List[OutcomeRecord]:
        return [r for r in self.records if not r.passed]

    def summary(self) -> Dict[str, Any]:
        """Generate summary statistics."""
        return {
            "actions": len(self.records),
            "passes": self.passes,
            "failures": self.failures,
            "checks": len(self.expectations),
            "elapsed": round(sum(r.elapsed or 0.0 for r in self.records), 3),
        }

    def reset(self):
        """Clear all captured data."""
        self.records.clear()
        self.expectations.clear()
