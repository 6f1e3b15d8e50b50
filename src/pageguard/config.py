"""
Engine configuration.

Timeouts are the only tunable behaviour of the engine. Defaults can be
overridden in code or through environment variables:

  PAGEGUARD_TIMEOUT        - default wait in seconds (default: 5)
  PAGEGUARD_POLL_INTERVAL  - pause between condition checks (default: 0.1)
  PAGEGUARD_ECHO           - print every outcome as it is recorded (default: off)
"""

import os
from dataclasses import dataclass

from .errors import ConfigurationError

DEFAULT_TIMEOUT = 5.0
DEFAULT_POLL_INTERVAL = 0.1

TRUTHY = {"1", "true", "yes", "on"}


def _float_from_env(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None
    if value < 0:
        raise ConfigurationError(f"{name} must not be negative, got {raw!r}")
    return value


@dataclass
class EngineConfig:
    """Configuration for waits and outcome echoing."""

    timeout: float = DEFAULT_TIMEOUT  # Default wait per condition, in seconds
    poll_interval: float = DEFAULT_POLL_INTERVAL  # Time between checks
    echo: bool = False  # Print outcomes as they are recorded

    def __post_init__(self):
        if self.timeout < 0:
            raise ConfigurationError(f"timeout must not be negative, got {self.timeout}")
        if self.poll_interval < 0:
            raise ConfigurationError(
                f"poll_interval must not be negative, got {self.poll_interval}"
            )

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Build a configuration from PAGEGUARD_* environment variables."""
        return cls(
            timeout=_float_from_env("PAGEGUARD_TIMEOUT", DEFAULT_TIMEOUT),
            poll_interval=_float_from_env("PAGEGUARD_POLL_INTERVAL", DEFAULT_POLL_INTERVAL),
            echo=os.environ.get("PAGEGUARD_ECHO", "").strip().lower() in TRUTHY,
        )
