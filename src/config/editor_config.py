"""Editor configuration: shared passphrases, polling and store tuning.

This module defines the configuration the composition root needs to
build an editor session, with environment variable overrides.

Environment Variables:
- APP_ENV: "production" selects JSON logs (default: development)
- CHAIR_PASSPHRASE: Shared chair passphrase
- COMMITTEE_PASSPHRASES_JSON: JSON object of committee -> passphrase,
  merged over the defaults (e.g. '{"unep": "s3cret"}')
- TIMER_POLL_INTERVAL_SECONDS: Countdown display poll interval
  (default: 1.0, min: 0.1, max: 60)
- MAX_TRANSACTION_ATTEMPTS: Optimistic transaction attempts
  (default: 25, min: 1, max: 100)
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from src.domain.models.committee import CommitteeId


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float_env(key: str, default: float) -> float:
    """Get float environment variable with default."""
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _parse_passphrases(raw: str) -> dict[CommitteeId, str]:
    """Parse COMMITTEE_PASSPHRASES_JSON.

    Raises:
        ValueError: If the value is not a JSON object of known committee
            names to strings.
    """
    try:
        document = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"COMMITTEE_PASSPHRASES_JSON is not valid JSON: {exc}") from exc
    if not isinstance(document, dict):
        raise ValueError("COMMITTEE_PASSPHRASES_JSON must be a JSON object")

    parsed: dict[CommitteeId, str] = {}
    for name, passphrase in document.items():
        if not isinstance(passphrase, str):
            raise ValueError(f"Passphrase for committee '{name}' must be a string")
        parsed[CommitteeId.parse(name)] = passphrase
    return parsed


# =============================================================================
# Credentials
# =============================================================================

DEFAULT_CHAIR_PASSPHRASE = "resolutions@26"

DEFAULT_COMMITTEE_PASSPHRASES: Mapping[CommitteeId, str] = {
    CommitteeId.UNEP: "un#p26",
    CommitteeId.SECURITY: "$ecur!ty",
    CommitteeId.ECOSOC: "ec0s0c",
    CommitteeId.UNESCO: "un3sco2026",
    CommitteeId.NATO: "n@t0",
    CommitteeId.WHO: "wh022",
    CommitteeId.HRC: "#rc24",
    CommitteeId.UNWOMEN: "wom(26)",
    CommitteeId.DISEC: "d!sec26",
}

# =============================================================================
# Timer polling
# =============================================================================

DEFAULT_TIMER_POLL_INTERVAL_SECONDS = 1.0
MIN_TIMER_POLL_INTERVAL_SECONDS = 0.1
MAX_TIMER_POLL_INTERVAL_SECONDS = 60.0

# =============================================================================
# Store transactions
# =============================================================================

DEFAULT_MAX_TRANSACTION_ATTEMPTS = 25
MIN_TRANSACTION_ATTEMPTS = 1
MAX_TRANSACTION_ATTEMPTS = 100


@dataclass(frozen=True)
class EditorConfig:
    """Configuration for one editor deployment.

    Attributes:
        environment: "production" or "development"; selects log rendering.
        chair_passphrase: Shared chair passphrase.
        committee_passphrases: Passphrase for every committee.
        timer_poll_interval_seconds: Countdown display poll interval.
                                     Default: 1.0. Range: 0.1 to 60.
        max_transaction_attempts: Attempts before a conflicting store
                                  transaction gives up.
                                  Default: 25. Range: 1 to 100.
    """

    environment: str = "development"
    chair_passphrase: str = DEFAULT_CHAIR_PASSPHRASE
    committee_passphrases: Mapping[CommitteeId, str] = field(
        default_factory=lambda: dict(DEFAULT_COMMITTEE_PASSPHRASES)
    )
    timer_poll_interval_seconds: float = DEFAULT_TIMER_POLL_INTERVAL_SECONDS
    max_transaction_attempts: int = DEFAULT_MAX_TRANSACTION_ATTEMPTS

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not self.chair_passphrase:
            raise ValueError("chair_passphrase must not be empty")
        missing = [c.value for c in CommitteeId if not self.committee_passphrases.get(c)]
        if missing:
            raise ValueError(f"committee passphrases missing for: {', '.join(missing)}")
        if (
            not MIN_TIMER_POLL_INTERVAL_SECONDS
            <= self.timer_poll_interval_seconds
            <= MAX_TIMER_POLL_INTERVAL_SECONDS
        ):
            raise ValueError(
                f"timer_poll_interval_seconds must be between "
                f"{MIN_TIMER_POLL_INTERVAL_SECONDS} and {MAX_TIMER_POLL_INTERVAL_SECONDS}, "
                f"got {self.timer_poll_interval_seconds}"
            )
        if not MIN_TRANSACTION_ATTEMPTS <= self.max_transaction_attempts <= MAX_TRANSACTION_ATTEMPTS:
            raise ValueError(
                f"max_transaction_attempts must be between {MIN_TRANSACTION_ATTEMPTS} "
                f"and {MAX_TRANSACTION_ATTEMPTS}, got {self.max_transaction_attempts}"
            )

    @property
    def is_production(self) -> bool:
        """True when running with production logging."""
        return self.environment == "production"

    @classmethod
    def from_environment(cls) -> EditorConfig:
        """Create config from environment variables with defaults.

        Numeric values outside their range are clamped. Passphrase
        overrides are merged over the defaults.

        Returns:
            EditorConfig with values from environment or defaults.

        Raises:
            ValueError: If COMMITTEE_PASSPHRASES_JSON is malformed or names
                an unknown committee.
        """
        passphrases = dict(DEFAULT_COMMITTEE_PASSPHRASES)
        raw = os.environ.get("COMMITTEE_PASSPHRASES_JSON")
        if raw:
            passphrases.update(_parse_passphrases(raw))

        poll_interval = _get_float_env(
            "TIMER_POLL_INTERVAL_SECONDS",
            DEFAULT_TIMER_POLL_INTERVAL_SECONDS,
        )
        # Clamp to valid range
        poll_interval = max(
            MIN_TIMER_POLL_INTERVAL_SECONDS,
            min(poll_interval, MAX_TIMER_POLL_INTERVAL_SECONDS),
        )

        attempts = _get_int_env("MAX_TRANSACTION_ATTEMPTS", DEFAULT_MAX_TRANSACTION_ATTEMPTS)
        # Clamp to valid range
        attempts = max(MIN_TRANSACTION_ATTEMPTS, min(attempts, MAX_TRANSACTION_ATTEMPTS))

        return cls(
            environment=os.environ.get("APP_ENV", "development"),
            chair_passphrase=os.environ.get("CHAIR_PASSPHRASE") or DEFAULT_CHAIR_PASSPHRASE,
            committee_passphrases=passphrases,
            timer_poll_interval_seconds=poll_interval,
            max_transaction_attempts=attempts,
        )


# Pre-defined configurations for common use cases

DEFAULT_EDITOR_CONFIG = EditorConfig()

# Fast polling and few retries for tests
TEST_EDITOR_CONFIG = EditorConfig(
    timer_poll_interval_seconds=MIN_TIMER_POLL_INTERVAL_SECONDS,
    max_transaction_attempts=DEFAULT_MAX_TRANSACTION_ATTEMPTS,
)
