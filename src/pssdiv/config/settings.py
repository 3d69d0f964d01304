"""Detector settings: immutable configuration with environment overrides.

Environment variables:
    PSSDIV_VALIDATE_ENTRIES -- "true"/"false": check mapping element
                               invariants before classification
    PSSDIV_LOG_LEVEL        -- DEBUG, INFO, WARNING or ERROR
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from pssdiv.errors import ConfigError

RESULT_NAME = "PSS_Divergences"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class DetectorConfig:
    """Immutable configuration for a divergence detection run.

    Attributes
    ----------
    validate_entries : bool
        Check every mapping element against its per-state invariants and
        fail on the first malformed one. Off by default: the mapping stage
        is trusted.
    log_level : str
        Minimum structlog level, one of ``LOG_LEVELS``.
    result_name : str
        Name under which the detector's results are reported.
    """

    validate_entries: bool = False
    log_level: str = "INFO"
    result_name: str = RESULT_NAME

    def __post_init__(self) -> None:
        if self.log_level not in LOG_LEVELS:
            raise ConfigError(
                f"Invalid log level {self.log_level!r}; expected one of {', '.join(LOG_LEVELS)}"
            )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "DetectorConfig":
        """Build a config from ``PSSDIV_*`` environment variables.

        Unset variables fall back to the dataclass defaults.
        """
        env = os.environ if environ is None else environ
        return cls(
            validate_entries=_parse_bool(
                "PSSDIV_VALIDATE_ENTRIES", env.get("PSSDIV_VALIDATE_ENTRIES", "false")
            ),
            log_level=env.get("PSSDIV_LOG_LEVEL", "INFO").strip().upper(),
        )


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")
