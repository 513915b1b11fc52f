"""Session configuration and profile loading.

Handles:
- The explicit :class:`SessionConfig` passed to the scheduler and the
  statistics engine (no process-wide flags).
- Loading default settings from a YAML profile.
- Merging CLI options over profile values.
- Validating the final configuration before any trial runs.
"""

from __future__ import annotations

import logging
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from bestof.bench.stats import PERCENTILE_METHODS
from bestof.formatting import UNITS, parse_duration

log = logging.getLogger("bestof")

OUTPUT_FORMATS = ("text", "json", "csv")


# ---------------------------------------------------------------------------
# SessionConfig
# ---------------------------------------------------------------------------


@dataclass
class SessionConfig:
    """Resolved configuration for one benchmarking session."""

    # What to run
    command: list[str] = field(default_factory=list)

    # Trial control
    trials: int = 10
    concurrency: int = 1
    delay_s: float = 0.0  # Slept before each trial's timer starts
    quiet: bool = False  # Discard the child's stdout/stderr

    # Statistics
    percentiles: bool = False
    percentile_method: str = "linear"

    # Presentation
    unit: str = "s"
    output_format: str = "text"
    progress: bool = False
    color: bool = True

    @property
    def program(self) -> str:
        """The executable to run."""
        return self.command[0] if self.command else ""

    @property
    def args(self) -> list[str]:
        """Arguments passed to the executable."""
        return list(self.command[1:])


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


@dataclass
class ValidationError:
    """A single configuration validation error."""

    field: str
    message: str
    severity: str = "error"  # "error" or "warning"


def validate_config(config: SessionConfig) -> list[ValidationError]:
    """Validate a session configuration.

    Returns a list of validation errors.  Empty list means valid.
    """
    errors: list[ValidationError] = []

    if not config.command:
        errors.append(ValidationError(field="command", message="No command given to benchmark."))

    if config.trials < 1:
        errors.append(
            ValidationError(
                field="trials",
                message=f"Number of runs must be at least 1 (got {config.trials}).",
            )
        )

    if config.concurrency < 1:
        errors.append(
            ValidationError(
                field="concurrency",
                message=f"Concurrency must be at least 1 (got {config.concurrency}).",
            )
        )
    elif config.trials >= 1 and config.concurrency > config.trials:
        errors.append(
            ValidationError(
                field="concurrency",
                message=(
                    f"Concurrency {config.concurrency} exceeds the number of runs "
                    f"({config.trials}); no run will wait for a slot."
                ),
                severity="warning",
            )
        )

    if config.delay_s < 0:
        errors.append(
            ValidationError(
                field="delay_s",
                message=f"Wait time cannot be negative (got {config.delay_s}).",
            )
        )

    if config.unit not in UNITS:
        errors.append(
            ValidationError(
                field="unit",
                message=(
                    f"Unknown output format: {config.unit!r}. "
                    f"Valid units: {', '.join(UNITS)}"
                ),
            )
        )

    if config.output_format not in OUTPUT_FORMATS:
        errors.append(
            ValidationError(
                field="output_format",
                message=(
                    f"Unknown output type: {config.output_format!r}. "
                    f"Valid types: {', '.join(OUTPUT_FORMATS)}"
                ),
            )
        )

    if config.percentile_method not in PERCENTILE_METHODS:
        errors.append(
            ValidationError(
                field="percentile_method",
                message=(
                    f"Unknown percentile method: {config.percentile_method!r}. "
                    f"Valid methods: {', '.join(PERCENTILE_METHODS)}"
                ),
            )
        )

    return errors


def check_config(config: SessionConfig) -> None:
    """Log validation warnings and raise on fatal errors.

    Raises:
        ValueError: If any error-severity problem was found.
    """
    errors = validate_config(config)
    for w in errors:
        if w.severity == "warning":
            log.warning("Config warning: %s: %s", w.field, w.message)
    fatal = [e for e in errors if e.severity == "error"]
    if fatal:
        messages = [f"  {e.field}: {e.message}" for e in fatal]
        raise ValueError("Invalid configuration:\n" + "\n".join(messages))


# ---------------------------------------------------------------------------
# YAML profile loading
# ---------------------------------------------------------------------------

_PROFILE_KEYS = {
    "command",
    "runs",
    "concurrency",
    "quiet",
    "wait",
    "percentiles",
    "percentile_method",
    "progress",
    "unit",
    "format",
    "color",
}


def load_profile(profile_path: Path) -> dict[str, Any]:
    """Load session defaults from a YAML file.

    Profile format::

        command: ["curl", "-s", "https://example.com"]
        runs: 20
        concurrency: 4
        wait: 100ms
        quiet: true
        percentiles: true
        unit: ms
        format: json

    ``command`` may also be a single string, which is split with
    shell rules.

    Returns:
        The parsed YAML as a dict.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not a mapping or has unknown keys.
    """
    import yaml

    if not profile_path.exists():
        raise FileNotFoundError(f"Profile not found: {profile_path}")

    try:
        data = yaml.safe_load(profile_path.read_text())
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in profile {profile_path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Profile must be a YAML mapping, got {type(data).__name__}")

    unknown = sorted(set(data) - _PROFILE_KEYS)
    if unknown:
        raise ValueError(
            f"Unknown profile key(s): {', '.join(unknown)}. "
            f"Valid keys: {', '.join(sorted(_PROFILE_KEYS))}"
        )
    return data


def _profile_command(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return shlex.split(value)
    if isinstance(value, list):
        return [str(v) for v in value]
    raise ValueError(f"Profile 'command' must be a string or a list, got {type(value).__name__}")


def _profile_int(profile: dict[str, Any], key: str, default: int) -> int:
    value = profile.get(key, default)
    # bool is an int subclass; reject it along with floats and None.
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Profile {key!r} must be an integer, got {value!r}")
    return value


def _profile_bool(profile: dict[str, Any], key: str, default: bool) -> bool:
    value = profile.get(key, default)
    if not isinstance(value, bool):
        raise ValueError(f"Profile {key!r} must be true or false, got {value!r}")
    return value


def _profile_str(profile: dict[str, Any], key: str, default: str) -> str:
    value = profile.get(key, default)
    if not isinstance(value, str):
        raise ValueError(f"Profile {key!r} must be a string, got {value!r}")
    return value


def config_from_profile(
    profile_data: dict[str, Any],
    *,
    cli_overrides: dict[str, Any] | None = None,
) -> SessionConfig:
    """Build a SessionConfig from profile data and CLI values.

    CLI values that are not ``None`` take precedence over the
    profile. Keys of *cli_overrides* match SessionConfig field names.
    """
    cli = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    profile = profile_data or {}

    wait = profile.get("wait", 0)
    if isinstance(wait, bool) or not isinstance(wait, (str, int, float)):
        raise ValueError(f"Profile 'wait' must be a duration, got {wait!r}")
    try:
        delay_s = parse_duration(wait)
    except ValueError as exc:
        raise ValueError(f"Profile 'wait': {exc}") from exc

    config = SessionConfig(
        command=_profile_command(profile.get("command")),
        trials=_profile_int(profile, "runs", 10),
        concurrency=_profile_int(profile, "concurrency", 1),
        delay_s=delay_s,
        quiet=_profile_bool(profile, "quiet", False),
        percentiles=_profile_bool(profile, "percentiles", False),
        percentile_method=_profile_str(profile, "percentile_method", "linear"),
        unit=_profile_str(profile, "unit", "s"),
        output_format=_profile_str(profile, "format", "text"),
        progress=_profile_bool(profile, "progress", False),
        color=_profile_bool(profile, "color", True),
    )

    if cli.get("command"):
        config.command = list(cli["command"])
    for name in (
        "trials",
        "concurrency",
        "delay_s",
        "quiet",
        "percentiles",
        "percentile_method",
        "unit",
        "output_format",
        "progress",
        "color",
    ):
        if name in cli:
            setattr(config, name, cli[name])

    return config
