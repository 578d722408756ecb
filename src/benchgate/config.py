"""Gate configuration loading.

Handles:
- Loading gate settings from a YAML file.
- Merging CLI options over file values.
- Validating the final configuration before comparing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from benchgate.bench.check import Checker, parse_checker
from benchgate.bench.compare import DEFAULT_ALPHA
from benchgate.errors import CheckerParseError

log = logging.getLogger("benchgate")


@dataclass
class GateConfig:
    """Resolved configuration for one comparison."""

    alpha: float = DEFAULT_ALPHA
    checks: list[str] = field(default_factory=list)

    def checkers(self) -> list[Checker]:
        """Parse every check rule.

        Raises:
            CheckerParseError: On the first rule that does not parse.
        """
        return [parse_checker(text) for text in self.checks]


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


@dataclass
class ValidationError:
    """A single configuration validation error."""

    field: str
    message: str


def validate_config(config: GateConfig) -> list[ValidationError]:
    """Validate a gate configuration.

    Returns a list of validation errors.  Empty list means valid.
    """
    errors: list[ValidationError] = []

    if not 0 < config.alpha < 1:
        errors.append(
            ValidationError(
                field="alpha",
                message=f"Significance level must be between 0 and 1 (got {config.alpha}).",
            )
        )

    for i, text in enumerate(config.checks):
        try:
            parse_checker(text)
        except CheckerParseError as exc:
            errors.append(ValidationError(field=f"checks[{i}]", message=str(exc)))

    return errors


# ---------------------------------------------------------------------------
# YAML loading
# ---------------------------------------------------------------------------


def load_config(config_path: Path) -> dict[str, Any]:
    """Load gate settings from a YAML file.

    Format::

        alpha: 0.05
        checks:
          - time/op=+10%
          - speed=-5%

    Returns:
        The parsed YAML as a dict.
    """
    import yaml

    if not config_path.exists():
        raise FileNotFoundError(f"Config not found: {config_path}")

    data = yaml.safe_load(config_path.read_text())
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config must be a YAML mapping, got {type(data).__name__}")

    return data


def config_from_file(
    data: dict[str, Any],
    *,
    cli_overrides: dict[str, Any] | None = None,
) -> GateConfig:
    """Build a GateConfig from parsed YAML.

    A CLI ``alpha`` replaces the file value; CLI ``checks`` are added
    after the file's checks.
    """
    cli = cli_overrides or {}

    checks = data.get("checks", [])
    if not isinstance(checks, list):
        raise ValueError("Config 'checks' must be a list of check rules")

    alpha = cli.get("alpha")
    if alpha is None:
        alpha = data.get("alpha", DEFAULT_ALPHA)
    try:
        alpha = float(alpha)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Config 'alpha' must be a number, got {alpha!r}") from exc

    config = GateConfig(
        alpha=alpha,
        checks=[str(c) for c in checks] + list(cli.get("checks") or []),
    )
    log.debug("Resolved config: alpha=%s checks=%s", config.alpha, config.checks)
    return config
