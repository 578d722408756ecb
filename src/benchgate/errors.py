"""Exception types raised by benchgate.

User input errors, internal consistency faults and external command
failures are kept apart so that callers can report each one differently.
"""

from __future__ import annotations


class BenchgateError(Exception):
    """Base class for all benchgate errors."""


class CheckerParseError(BenchgateError, ValueError):
    """A checker rule could not be parsed."""

    def __init__(self, rule: str, reason: str) -> None:
        super().__init__(f"invalid check {rule!r}: {reason}")
        self.rule = rule
        self.reason = reason


class InternalConsistencyError(BenchgateError, RuntimeError):
    """Aggregated data broke an invariant the engine relies on.

    This never signals bad input: it means grouping produced something
    the statistics step cannot accept.
    """


class CmdError(BenchgateError):
    """An external command failed.

    Attributes:
        cmd: The command that was attempted, as an argument list.
        output: Combined stdout and stderr captured from the command.
        error: The underlying error, if one was raised.
    """

    def __init__(
        self,
        cmd: list[str],
        output: str = "",
        error: BaseException | str | None = None,
    ) -> None:
        super().__init__(f"command failed: {' '.join(cmd)}: {error}")
        self.cmd = list(cmd)
        self.output = output
        self.error = error
