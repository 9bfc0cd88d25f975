"""
Exit-code classifier — what each CLI exit code means for the run.

The test command separates "issues found" (1) from misuse or internal
errors (2 and up): only the former is gated by ``fail_on_issues``.
The monitor command has no issues-found code; any nonzero is an
error, and 2 points at a bad file or image reference. Install, auth
and report formatting are never fatal on their own.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from snyk_task.core.errors import ErrorKind, StepError
from snyk_task.core.models.execution import CommandKind

CLI_EXIT_CODE_SUCCESS = 0
CLI_EXIT_CODE_ISSUES_FOUND = 1
CLI_EXIT_CODE_INVALID_USE = 2
SNYK_MONITOR_EXIT_CODE_SUCCESS = 0
SNYK_MONITOR_EXIT_INVALID_FILE_OR_IMAGE = 2

TEST_ISSUES_FOUND_MESSAGE = "failing task because `snyk test` found issues"
TEST_INVALID_USE_MESSAGE = (
    "failing task because `snyk test` was improperly used or had other errors"
)
MONITOR_ERROR_MESSAGE = "failing task because `snyk monitor` had an error"
MONITOR_INVALID_FILE_OR_IMAGE_MESSAGE = (
    "failing task because `snyk monitor` had an error - unknown file or image"
)


class Outcome(str, Enum):
    SUCCESS = "success"
    POLICY_FAILURE = "policy-failure"
    TOOL_ERROR = "tool-error"


@dataclass(frozen=True)
class Classification:
    """How one exit code affects the run."""

    kind: CommandKind
    exit_code: int
    outcome: Outcome
    fatal: bool = False
    message: str = ""

    @property
    def error_kind(self) -> ErrorKind | None:
        if self.outcome is Outcome.POLICY_FAILURE:
            return ErrorKind.POLICY
        if self.outcome is Outcome.TOOL_ERROR:
            return ErrorKind.TOOL
        return None

    def raise_if_fatal(self) -> None:
        """Unwind the run when this classification ends it."""
        if self.fatal:
            raise StepError(self.message, kind=self.error_kind)


def _non_fatal(kind: CommandKind, exit_code: int) -> Classification:
    outcome = Outcome.SUCCESS if exit_code == CLI_EXIT_CODE_SUCCESS else Outcome.TOOL_ERROR
    return Classification(kind=kind, exit_code=exit_code, outcome=outcome)


def classify_test(exit_code: int, fail_on_issues: bool) -> Classification:
    if exit_code == CLI_EXIT_CODE_SUCCESS:
        return Classification(CommandKind.TEST, exit_code, Outcome.SUCCESS)
    if exit_code == CLI_EXIT_CODE_ISSUES_FOUND:
        return Classification(
            CommandKind.TEST,
            exit_code,
            Outcome.POLICY_FAILURE,
            fatal=fail_on_issues,
            message=TEST_ISSUES_FOUND_MESSAGE,
        )
    # >= 2, or killed by a signal (negative)
    return Classification(
        CommandKind.TEST,
        exit_code,
        Outcome.TOOL_ERROR,
        fatal=True,
        message=TEST_INVALID_USE_MESSAGE,
    )


def classify_monitor(exit_code: int) -> Classification:
    if exit_code == SNYK_MONITOR_EXIT_CODE_SUCCESS:
        return Classification(CommandKind.MONITOR, exit_code, Outcome.SUCCESS)
    message = MONITOR_ERROR_MESSAGE
    if exit_code == SNYK_MONITOR_EXIT_INVALID_FILE_OR_IMAGE:
        message = MONITOR_INVALID_FILE_OR_IMAGE_MESSAGE
    return Classification(
        CommandKind.MONITOR,
        exit_code,
        Outcome.TOOL_ERROR,
        fatal=True,
        message=message,
    )


def classify(kind: CommandKind, exit_code: int, fail_on_issues: bool = True) -> Classification:
    """Classify ``exit_code`` for the command ``kind``."""
    if kind is CommandKind.TEST:
        return classify_test(exit_code, fail_on_issues)
    if kind is CommandKind.MONITOR:
        return classify_monitor(exit_code)
    return _non_fatal(kind, exit_code)
