"""
Execution models — options, command results, and the verdict.

Options describe how one process is started. A CommandResult is the
exit code of one finished command, consumed by the classifier and
then kept only for the run summary. The Verdict is the single
terminal outcome handed to the host.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field

from snyk_task.core.errors import ErrorKind


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class CommandKind(str, Enum):
    """The external commands a run can issue, in run order."""

    INSTALL = "install"
    AUTH = "auth"
    TEST = "test"
    REPORT = "report"
    MONITOR = "monitor"


class ExecOptions(BaseModel):
    """How a process is started.

    ``env`` is an overlay on the inherited process environment:
    keys are added, never removed.
    """

    cwd: str | None = None
    env: dict[str, str] = Field(default_factory=dict)
    fail_on_stderr: bool = False
    ignore_return_code: bool = True
    out_file: str | None = None     # stdout sink, report steps only
    redact: list[str] = Field(default_factory=list)   # values masked in logs

    def with_env(self, overlay: dict[str, str]) -> ExecOptions:
        """Copy with extra environment variables layered on."""
        return self.model_copy(update={"env": {**self.env, **overlay}})

    def with_out_file(self, path: str) -> ExecOptions:
        """Copy with stdout redirected to ``path``."""
        return self.model_copy(update={"out_file": path})

    def with_redacted(self, *values: str) -> ExecOptions:
        """Copy that masks ``values`` wherever the command line is logged."""
        return self.model_copy(update={"redact": [*self.redact, *values]})


class CommandResult(BaseModel):
    """Exit status of one finished command."""

    kind: CommandKind
    exit_code: int
    command: list[str] = Field(default_factory=list)   # redacted
    started_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0


class Verdict(BaseModel):
    """Terminal state of a run: succeeded, or failed with one message."""

    status: Literal["succeeded", "failed"]
    message: str = ""
    kind: ErrorKind | None = None

    @property
    def ok(self) -> bool:
        """Whether the run succeeded."""
        return self.status == "succeeded"

    @property
    def failed(self) -> bool:
        """Whether the run failed."""
        return self.status == "failed"

    @classmethod
    def succeeded(cls, message: str = "") -> Verdict:
        """Create a success verdict."""
        return cls(status="succeeded", message=message)

    @classmethod
    def failure(cls, message: str, kind: ErrorKind | None = None) -> Verdict:
        """Create a failure verdict."""
        return cls(status="failed", message=message, kind=kind)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
