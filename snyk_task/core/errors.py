"""
Step errors — the single failure channel of a task run.

Every fatal condition is a ``StepError`` carrying a kind and a
message. Errors are raised inside the run and caught exactly once,
at the controller boundary, where they become the failed verdict.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Why a run failed."""

    CONFIGURATION = "configuration"   # bad or missing input, before any process
    POLICY = "policy"                 # the scan found issues
    TOOL = "tool"                     # the CLI was misused or crashed
    ENVIRONMENT = "environment"       # executable missing, cannot start


class StepError(Exception):
    """A fatal condition that ends the run."""

    default_kind: ErrorKind = ErrorKind.TOOL

    def __init__(self, message: str, kind: ErrorKind | None = None):
        super().__init__(message)
        self.message = message
        self.kind = kind or self.default_kind

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} kind={self.kind.value} message={self.message!r}>"


class ConfigError(StepError):
    """Raised when step inputs are invalid or missing."""

    default_kind = ErrorKind.CONFIGURATION


class ToolNotFoundError(StepError):
    """Raised when an executable cannot be located or started."""

    default_kind = ErrorKind.ENVIRONMENT
