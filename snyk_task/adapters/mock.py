"""
Mock host and runner — test doubles for the task's collaborators.

The mock host answers inputs and executable lookups from dictionaries
and records what the task reports. The mock runner resolves command
lines exactly like the real one but returns scripted exit codes
instead of starting processes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from snyk_task.adapters.base import Platform, TaskHost, TaskResult
from snyk_task.adapters.shell.command import ProcessRunner
from snyk_task.core.errors import ConfigError
from snyk_task.core.models.execution import ExecOptions

DEFAULT_WHICH = {
    "npm": "/usr/bin/npm",
    "snyk": "/usr/bin/snyk",
    "snyk-to-html": "/usr/bin/snyk-to-html",
    "sudo": "/usr/bin/sudo",
}


class MockTaskHost(TaskHost):
    """In-memory task host.

    Args:
        inputs: Step inputs by name.
        which: Executable paths by tool name.
        platform: Platform to report, or an exception instance to raise.
        auth_token: Token returned by ``get_auth_token``.
    """

    def __init__(
        self,
        inputs: dict[str, Any] | None = None,
        which: dict[str, str] | None = None,
        platform: Platform | Exception = Platform.LINUX,
        auth_token: str = "test-token",
        cwd: str = "/work",
    ):
        self._inputs = dict(inputs or {})
        self._which = dict(DEFAULT_WHICH if which is None else which)
        self._platform = platform
        self._auth_token = auth_token
        self._cwd = cwd
        self.results: list[tuple[TaskResult, str]] = []
        self.attachments: list[tuple[str, str, str]] = []

    @property
    def name(self) -> str:
        return "mock"

    @property
    def result(self) -> TaskResult | None:
        return self.results[0][0] if self.results else None

    @property
    def message(self) -> str:
        return self.results[0][1] if self.results else ""

    def get_input(self, name: str, required: bool = False) -> str:
        value = self._inputs.get(name)
        if isinstance(value, bool):
            value = "true" if value else "false"
        value = "" if value is None else str(value)
        if required and not value:
            raise ConfigError(f"Input required: {name}")
        return value

    def get_bool_input(self, name: str, default: bool = False) -> bool:
        value = self.get_input(name)
        if not value:
            return default
        return value.lower() == "true"

    def which(self, tool: str) -> str:
        return self._which.get(tool, "")

    def get_platform(self) -> Platform:
        if isinstance(self._platform, Exception):
            raise self._platform
        return self._platform

    def get_auth_token(self) -> str:
        return self._auth_token

    def set_result(self, result: TaskResult, message: str = "") -> None:
        if self.results:
            raise RuntimeError("Task result already reported")
        self.results.append((result, message))

    def add_attachment(self, attachment_type: str, name: str, path: str) -> None:
        self.attachments.append((attachment_type, name, path))

    def cwd(self) -> str:
        return self._cwd


@dataclass
class ProcessCall:
    """One command the mock runner was asked to run."""

    command: list[str]
    options: ExecOptions

    @property
    def line(self) -> str:
        return " ".join(self.command)


@dataclass
class MockProcessRunner(ProcessRunner):
    """Runner that records commands and returns scripted exit codes.

    ``exit_codes`` is keyed by ``"<tool> <first arg>"`` (e.g.
    ``"snyk test"``, ``"npm install"``, ``"snyk-to-html -i"``); unknown
    commands exit 0. A stdout sink is always created, as the real runner
    does; ``outputs`` uses the same keys and supplies its contents.
    """

    host: TaskHost = field(default_factory=MockTaskHost)
    exit_codes: dict[str, int] = field(default_factory=dict)
    outputs: dict[str, str] = field(default_factory=dict)
    calls: list[ProcessCall] = field(default_factory=list)

    def __post_init__(self) -> None:
        super().__init__(self.host.which)
        self._current_key = ""

    @property
    def call_count(self) -> int:
        return len(self.calls)

    @property
    def lines(self) -> list[str]:
        return [c.line for c in self.calls]

    def execute(self, tool, args, options, *, elevate=False):  # type: ignore[override]
        self._current_key = f"{tool} {args[0]}" if args else tool
        return super().execute(tool, args, options, elevate=elevate)

    def _spawn(self, command: list[str], options: ExecOptions) -> tuple[int, str]:
        self.calls.append(ProcessCall(command=list(command), options=options))
        if options.out_file:
            output = self.outputs.get(self._current_key, "")
            Path(options.out_file).write_text(output, encoding="utf-8")
        return self.exit_codes.get(self._current_key, 0), ""

    def reset(self) -> None:
        """Clear recorded calls."""
        self.calls.clear()
