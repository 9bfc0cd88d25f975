"""
Plan use case — show the command lines a run would issue.

Nothing is executed. Executable paths are resolved the same way a
run resolves them; the auth token is masked.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from snyk_task.adapters.base import TaskHost
from snyk_task.adapters.shell.command import ProcessRunner, redact
from snyk_task.core.config.loader import load_step_configuration
from snyk_task.core.engine.arguments import TOOLS
from snyk_task.core.engine.executor import planned_commands
from snyk_task.core.engine.privilege import resolve_elevation
from snyk_task.core.errors import StepError, ToolNotFoundError
from snyk_task.core.models.execution import CommandKind
from snyk_task.core.services.reports import report_paths

_TOKEN_PLACEHOLDER = "<token>"


@dataclass
class PlannedCommand:
    kind: CommandKind
    command: list[str]
    resolved: bool = True

    @property
    def line(self) -> str:
        return " ".join(self.command)


@dataclass
class PlanResult:
    commands: list[PlannedCommand] = field(default_factory=list)
    elevated: bool = False
    error: str | None = None

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        return {
            "elevated": self.elevated,
            "commands": [
                {"kind": c.kind.value, "command": c.command, "resolved": c.resolved}
                for c in self.commands
            ],
        }


def plan_task(host: TaskHost) -> PlanResult:
    """Plan the commands of a fully successful run against ``host``."""
    result = PlanResult()
    try:
        config = load_step_configuration(host)
    except StepError as e:
        result.error = e.message
        return result

    token = host.get_auth_token() or _TOKEN_PLACEHOLDER
    json_path = ""
    if config.json_report:
        json_path = str(report_paths(config, host, datetime.now(UTC))[0])

    runner = ProcessRunner(host.which)
    result.elevated = resolve_elevation(host)

    for kind, args in planned_commands(config, token, json_path):
        tool = TOOLS[kind]
        try:
            command = runner.resolve_command(tool, args, elevate=result.elevated)
            resolved = True
        except ToolNotFoundError:
            command = [tool, *args]
            resolved = False
        result.commands.append(
            PlannedCommand(kind=kind, command=redact(command, [token]), resolved=resolved)
        )
    return result
