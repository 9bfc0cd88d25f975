"""
Step controller — the fixed install → auth → test → monitor run.

The controller owns the run's verdict. It validates inputs before any
process starts, runs each command to completion before the next one,
classifies every exit code, and stops at the first fatal condition.
Exactly one verdict is reported to the host, whatever happens.

Flow:
    inputs → configuration → install → auth → test → (report) → (monitor) → verdict
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path

from snyk_task import __version__
from snyk_task.adapters.base import TaskHost, TaskResult
from snyk_task.adapters.shell.command import ProcessRunner, redact
from snyk_task.core.config.loader import load_step_configuration, require_auth_token
from snyk_task.core.engine.arguments import (
    TOOLS,
    args_for_auth,
    args_for_install,
    args_for_monitor,
    args_for_report,
    args_for_test,
    build_args,
)
from snyk_task.core.engine.classifier import Classification, Outcome, classify
from snyk_task.core.engine.privilege import resolve_elevation
from snyk_task.core.errors import ErrorKind, StepError
from snyk_task.core.models.execution import CommandKind, CommandResult, ExecOptions, Verdict
from snyk_task.core.models.step import StepConfiguration
from snyk_task.core.services.reports import (
    HTML_ATTACHMENT_TYPE,
    JSON_ATTACHMENT_TYPE,
    attach_report,
    report_paths,
)

logger = logging.getLogger(__name__)

INTEGRATION_NAME = "AZURE_PIPELINES"
INTEGRATION_NAME_ENV = "SNYK_INTEGRATION_NAME"
INTEGRATION_VERSION_ENV = "SNYK_INTEGRATION_VERSION"


class StepState(str, Enum):
    IDLE = "idle"
    INSTALLING = "installing"
    AUTHENTICATING = "authenticating"
    TESTING = "testing"
    REPORTING = "reporting"
    MONITORING = "monitoring"
    DONE = "done"


@dataclass
class StepReport:
    """What happened during one run."""

    state: StepState = StepState.IDLE
    states: list[StepState] = field(default_factory=list)
    results: list[CommandResult] = field(default_factory=list)
    verdict: Verdict | None = None
    elevated: bool = False
    attachments: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.verdict is not None and self.verdict.ok

    def invoked(self, kind: CommandKind) -> int:
        """How many times ``kind`` was executed."""
        return sum(1 for r in self.results if r.kind is kind)

    @property
    def command_order(self) -> list[CommandKind]:
        return [r.kind for r in self.results]

    def to_dict(self) -> dict:
        return {
            "state": self.state.value,
            "verdict": self.verdict.to_dict() if self.verdict else None,
            "elevated": self.elevated,
            "commands": [r.model_dump(mode="json") for r in self.results],
            "attachments": list(self.attachments),
        }


def base_exec_options(config: StepConfiguration) -> ExecOptions:
    """Options shared by every command in a run."""
    return ExecOptions(
        cwd=config.test_directory,
        fail_on_stderr=False,
        ignore_return_code=True,
    )


def cli_exec_options(
    config: StepConfiguration,
    integration_name: str = INTEGRATION_NAME,
    integration_version: str = __version__,
) -> ExecOptions:
    """Options for ``snyk test`` / ``snyk monitor``: base plus integration env vars."""
    return base_exec_options(config).with_env({
        INTEGRATION_NAME_ENV: integration_name,
        INTEGRATION_VERSION_ENV: integration_version,
    })


def planned_commands(
    config: StepConfiguration,
    token: str,
    json_report_path: str = "",
) -> list[tuple[CommandKind, list[str]]]:
    """Every command a fully successful run issues, in order."""
    kinds = [CommandKind.INSTALL, CommandKind.AUTH, CommandKind.TEST]
    if config.json_report:
        kinds.append(CommandKind.REPORT)
    if config.monitor_on_build:
        kinds.append(CommandKind.MONITOR)
    return [
        (kind, build_args(kind, config, token=token, json_report_path=json_report_path))
        for kind in kinds
    ]


class StepController:
    """Run the task once against a host.

    Args:
        host: Supplies inputs and receives the verdict.
        runner: Process runner (default: a real one resolving through ``host``).
        integration_name: Value for ``SNYK_INTEGRATION_NAME``.
        integration_version: Value for ``SNYK_INTEGRATION_VERSION``.
        clock: Returns "now", used to name report files.
    """

    def __init__(
        self,
        host: TaskHost,
        runner: ProcessRunner | None = None,
        *,
        integration_name: str = INTEGRATION_NAME,
        integration_version: str = __version__,
        clock: Callable[[], datetime] | None = None,
    ):
        self.host = host
        self.runner = runner or ProcessRunner(host.which)
        self.integration_name = integration_name
        self.integration_version = integration_version
        self._clock = clock or (lambda: datetime.now(UTC))
        self.report = StepReport()

    def run(self) -> StepReport:
        """Execute the run and report its verdict to the host.

        Never raises for run failures; they end up in the verdict.
        """
        if self.report.verdict is not None:
            raise RuntimeError("StepController.run() may only be called once")

        try:
            verdict = self._run()
        except StepError as e:
            verdict = Verdict.failure(e.message, kind=e.kind)
        except Exception as e:
            logger.exception("Unexpected error during task run")
            verdict = Verdict.failure(str(e) or e.__class__.__name__, kind=ErrorKind.TOOL)

        self._finish(verdict)
        return self.report

    # ── Run ─────────────────────────────────────────────────────

    def _run(self) -> Verdict:
        logger.info("currentWorkingDirectory: %s", self.host.cwd())

        config = load_step_configuration(self.host)
        token = require_auth_token(self.host)

        options = base_exec_options(config)
        cli_options = cli_exec_options(
            config, self.integration_name, self.integration_version
        )
        if config.debug:
            logger.info("exec options: %s", options.model_dump())

        elevate = resolve_elevation(self.host)
        self.report.elevated = elevate
        logger.info("useSudo: %s", elevate)

        self._enter(StepState.INSTALLING)
        self._execute(CommandKind.INSTALL, args_for_install(config), options, elevate)

        self._enter(StepState.AUTHENTICATING)
        self._execute(
            CommandKind.AUTH, args_for_auth(token), options.with_redacted(token), elevate
        )

        self._enter(StepState.TESTING)
        json_path: Path | None = None
        html_path: Path | None = None
        test_options = cli_options
        if config.json_report:
            json_path, html_path = report_paths(config, self.host, self._clock())
            test_options = cli_options.with_out_file(str(json_path))

        test = self._execute(
            CommandKind.TEST,
            args_for_test(config),
            test_options,
            elevate,
            fail_on_issues=config.fail_on_issues,
        )

        if json_path is not None and html_path is not None:
            self._enter(StepState.REPORTING)
            self._write_reports(json_path, html_path, options, elevate)

        test.raise_if_fatal()
        if test.outcome is Outcome.POLICY_FAILURE:
            logger.warning("`snyk test` found issues; not failing because failOnIssues is false")

        if config.monitor_on_build:
            self._enter(StepState.MONITORING)
            monitor = self._execute(
                CommandKind.MONITOR, args_for_monitor(config), cli_options, elevate
            )
            monitor.raise_if_fatal()

        return Verdict.succeeded()

    def _execute(
        self,
        kind: CommandKind,
        args: list[str],
        options: ExecOptions,
        elevate: bool,
        *,
        fail_on_issues: bool = True,
    ) -> Classification:
        tool = TOOLS[kind]
        started = datetime.now(UTC)

        exit_code = self.runner.execute(tool, args, options, elevate=elevate)

        elapsed_ms = int((datetime.now(UTC) - started).total_seconds() * 1000)
        self.report.results.append(
            CommandResult(
                kind=kind,
                exit_code=exit_code,
                command=redact([tool, *args], options.redact),
                started_at=started.isoformat(),
                duration_ms=elapsed_ms,
            )
        )
        logger.info("%s exit code: %d", kind.value, exit_code)

        classification = classify(kind, exit_code, fail_on_issues)
        if classification.outcome is Outcome.TOOL_ERROR and not classification.fatal:
            logger.warning("`%s %s` exited with %d; continuing", tool, args[0], exit_code)
        return classification

    def _write_reports(
        self,
        json_path: Path,
        html_path: Path,
        options: ExecOptions,
        elevate: bool,
    ) -> None:
        formatted = self._execute(
            CommandKind.REPORT,
            args_for_report(str(json_path)),
            options.with_out_file(str(html_path)),
            elevate,
        )
        reports = [(json_path, JSON_ATTACHMENT_TYPE)]
        if formatted.exit_code == 0:
            reports.append((html_path, HTML_ATTACHMENT_TYPE))
        else:
            logger.warning("Not attaching %s; snyk-to-html failed", html_path.name)

        for path, attachment_type in reports:
            if attach_report(self.host, path, attachment_type):
                self.report.attachments.append(str(path))

    # ── State ───────────────────────────────────────────────────

    def _enter(self, state: StepState) -> None:
        logger.debug("%s → %s", self.report.state.value, state.value)
        self.report.state = state
        self.report.states.append(state)

    def _finish(self, verdict: Verdict) -> None:
        self.report.verdict = verdict
        self._enter(StepState.DONE)

        if verdict.ok:
            logger.info("Task succeeded")
            self.host.set_result(TaskResult.SUCCEEDED, verdict.message)
            return

        logger.error("***************************")
        logger.error("** We have a problem! :( **")
        logger.error("***************************")
        logger.error("%s", verdict.message)
        self.host.set_result(TaskResult.FAILED, verdict.message)


def run_step(host: TaskHost, runner: ProcessRunner | None = None) -> StepReport:
    """Run the task once against ``host``."""
    return StepController(host, runner).run()
