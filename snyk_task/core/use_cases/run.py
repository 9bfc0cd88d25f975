"""
Run use case — execute the task from the command line.

Builds the host from the agent environment and an optional inputs
file, then hands off to the step controller. The full vertical
slice from pipeline inputs to a reported verdict.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from snyk_task.adapters.azure import AzurePipelinesHost
from snyk_task.adapters.base import TaskHost, TaskResult
from snyk_task.adapters.shell.command import ProcessRunner
from snyk_task.core.config.loader import load_inputs_file
from snyk_task.core.engine.executor import StepController, StepReport
from snyk_task.core.errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Result of running the task."""

    report: StepReport | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.report is not None and self.report.ok

    @property
    def message(self) -> str:
        if self.error:
            return self.error
        if self.report and self.report.verdict:
            return self.report.verdict.message
        return ""

    def to_dict(self) -> dict:
        result: dict = {"ok": self.ok}
        if self.error:
            result["error"] = self.error
            return result
        if self.report:
            result["report"] = self.report.to_dict()
        return result


def build_host(
    inputs_path: Path | None = None,
    inputs: dict[str, Any] | None = None,
) -> AzurePipelinesHost:
    """Host over the agent environment, with file and explicit inputs on top.

    Raises:
        ConfigError: If the inputs file cannot be loaded.
    """
    merged: dict[str, Any] = {}
    if inputs_path is not None:
        merged.update(load_inputs_file(inputs_path))
    if inputs:
        merged.update(inputs)
    return AzurePipelinesHost(inputs=merged)


def run_task(
    inputs_path: Path | None = None,
    inputs: dict[str, Any] | None = None,
    host: TaskHost | None = None,
    runner: ProcessRunner | None = None,
) -> RunResult:
    """Run the task once.

    Args:
        inputs_path: Optional YAML inputs file.
        inputs: Optional explicit inputs, overriding the file.
        host: Pre-built host (tests); skips inputs loading.
        runner: Optional process runner.

    Returns:
        RunResult with the step report.
    """
    if host is None:
        try:
            host = build_host(inputs_path, inputs)
        except ConfigError as e:
            logger.error("%s", e.message)
            AzurePipelinesHost().set_result(TaskResult.FAILED, e.message)
            return RunResult(error=e.message)

    report = StepController(host, runner).run()
    return RunResult(report=report)
