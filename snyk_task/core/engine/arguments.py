"""
Argument builder — step configuration to Snyk CLI command lines.

Pure functions: the same configuration always yields the same tokens.
Token order and flag spelling are the CLI's contract. Optional values
that are unset contribute nothing, never an empty token, and
additional arguments are passed through as a single token.
"""

from __future__ import annotations

from snyk_task.core.models.execution import CommandKind
from snyk_task.core.models.step import StepConfiguration

NPM_TOOL = "npm"
SNYK_TOOL = "snyk"
SNYK_TO_HTML_TOOL = "snyk-to-html"

# Which executable issues each command
TOOLS: dict[CommandKind, str] = {
    CommandKind.INSTALL: NPM_TOOL,
    CommandKind.AUTH: SNYK_TOOL,
    CommandKind.TEST: SNYK_TOOL,
    CommandKind.REPORT: SNYK_TO_HTML_TOOL,
    CommandKind.MONITOR: SNYK_TOOL,
}


def _arg_if(args: list[str], condition: object, *tokens: str) -> None:
    if condition:
        args.extend(tokens)


def args_for_install(config: StepConfiguration) -> list[str]:
    """``install -g snyk``, plus the HTML formatter when reports are on."""
    args = ["install", "-g", SNYK_TOOL]
    _arg_if(args, config.json_report, SNYK_TO_HTML_TOOL)
    return args


def args_for_auth(token: str) -> list[str]:
    return ["auth", token]


def args_for_test(config: StepConfiguration) -> list[str]:
    file_arg = config.file_parameter

    args = ["test"]
    _arg_if(args, config.severity_threshold, f"--severity-threshold={config.severity_threshold}")
    _arg_if(args, config.docker_image_name, "--docker", f"{config.docker_image_name}")
    _arg_if(args, file_arg, f"--file={file_arg}")
    _arg_if(args, config.additional_arguments, f"{config.additional_arguments}")
    _arg_if(args, config.json_report, "--json")
    return args


def args_for_monitor(config: StepConfiguration) -> list[str]:
    file_arg = config.file_parameter

    args = ["monitor"]
    _arg_if(args, config.docker_image_name, "--docker", f"{config.docker_image_name}")
    _arg_if(args, file_arg, f"--file={file_arg}")
    _arg_if(args, config.organization, f"--org={config.organization}")
    _arg_if(args, config.project_name, f"--project-name={config.project_name}")
    _arg_if(args, config.additional_arguments, f"{config.additional_arguments}")
    return args


def args_for_report(json_report_path: str) -> list[str]:
    """``snyk-to-html -i <report.json>``; HTML goes to stdout."""
    return ["-i", json_report_path]


def build_args(
    kind: CommandKind,
    config: StepConfiguration,
    *,
    token: str = "",
    json_report_path: str = "",
) -> list[str]:
    """Dispatch to the builder for ``kind``."""
    if kind is CommandKind.INSTALL:
        return args_for_install(config)
    if kind is CommandKind.AUTH:
        return args_for_auth(token)
    if kind is CommandKind.TEST:
        return args_for_test(config)
    if kind is CommandKind.REPORT:
        return args_for_report(json_report_path)
    if kind is CommandKind.MONITOR:
        return args_for_monitor(config)
    raise ValueError(f"Unknown command kind: {kind!r}")
