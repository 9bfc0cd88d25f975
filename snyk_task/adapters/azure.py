"""
Azure Pipelines host — inputs from the agent environment, results as
logging commands.

The agent exposes each task input as an ``INPUT_<NAME>`` environment
variable and listens on stdout for ``##vso[...]`` logging commands.
Explicit inputs (e.g. from an inputs file) take precedence over the
environment, which lets the task run outside an agent too.
"""

from __future__ import annotations

import logging
import os
import platform
import shutil
import sys
from collections.abc import Mapping
from typing import Any, TextIO

from snyk_task.adapters.base import Platform, TaskHost, TaskResult
from snyk_task.core.errors import ConfigError, ErrorKind, StepError

logger = logging.getLogger(__name__)

_PLATFORMS = {
    "Windows": Platform.WINDOWS,
    "Darwin": Platform.MACOS,
    "Linux": Platform.LINUX,
}

AUTH_TOKEN_INPUT = "authToken"
AUTH_TOKEN_ENV = "SNYK_TOKEN"


def _escape_data(value: str) -> str:
    return value.replace("%", "%AZP25").replace("\r", "%0D").replace("\n", "%0A")


def _escape_property(value: str) -> str:
    return _escape_data(value).replace("]", "%5D").replace(";", "%3B")


def input_env_name(name: str) -> str:
    """Environment variable the agent uses for input ``name``."""
    return "INPUT_" + name.replace(" ", "_").upper()


class AzurePipelinesHost(TaskHost):
    """Task host backed by the Azure Pipelines agent protocol."""

    def __init__(
        self,
        inputs: Mapping[str, Any] | None = None,
        environ: Mapping[str, str] | None = None,
        stream: TextIO | None = None,
    ):
        self._inputs = {k.lower(): v for k, v in (inputs or {}).items()}
        self._environ = environ if environ is not None else os.environ
        self._stream = stream
        self._result: TaskResult | None = None

    @property
    def name(self) -> str:
        return "azure-pipelines"

    @property
    def result(self) -> TaskResult | None:
        """The reported status, if any."""
        return self._result

    def get_input(self, name: str, required: bool = False) -> str:
        value = self._inputs.get(name.lower())
        if value is None:
            value = self._environ.get(input_env_name(name), "")
        if isinstance(value, bool):
            value = "true" if value else "false"
        value = str(value).strip()

        if required and not value:
            raise ConfigError(f"Input required: {name}")
        return value

    def get_bool_input(self, name: str, default: bool = False) -> bool:
        value = self.get_input(name)
        if not value:
            return default
        return value.lower() == "true"

    def which(self, tool: str) -> str:
        return shutil.which(tool, path=self._environ.get("PATH")) or ""

    def get_platform(self) -> Platform:
        system = platform.system()
        try:
            return _PLATFORMS[system]
        except KeyError:
            raise StepError(
                f"Unexpected OS '{system}'", kind=ErrorKind.ENVIRONMENT
            ) from None

    def get_auth_token(self) -> str:
        return self.get_input(AUTH_TOKEN_INPUT) or self._environ.get(AUTH_TOKEN_ENV, "")

    def set_result(self, result: TaskResult, message: str = "") -> None:
        if self._result is not None:
            raise RuntimeError(f"Task result already reported as {self._result.value}")
        self._result = result
        logger.debug("Reporting task result: %s", result.value)
        self._command(
            "task.complete",
            {"result": result.value},
            message,
        )

    def add_attachment(self, attachment_type: str, name: str, path: str) -> None:
        self._command(
            "task.addattachment",
            {"type": attachment_type, "name": name},
            path,
        )

    def _command(self, command: str, properties: dict[str, str], data: str) -> None:
        props = "".join(f"{k}={_escape_property(v)};" for k, v in properties.items())
        line = f"##vso[{command} {props}]{_escape_data(data)}"
        stream = self._stream or sys.stdout
        stream.write(line + "\n")
        stream.flush()
