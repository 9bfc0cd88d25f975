"""
Configuration loader — step inputs into a StepConfiguration.

Inputs are read through the task host. Outside an agent they can
also come from a YAML inputs file, which is read here and handed to
the host as explicit inputs.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from snyk_task.adapters.base import TaskHost
from snyk_task.core.errors import ConfigError
from snyk_task.core.models.step import StepConfiguration, normalize_severity_threshold

logger = logging.getLogger(__name__)

# Default inputs filename
INPUTS_FILE = "snyk-task.yml"

AUTH_TOKEN_MISSING_MESSAGE = (
    "auth token is not set. Setup SnykAuth service connection and specify "
    "serviceConnectionEndpoint input parameter."
)

# Text inputs: host input name → StepConfiguration field
_TEXT_INPUTS = {
    "targetFile": "target_file",
    "dockerImageName": "docker_image_name",
    "dockerfilePath": "dockerfile_path",
    "projectName": "project_name",
    "organization": "organization",
    "additionalArguments": "additional_arguments",
    "testDirectory": "test_directory",
    "reportDirectory": "report_directory",
}

# Boolean inputs: host input name → (field, default)
_BOOL_INPUTS = {
    "monitorOnBuild": ("monitor_on_build", True),
    "failOnIssues": ("fail_on_issues", True),
    "jsonReport": ("json_report", False),
    "debug": ("debug", False),
}


def load_inputs_file(path: Path) -> dict[str, Any]:
    """Read step inputs from a YAML mapping.

    Raises:
        ConfigError: If the file is missing or not a mapping of scalars.
    """
    if not path.is_file():
        raise ConfigError(f"Inputs file not found: {path}")

    logger.debug("Loading inputs from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # The file may wrap everything under an "inputs" key or be flat
    if isinstance(data.get("inputs"), dict):
        data = data["inputs"]

    inputs: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, (dict, list)):
            raise ConfigError(f"Input '{key}' in {path} must be a scalar value")
        inputs[str(key)] = "" if value is None else value
    return inputs


def load_step_configuration(host: TaskHost) -> StepConfiguration:
    """Build the run's configuration from host inputs.

    Raises:
        ConfigError: On an invalid severity threshold or malformed input.
    """
    values: dict[str, Any] = {
        field: host.get_input(name) for name, field in _TEXT_INPUTS.items()
    }
    for name, (field, default) in _BOOL_INPUTS.items():
        values[field] = host.get_bool_input(name, default)

    values["severity_threshold"] = normalize_severity_threshold(
        host.get_input("severityThreshold")
    )

    try:
        config = StepConfiguration.model_validate(values)
    except ValidationError as e:
        raise ConfigError(f"Invalid task inputs: {e}") from e

    if config.debug:
        log_step_configuration(config)
    return config


def require_auth_token(host: TaskHost) -> str:
    """Return the auth token, failing the run before any process starts."""
    token = host.get_auth_token()
    if not token:
        raise ConfigError(AUTH_TOKEN_MISSING_MESSAGE)
    return token


def log_step_configuration(config: StepConfiguration) -> None:
    for key, value in config.describe().items():
        logger.info("taskArgs.%s: %s", key, value)
