"""
Step configuration — the immutable parameters of one task run.

Built once at run start from host inputs and read-only afterwards.
Optional text inputs are normalized so that an empty string never
reaches the argument builder: absent and empty mean the same thing.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator

from snyk_task.core.errors import ConfigError

SeverityThreshold = Literal["low", "medium", "high"]

SEVERITY_THRESHOLDS: tuple[str, ...] = ("low", "medium", "high")

SEVERITY_THRESHOLD_ERROR = (
    "If set, severity threshold must be 'high' or 'medium' or 'low' "
    "(case insensitive). If not set, the default is 'low'."
)


def normalize_severity_threshold(value: str | None) -> str | None:
    """Lowercase a severity threshold and reject unknown values.

    Empty or missing input means "unset".

    Raises:
        ConfigError: If the value is not one of low, medium, high.
    """
    if value is None:
        return None
    normalized = str(value).strip().lower()
    if not normalized:
        return None
    if normalized not in SEVERITY_THRESHOLDS:
        raise ConfigError(SEVERITY_THRESHOLD_ERROR)
    return normalized


class StepConfiguration(BaseModel):
    """Everything the task needs to know about what to scan and how."""

    model_config = ConfigDict(frozen=True)

    target_file: str | None = None
    docker_image_name: str | None = None
    dockerfile_path: str | None = None
    project_name: str | None = None
    organization: str | None = None

    monitor_on_build: bool = True
    fail_on_issues: bool = True

    additional_arguments: str | None = None
    test_directory: str | None = None
    severity_threshold: SeverityThreshold | None = None

    json_report: bool = False
    report_directory: str | None = None
    debug: bool = False

    @field_validator(
        "target_file",
        "docker_image_name",
        "dockerfile_path",
        "project_name",
        "organization",
        "additional_arguments",
        "test_directory",
        "report_directory",
        mode="before",
    )
    @classmethod
    def empty_as_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("severity_threshold", mode="before")
    @classmethod
    def normalize_threshold(cls, value: object) -> object:
        if value is None or isinstance(value, str):
            return normalize_severity_threshold(value)
        return value

    @property
    def file_parameter(self) -> str | None:
        """The value for ``--file=``.

        The Dockerfile path only counts when a Docker image is being
        scanned; otherwise the target file is used.
        """
        if self.docker_image_name and self.dockerfile_path:
            return self.dockerfile_path
        return self.target_file

    def describe(self) -> dict[str, object]:
        """Input values for diagnostic logging."""
        return self.model_dump()
