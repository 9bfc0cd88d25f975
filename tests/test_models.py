"""
Tests for domain models — step configuration, options, and verdicts.
"""

import pytest
from pydantic import ValidationError

from snyk_task.core.errors import ConfigError, ErrorKind
from snyk_task.core.models import (
    CommandKind,
    CommandResult,
    ExecOptions,
    StepConfiguration,
    Verdict,
    normalize_severity_threshold,
)
from snyk_task.core.models.step import SEVERITY_THRESHOLD_ERROR


class TestSeverityThreshold:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("", None),
            (None, None),
            ("low", "low"),
            ("Medium", "medium"),
            ("HIGH", "high"),
            ("  high ", "high"),
        ],
    )
    def test_normalized(self, raw, expected):
        assert normalize_severity_threshold(raw) == expected
        assert StepConfiguration(severity_threshold=raw).severity_threshold == expected

    @pytest.mark.parametrize("raw", ["critical", "none", "lowest", "1"])
    def test_invalid_raises_config_error(self, raw):
        with pytest.raises(ConfigError) as exc_info:
            normalize_severity_threshold(raw)
        assert exc_info.value.kind is ErrorKind.CONFIGURATION
        assert exc_info.value.message == SEVERITY_THRESHOLD_ERROR

    def test_invalid_rejected_by_model(self):
        with pytest.raises(ConfigError):
            StepConfiguration(severity_threshold="critical")


class TestStepConfiguration:
    def test_defaults(self):
        config = StepConfiguration()
        assert config.monitor_on_build is True
        assert config.fail_on_issues is True
        assert config.json_report is False
        assert config.debug is False
        assert config.severity_threshold is None
        assert config.file_parameter is None

    def test_empty_strings_are_unset(self):
        config = StepConfiguration(
            target_file="",
            docker_image_name="  ",
            organization="",
            additional_arguments="",
        )
        assert config.target_file is None
        assert config.docker_image_name is None
        assert config.organization is None
        assert config.additional_arguments is None

    def test_non_blank_strings_kept_verbatim(self):
        config = StepConfiguration(additional_arguments="  --dev ", test_directory=" app")
        assert config.additional_arguments == "  --dev "
        assert config.test_directory == " app"

    def test_frozen(self):
        config = StepConfiguration(target_file="package.json")
        with pytest.raises(ValidationError):
            config.target_file = "other.json"


class TestFileParameter:
    def test_target_file(self):
        assert StepConfiguration(target_file="pom.xml").file_parameter == "pom.xml"

    def test_dockerfile_with_image(self):
        config = StepConfiguration(
            target_file="package.json",
            docker_image_name="app:latest",
            dockerfile_path="build/Dockerfile",
        )
        assert config.file_parameter == "build/Dockerfile"

    def test_image_without_dockerfile_uses_target_file(self):
        config = StepConfiguration(target_file="package.json", docker_image_name="app:latest")
        assert config.file_parameter == "package.json"

    def test_dockerfile_without_image_ignored(self):
        config = StepConfiguration(dockerfile_path="Dockerfile")
        assert config.file_parameter is None


class TestExecOptions:
    def test_defaults(self):
        options = ExecOptions()
        assert options.fail_on_stderr is False
        assert options.ignore_return_code is True
        assert options.env == {}
        assert options.out_file is None

    def test_with_env_is_additive(self):
        base = ExecOptions(cwd="dir", env={"A": "1"})
        overlaid = base.with_env({"B": "2"})
        assert overlaid.env == {"A": "1", "B": "2"}
        assert overlaid.cwd == "dir"
        assert base.env == {"A": "1"}

    def test_with_env_repeatable(self):
        options = ExecOptions().with_env({"A": "1"}).with_env({"A": "1"})
        assert options.env == {"A": "1"}

    def test_with_out_file_and_redacted(self):
        options = ExecOptions().with_out_file("out.html").with_redacted("secret")
        assert options.out_file == "out.html"
        assert options.redact == ["secret"]


class TestVerdict:
    def test_succeeded(self):
        verdict = Verdict.succeeded()
        assert verdict.ok
        assert not verdict.failed
        assert verdict.kind is None

    def test_failure(self):
        verdict = Verdict.failure("boom", kind=ErrorKind.TOOL)
        assert verdict.failed
        assert verdict.message == "boom"
        assert verdict.to_dict() == {"status": "failed", "message": "boom", "kind": "tool"}


class TestCommandResult:
    def test_fields(self):
        result = CommandResult(kind=CommandKind.TEST, exit_code=1, command=["snyk", "test"])
        assert result.kind is CommandKind.TEST
        assert result.exit_code == 1
        assert result.started_at
