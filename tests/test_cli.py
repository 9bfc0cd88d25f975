"""
Tests for CLI commands — run, plan, and global options.
"""

import json
import textwrap
from pathlib import Path

import pytest
from click.testing import CliRunner

from snyk_task import __version__
from snyk_task.adapters.mock import MockProcessRunner, MockTaskHost
from snyk_task.core.use_cases.run import RunResult, build_host, run_task
from snyk_task.main import cli


@pytest.fixture(autouse=True)
def clean_agent_env(monkeypatch, restore_logging):
    """No agent inputs or tokens leak in from the environment."""
    import os

    for key in list(os.environ):
        if key.startswith("INPUT_"):
            monkeypatch.delenv(key)
    monkeypatch.delenv("SNYK_TOKEN", raising=False)
    monkeypatch.delenv("SNYK_TASK_LOG_LEVEL", raising=False)
    monkeypatch.delenv("SNYK_TASK_LOG_FILE", raising=False)


def _inputs_file(tmp_path: Path, extra: str = "") -> Path:
    content = textwrap.dedent("""\
        organization: some-snyk-org
        projectName: some-projectName
        severityThreshold: High
        authToken: secret-token
    """) + extra
    path = tmp_path / "snyk-task.yml"
    path.write_text(content)
    return path


class TestCLIGlobal:
    """Tests for global CLI behavior."""

    def test_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Snyk pipeline task" in result.output

    def test_version(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestPlanCommand:
    def test_plan(self, tmp_path: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["--inputs", str(_inputs_file(tmp_path)), "plan"])
        assert result.exit_code == 0
        assert "[install]" in result.output
        assert "--severity-threshold=high" in result.output
        assert "--org=some-snyk-org" in result.output
        assert "secret-token" not in result.output

    def test_plan_json(self, tmp_path: Path):
        runner = CliRunner()
        result = runner.invoke(
            cli, ["--quiet", "--inputs", str(_inputs_file(tmp_path)), "plan", "--json"]
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        kinds = [c["kind"] for c in data["commands"]]
        assert kinds == ["install", "auth", "test", "monitor"]

    def test_plan_invalid_severity(self, tmp_path: Path):
        path = _inputs_file(tmp_path)
        path.write_text("severityThreshold: critical\n")
        runner = CliRunner()
        result = runner.invoke(cli, ["--inputs", str(path), "plan"])
        assert result.exit_code == 1
        assert "severity threshold" in result.output

    def test_plan_missing_inputs_file(self, tmp_path: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["--inputs", str(tmp_path / "nope.yml"), "plan"])
        assert result.exit_code == 1
        assert "not found" in result.output


class TestRunCommand:
    def test_run_without_token_fails(self, tmp_path: Path):
        path = tmp_path / "snyk-task.yml"
        path.write_text("organization: some-snyk-org\n")
        runner = CliRunner()
        result = runner.invoke(cli, ["--inputs", str(path), "run"])
        assert result.exit_code == 1
        assert "##vso[task.complete result=Failed;]auth token is not set" in result.output

    def test_run_invalid_severity_fails(self, tmp_path: Path):
        path = _inputs_file(tmp_path, "")
        path.write_text("severityThreshold: critical\nauthToken: t\n")
        runner = CliRunner()
        result = runner.invoke(cli, ["--inputs", str(path), "run"])
        assert result.exit_code == 1
        assert "severity threshold must be" in result.output

    def test_run_missing_inputs_file(self, tmp_path: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["--inputs", str(tmp_path / "nope.yml"), "run"])
        assert result.exit_code == 1
        assert "result=Failed" in result.output


class TestRunTask:
    def test_with_prebuilt_host(self, base_inputs):
        host = MockTaskHost(inputs=base_inputs)
        result = run_task(host=host, runner=MockProcessRunner(host=host, exit_codes={"snyk test": 1}))
        assert not result.ok
        assert "found issues" in result.message
        assert result.to_dict()["report"]["verdict"]["status"] == "failed"

    def test_build_host_merges_inputs(self, tmp_path: Path):
        host = build_host(_inputs_file(tmp_path), {"organization": "override"})
        assert host.get_input("organization") == "override"
        assert host.get_input("projectName") == "some-projectName"
        assert host.get_auth_token() == "secret-token"

    def test_error_result(self):
        result = RunResult(error="boom")
        assert not result.ok
        assert result.to_dict() == {"ok": False, "error": "boom"}
