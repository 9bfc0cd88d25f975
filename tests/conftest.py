"""
Shared test fixtures and configuration.
"""

import logging

import pytest

from snyk_task.adapters.mock import MockProcessRunner, MockTaskHost

BASE_INPUTS = {
    "projectName": "some-projectName",
    "testDirectory": "some/dir",
    "organization": "some-snyk-org",
    "severityThreshold": "",
    "failOnIssues": "true",
    "monitorOnBuild": "true",
    "additionalArguments": "--someAdditionalArgs",
}


@pytest.fixture
def base_inputs() -> dict:
    """Inputs of a typical pipeline step definition."""
    return dict(BASE_INPUTS)


@pytest.fixture
def host(base_inputs: dict) -> MockTaskHost:
    """A Linux host with npm, snyk and sudo on PATH."""
    return MockTaskHost(inputs=base_inputs)


@pytest.fixture
def runner(host: MockTaskHost) -> MockProcessRunner:
    """A runner where every command exits 0."""
    return MockProcessRunner(host=host)


@pytest.fixture
def restore_logging():
    """Put the root logger back the way it was after a test reconfigures it."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
