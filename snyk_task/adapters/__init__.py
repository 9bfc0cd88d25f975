"""Adapters — bindings to the pipeline host and the process table.

Public re-exports for convenient access.
"""

from snyk_task.adapters.azure import AzurePipelinesHost
from snyk_task.adapters.base import Platform, TaskHost, TaskResult
from snyk_task.adapters.mock import MockProcessRunner, MockTaskHost
from snyk_task.adapters.shell.command import ProcessRunner

__all__ = [
    "AzurePipelinesHost",
    "MockProcessRunner",
    "MockTaskHost",
    "Platform",
    "ProcessRunner",
    "TaskHost",
    "TaskResult",
]
