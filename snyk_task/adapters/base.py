"""
Task host base — the contract between the task and its pipeline host.

The host supplies inputs, resolves executables, reports the platform,
and receives the verdict and report attachments. The task only talks
to the pipeline through this interface, never directly to agent
internals.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from enum import Enum


class Platform(Enum):
    """Operating systems a pipeline agent can run on."""

    WINDOWS = 0
    MACOS = 1
    LINUX = 2


class TaskResult(str, Enum):
    """Terminal status reported to the host."""

    SUCCEEDED = "Succeeded"
    FAILED = "Failed"


class TaskHost(ABC):
    """Abstract base class for pipeline hosts.

    To support a new pipeline runtime:
        1. Subclass TaskHost
        2. Implement the input, lookup, platform and reporting methods
        3. Pass an instance to ``StepController``
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The host identifier (e.g., 'azure-pipelines', 'mock')."""

    @abstractmethod
    def get_input(self, name: str, required: bool = False) -> str:
        """Return a step input, or an empty string when unset.

        Raises:
            ConfigError: If ``required`` and the input is empty.
        """

    @abstractmethod
    def get_bool_input(self, name: str, default: bool = False) -> bool:
        """Return a boolean step input, ``default`` when unset."""

    @abstractmethod
    def which(self, tool: str) -> str:
        """Resolve an executable by name. Empty string means not found."""

    @abstractmethod
    def get_platform(self) -> Platform:
        """Detect the agent platform.

        May raise when the platform cannot be determined.
        """

    @abstractmethod
    def get_auth_token(self) -> str:
        """Return the Snyk API token, or an empty string if none is configured."""

    @abstractmethod
    def set_result(self, result: TaskResult, message: str = "") -> None:
        """Report the terminal status. Called exactly once per run."""

    @abstractmethod
    def add_attachment(self, attachment_type: str, name: str, path: str) -> None:
        """Attach a file that exists on disk to the build."""

    def cwd(self) -> str:
        """Default working directory for the run."""
        return os.getcwd()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
