"""
Process runner — start one external command and return its exit code.

This is the single place where the task spawns processes. Tool paths
are resolved through the host; when elevation is requested the
elevation tool is invoked and the target tool name becomes its first
argument. A nonzero exit code is data, not an error: the caller
classifies it.
"""

from __future__ import annotations

import logging
import os
import subprocess
import sys
import time
from collections.abc import Callable
from contextlib import ExitStack

from snyk_task.core.errors import ErrorKind, StepError, ToolNotFoundError
from snyk_task.core.models.execution import ExecOptions

logger = logging.getLogger(__name__)

ELEVATION_TOOL = "sudo"

_MASK = "***"


def redact(command: list[str], secrets: list[str]) -> list[str]:
    """Mask secret values in a command line for logging."""
    hidden = {s for s in secrets if s}
    return [_MASK if token in hidden else token for token in command]


class ProcessRunner:
    """Run external commands one at a time.

    Args:
        which: Executable lookup, returning an empty string when the
            tool is not found (normally ``TaskHost.which``).
    """

    def __init__(self, which: Callable[[str], str]):
        self._which = which

    def resolve_command(self, tool: str, args: list[str], elevate: bool = False) -> list[str]:
        """Build the full command line for ``tool``.

        Raises:
            ToolNotFoundError: If the executable cannot be located.
        """
        executable = ELEVATION_TOOL if elevate else tool
        path = self._which(executable)
        logger.info("toolPath: %s", path or f"<{executable} not found>")
        if not path:
            raise ToolNotFoundError(f"Unable to locate executable file: '{executable}'")

        if elevate:
            return [path, tool, *args]
        return [path, *args]

    def execute(
        self,
        tool: str,
        args: list[str],
        options: ExecOptions,
        *,
        elevate: bool = False,
    ) -> int:
        """Run ``tool`` with ``args`` and wait for it to finish.

        Returns:
            The process exit code.

        Raises:
            ToolNotFoundError: If the executable cannot be located or started.
            StepError: Only when ``options`` opt out of ignoring the return
                code or stderr output.
        """
        command = self.resolve_command(tool, args, elevate=elevate)
        shown = " ".join(redact(command, options.redact))
        logger.info("Executing: %s (cwd=%s)", shown, options.cwd or os.getcwd())

        start = time.monotonic()
        try:
            exit_code, stderr = self._spawn(command, options)
        except OSError as e:
            raise ToolNotFoundError(f"Unable to start '{command[0]}': {e}") from e
        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.debug("%s finished in %dms", tool, elapsed_ms)

        if options.fail_on_stderr and stderr:
            raise StepError(
                f"'{tool}' wrote to stderr",
                kind=ErrorKind.TOOL,
            )
        if not options.ignore_return_code and exit_code != 0:
            raise StepError(
                f"'{tool}' failed with return code: {exit_code}",
                kind=ErrorKind.TOOL,
            )
        return exit_code

    def _spawn(self, command: list[str], options: ExecOptions) -> tuple[int, str]:
        """Start the process and block until it exits.

        Output goes straight to the task log unless redirected to
        ``options.out_file``; stderr is only read when it matters.
        """
        env = os.environ.copy()
        env.update(options.env)

        with ExitStack() as stack:
            stdout = None
            if options.out_file:
                stdout = stack.enter_context(open(options.out_file, "w", encoding="utf-8"))
            stderr = subprocess.PIPE if options.fail_on_stderr else None

            result = subprocess.run(
                command,
                cwd=options.cwd,
                env=env,
                stdout=stdout,
                stderr=stderr,
                text=True,
                check=False,
            )

        captured = result.stderr or ""
        if captured:
            sys.stderr.write(captured)
        return result.returncode, captured
