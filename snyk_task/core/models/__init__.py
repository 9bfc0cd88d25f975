"""
Domain models — Pydantic types for the task.

All models are re-exported here for convenient access:

    from snyk_task.core.models import StepConfiguration, ExecOptions, Verdict
"""

from snyk_task.core.models.execution import (
    CommandKind,
    CommandResult,
    ExecOptions,
    Verdict,
)
from snyk_task.core.models.step import (
    SEVERITY_THRESHOLDS,
    SeverityThreshold,
    StepConfiguration,
    normalize_severity_threshold,
)

__all__ = [
    # step.py
    "SEVERITY_THRESHOLDS",
    "SeverityThreshold",
    "StepConfiguration",
    "normalize_severity_threshold",
    # execution.py
    "CommandKind",
    "CommandResult",
    "ExecOptions",
    "Verdict",
]
