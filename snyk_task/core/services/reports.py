"""Report files — naming, locating, and attaching scan reports."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from snyk_task.adapters.base import TaskHost
from snyk_task.core.models.step import StepConfiguration

logger = logging.getLogger(__name__)

JSON_ATTACHMENT_TYPE = "JSON_ATTACHMENT_TYPE"
HTML_ATTACHMENT_TYPE = "HTML_ATTACHMENT_TYPE"


def format_date(d: datetime) -> str:
    """ISO timestamp without fraction, safe for filenames: ``2020-01-02T03-04-05``."""
    return d.replace(microsecond=0, tzinfo=None).isoformat().replace(":", "-")


def report_paths(
    config: StepConfiguration,
    host: TaskHost,
    now: datetime,
) -> tuple[Path, Path]:
    """Where this run writes its JSON and HTML reports.

    Always absolute, since the tools run with ``cwd=test_directory``.
    """
    directory = Path(
        host.cwd(), config.report_directory or config.test_directory or ""
    ).resolve()
    stem = f"report-{format_date(now)}"
    return directory / f"{stem}.json", directory / f"{stem}.html"


def attach_report(host: TaskHost, file_path: Path, attachment_type: str) -> bool:
    """Attach ``file_path`` to the build if it exists.

    Returns:
        Whether the file was attached.
    """
    if file_path.is_file():
        logger.info("%s exists... attaching file", file_path)
        host.add_attachment(attachment_type, file_path.name, str(file_path))
        return True

    logger.info("%s does not exist... cannot attach", file_path)
    return False
