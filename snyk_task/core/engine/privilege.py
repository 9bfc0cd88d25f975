"""
Privilege resolver — decide whether commands run through sudo.

Linux agents need elevation for global npm installs. When the
platform cannot be detected the answer is "elevate": a failed probe
must never silently skip elevation on a system that needs it.
"""

from __future__ import annotations

import logging

from snyk_task.adapters.base import Platform, TaskHost
from snyk_task.adapters.shell.command import ELEVATION_TOOL

logger = logging.getLogger(__name__)


def requires_elevation(platform: Platform | None) -> bool:
    """True for Linux and for an undetermined platform (``None``)."""
    if not isinstance(platform, Platform):
        return True
    return platform is Platform.LINUX


def detect_platform(host: TaskHost) -> Platform | None:
    """Ask the host for the platform; ``None`` if detection fails."""
    try:
        return host.get_platform()
    except Exception as e:
        logger.warning("Error caught calling get_platform(): %s", e)
        return None


def sudo_exists(host: TaskHost) -> bool:
    """Whether the host can resolve the elevation tool."""
    return bool(host.which(ELEVATION_TOOL))


def resolve_elevation(host: TaskHost) -> bool:
    """Elevate when the platform calls for it and sudo is installed."""
    platform = detect_platform(host)
    needed = requires_elevation(platform)
    available = sudo_exists(host) if needed else False
    use_sudo = needed and available

    logger.info(
        "platform: %s, elevation required: %s, sudo found: %s",
        platform.name if platform is not None else "undetermined",
        needed,
        available,
    )
    if needed and not available:
        logger.warning("Elevation required but '%s' was not found; running unelevated", ELEVATION_TOOL)
    return use_sudo
