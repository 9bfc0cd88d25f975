"""
Tests for the privilege resolver.
"""

import pytest

from snyk_task.adapters.base import Platform
from snyk_task.adapters.mock import MockTaskHost
from snyk_task.core.engine.privilege import (
    detect_platform,
    requires_elevation,
    resolve_elevation,
    sudo_exists,
)


class TestRequiresElevation:
    def test_linux(self):
        assert requires_elevation(Platform.LINUX) is True

    @pytest.mark.parametrize("platform", [Platform.WINDOWS, Platform.MACOS])
    def test_other_platforms(self, platform):
        assert requires_elevation(platform) is False

    def test_undetermined(self):
        assert requires_elevation(None) is True


class TestDetectPlatform:
    def test_detected(self):
        assert detect_platform(MockTaskHost(platform=Platform.MACOS)) is Platform.MACOS

    def test_failure_swallowed(self, caplog):
        host = MockTaskHost(platform=RuntimeError("getPlatform not mocked"))
        assert detect_platform(host) is None
        assert "getPlatform not mocked" in caplog.text


class TestResolveElevation:
    def test_sudo_exists(self):
        assert sudo_exists(MockTaskHost())
        assert not sudo_exists(MockTaskHost(which={"snyk": "/usr/bin/snyk"}))

    def test_linux_with_sudo(self):
        assert resolve_elevation(MockTaskHost(platform=Platform.LINUX)) is True

    def test_undetermined_with_sudo(self):
        assert resolve_elevation(MockTaskHost(platform=RuntimeError("boom"))) is True

    def test_windows(self):
        assert resolve_elevation(MockTaskHost(platform=Platform.WINDOWS)) is False

    def test_linux_without_sudo(self):
        host = MockTaskHost(platform=Platform.LINUX, which={"snyk": "/usr/bin/snyk"})
        assert resolve_elevation(host) is False
