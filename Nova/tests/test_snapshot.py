"""
Test Suite — System Snapshot Provider
=======================================
"""

from unittest.mock import MagicMock

import pytest

from Nova.core.system.actions import AppInfo, ShellResult, SystemSnapshot
from Nova.core.system.snapshot import SnapshotProvider


@pytest.fixture
def backend():
    backend = MagicMock()
    backend.platform_name = "darwin"
    backend.architecture = "arm64"
    backend.list_installed_apps.return_value = [
        AppInfo(name="Safari", path="/Applications/Safari.app"),
        AppInfo(name="Slack", path="/Applications/Slack.app"),
    ]
    backend.list_running_apps.return_value = [
        AppInfo(name="Safari", path="/Applications/Safari.app/Contents/MacOS/Safari",
                is_running=True, pid=42),
    ]
    return backend


class TestSnapshot:

    def test_assembles_all_fields(self, backend):
        snap = SnapshotProvider(backend).snapshot()
        assert snap.platform == "darwin"
        assert snap.architecture == "arm64"
        assert snap.app_names() == ["Safari", "Slack"]
        assert snap.running_names() == ["Safari"]
        assert snap.browser_tabs == []

    def test_failed_subquery_is_empty(self, backend):
        backend.list_running_apps.side_effect = PermissionError("denied")
        snap = SnapshotProvider(backend).snapshot()
        assert snap.running_apps == []
        assert snap.app_names() == ["Safari", "Slack"]

    def test_all_subqueries_failing_still_returns(self, backend):
        backend.list_installed_apps.side_effect = FileNotFoundError("/Applications")
        backend.list_running_apps.side_effect = RuntimeError("psutil")
        snap = SnapshotProvider(backend).snapshot()
        assert isinstance(snap, SystemSnapshot)
        assert snap.available_apps == [] and snap.running_apps == []

    def test_fresh_each_call(self, backend):
        provider = SnapshotProvider(backend)
        provider.snapshot()
        provider.snapshot()
        assert backend.list_installed_apps.call_count == 2
        assert backend.list_running_apps.call_count == 2


class TestContext:

    def test_context_block(self, backend):
        context = SnapshotProvider(backend).snapshot().to_context()
        assert context == (
            "Platform: darwin\n"
            "Architecture: arm64\n"
            "Running Apps: Safari\n"
            "Available Apps: Safari, Slack"
        )

    def test_to_dict(self, backend):
        data = SnapshotProvider(backend).snapshot().to_dict()
        assert data["running_apps"][0]["pid"] == 42
        assert data["available_apps"][0]["is_running"] is False


class TestListApplications:

    def test_bundle_ids_attached(self, backend):
        backend.query_bundle_id.side_effect = [
            ShellResult(success=True, stdout="com.apple.Safari\n", return_code=0),
            ShellResult(success=False, stderr="Can't get application", return_code=1),
        ]
        apps = SnapshotProvider(backend).list_applications()
        assert [(a.name, a.bundle_id) for a in apps] == [
            ("Safari", "com.apple.Safari"),
            ("Slack", None),
        ]

    def test_query_exception_leaves_none(self, backend):
        backend.query_bundle_id.side_effect = OSError("no osascript")
        apps = SnapshotProvider(backend).list_applications()
        assert all(a.bundle_id is None for a in apps)
