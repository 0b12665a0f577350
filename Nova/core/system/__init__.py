"""
System Package — OS Abstraction Layer
=======================================
Provides a clean interface between Nova and the operating system.

Usage:
    from Nova.core.system import get_backend, ActionRouter, SnapshotProvider

    backend = get_backend()
    router = ActionRouter(backend)
    snapshot = SnapshotProvider(backend).snapshot()
"""

from Nova.core.system.actions import (
    Action,
    ActionResult,
    ActionType,
    AppInfo,
    ApplicationIdentity,
    BrowserTab,
    CommandOutcome,
    ShellResult,
    SystemSnapshot,
)
from Nova.core.system.backend import SystemBackend
from Nova.core.system.macos import MacOSBackend
from Nova.core.system.app_registry import AppRegistry, BUNDLE_IDS
from Nova.core.system.snapshot import SnapshotProvider
from Nova.core.system.action_router import (
    ActionRouter,
    extract_actions,
    locate_action_array,
    parse_actions,
)


def get_backend() -> SystemBackend:
    """
    Factory: return the correct SystemBackend for the current platform.
    Currently only macOS is supported.
    """
    import platform
    system = platform.system().lower()

    if system == "darwin":
        return MacOSBackend()
    else:
        raise NotImplementedError(
            f"Platform '{system}' is not yet supported. "
            "Implement SystemBackend for your OS."
        )


__all__ = [
    "get_backend",
    "SystemBackend",
    "MacOSBackend",
    "ActionRouter",
    "AppRegistry",
    "BUNDLE_IDS",
    "SnapshotProvider",
    "Action",
    "ActionResult",
    "ActionType",
    "AppInfo",
    "ApplicationIdentity",
    "BrowserTab",
    "CommandOutcome",
    "ShellResult",
    "SystemSnapshot",
    "extract_actions",
    "locate_action_array",
    "parse_actions",
]
