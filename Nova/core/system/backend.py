"""
System Backend — Abstract OS Application-Control Surface
==========================================================
Defines the narrow set of primitives the command pipeline needs from the
host OS. Concrete implementations (MacOSBackend, future ports) inherit
from this and provide platform-specific logic.

No code in Nova should ever call subprocess or psutil directly —
everything routes through a SystemBackend.
"""

from abc import ABC, abstractmethod
from typing import Optional

from Nova.core.system.actions import AppInfo, ShellResult


class SystemBackend(ABC):
    """
    Abstract base class for OS interactions.

    Application-addressing methods accept either a display name or a
    platform bundle identifier; when both are given the identifier wins.
    """

    # ── Process Invocation ──────────────────────────────────────────────

    @abstractmethod
    def run_command(self, args: list[str]) -> ShellResult:
        """
        Run one OS process and capture its outcome.

        Args:
            args: argv list. Never interpreted by a shell.

        Returns:
            ShellResult; success means the process exited 0.
        """
        ...

    # ── Application Control ─────────────────────────────────────────────

    @abstractmethod
    def open_app(
        self,
        name: Optional[str] = None,
        bundle_id: Optional[str] = None,
        document: Optional[str] = None,
    ) -> ShellResult:
        """
        Launch an application, optionally handing it a document, folder
        or URL to open.
        """
        ...

    @abstractmethod
    def open_document(self, target: str) -> ShellResult:
        """Open a file or URL with the system default handler."""
        ...

    @abstractmethod
    def query_app_name(
        self,
        name: Optional[str] = None,
        bundle_id: Optional[str] = None,
    ) -> ShellResult:
        """
        Ask the OS for an application's display name.

        Doubles as an existence probe: a failed result means the OS does
        not recognize the name/identifier.
        """
        ...

    @abstractmethod
    def query_bundle_id(self, name: str) -> ShellResult:
        """Ask the OS for an application's bundle identifier."""
        ...

    @abstractmethod
    def activate_app(
        self,
        name: Optional[str] = None,
        bundle_id: Optional[str] = None,
    ) -> ShellResult:
        """Bring an application to the foreground."""
        ...

    @abstractmethod
    def quit_app(
        self,
        name: Optional[str] = None,
        bundle_id: Optional[str] = None,
    ) -> ShellResult:
        """Request graceful termination of an application."""
        ...

    # ── Windows & Settings ──────────────────────────────────────────────

    @abstractmethod
    def resize_front_window(self, bounds: tuple[int, int, int, int]) -> ShellResult:
        """Set the frontmost window's bounds as (left, top, right, bottom)."""
        ...

    @abstractmethod
    def set_do_not_disturb(self, enabled: bool) -> ShellResult:
        """Toggle the system focus-assistance setting."""
        ...

    # ── Enumeration ─────────────────────────────────────────────────────

    @abstractmethod
    def list_installed_apps(self) -> list[AppInfo]:
        """Installed application bundles, name-normalized, not running."""
        ...

    @abstractmethod
    def list_running_apps(self) -> list[AppInfo]:
        """Running application processes, deduplicated by executable path."""
        ...

    # ── Platform Info ───────────────────────────────────────────────────

    @property
    @abstractmethod
    def platform_name(self) -> str:
        """Return the platform identifier (e.g. 'darwin')."""
        ...

    @property
    @abstractmethod
    def architecture(self) -> str:
        """Return the machine architecture (e.g. 'arm64')."""
        ...
