"""
macOS Backend — macOS-Specific OS Implementation
==================================================
Concrete implementation of SystemBackend for macOS.
Drives applications through `open` and `osascript`, enumerates bundles
from the applications directory and running apps through psutil.

This is the ONLY file that should contain macOS-specific code.
"""

import logging
import os
import platform
import subprocess
from typing import Optional

import psutil

from Nova.config import APPLICATIONS_DIR, COMMAND_TIMEOUT
from Nova.core.system.actions import AppInfo, ShellResult
from Nova.core.system.backend import SystemBackend

logger = logging.getLogger("nova.macos_backend")

APP_SUFFIX = ".app"


def applescript_string(value: str) -> str:
    """Quote a Python string as an AppleScript string literal."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _tell_target(name: Optional[str], bundle_id: Optional[str]) -> str:
    if bundle_id:
        return f"application id {applescript_string(bundle_id)}"
    if name:
        return f"application {applescript_string(name)}"
    raise ValueError("Either an application name or a bundle id is required")


def _document_arg(value: str) -> str:
    """A file, folder or URL argument for `open`; never an option flag."""
    if value.startswith("-"):
        raise ValueError(f"Refusing document argument that looks like an option: {value!r}")
    return value


class MacOSBackend(SystemBackend):
    """
    macOS-specific implementation of the SystemBackend.

    All `open` / `osascript` subprocess calls are centralized here.
    """

    def __init__(
        self,
        applications_dir: str = APPLICATIONS_DIR,
        timeout: int = COMMAND_TIMEOUT,
    ):
        self._applications_dir = applications_dir
        self._timeout = timeout
        logger.info("MacOSBackend initialized | apps_dir=%s", applications_dir)

    # ── Process Invocation ──────────────────────────────────────────────

    def run_command(self, args: list[str]) -> ShellResult:
        command = " ".join(args)
        logger.debug("Exec: %s", command)

        try:
            result = subprocess.run(
                args,
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired:
            return ShellResult(
                success=False,
                command=command,
                timed_out=True,
                error=f"Timed out after {self._timeout} seconds",
            )
        except FileNotFoundError:
            return ShellResult(
                success=False,
                command=command,
                error=f"Executable not found: {args[0]}",
            )
        except OSError as e:
            logger.error("Process error for '%s': %s", command, e)
            return ShellResult(success=False, command=command, error=str(e))

        stdout = result.stdout.strip()
        stderr = result.stderr.strip()
        return ShellResult(
            success=result.returncode == 0,
            command=command,
            stdout=stdout,
            stderr=stderr,
            return_code=result.returncode,
            error=stderr if result.returncode != 0 else "",
        )

    def run_applescript(self, script: str) -> ShellResult:
        return self.run_command(["osascript", "-e", script])

    # ── Application Control ─────────────────────────────────────────────

    def open_app(
        self,
        name: Optional[str] = None,
        bundle_id: Optional[str] = None,
        document: Optional[str] = None,
    ) -> ShellResult:
        if bundle_id:
            args = ["open", "-b", bundle_id]
        elif name:
            args = ["open", "-a", name]
        else:
            raise ValueError("Either an application name or a bundle id is required")

        if document:
            args.append(_document_arg(document))
        return self.run_command(args)

    def open_document(self, target: str) -> ShellResult:
        return self.run_command(["open", _document_arg(target)])

    def query_app_name(
        self,
        name: Optional[str] = None,
        bundle_id: Optional[str] = None,
    ) -> ShellResult:
        return self.run_applescript(f"tell {_tell_target(name, bundle_id)} to get name")

    def query_bundle_id(self, name: str) -> ShellResult:
        return self.run_applescript(f"tell {_tell_target(name, None)} to get id")

    def activate_app(
        self,
        name: Optional[str] = None,
        bundle_id: Optional[str] = None,
    ) -> ShellResult:
        return self.run_applescript(f"tell {_tell_target(name, bundle_id)} to activate")

    def quit_app(
        self,
        name: Optional[str] = None,
        bundle_id: Optional[str] = None,
    ) -> ShellResult:
        return self.run_applescript(f"tell {_tell_target(name, bundle_id)} to quit")

    # ── Windows & Settings ──────────────────────────────────────────────

    def resize_front_window(self, bounds: tuple[int, int, int, int]) -> ShellResult:
        left, top, right, bottom = bounds
        script = (
            'tell application "System Events"\n'
            "  set frontApp to first application process whose frontmost is true\n"
            "  set frontWindow to first window of frontApp\n"
            f"  set bounds of frontWindow to {{{left}, {top}, {right}, {bottom}}}\n"
            "end tell"
        )
        return self.run_applescript(script)

    def set_do_not_disturb(self, enabled: bool) -> ShellResult:
        state = "on" if enabled else "off"
        return self.run_applescript(
            f'tell application "System Events" to set do not disturb to {state}'
        )

    # ── Enumeration ─────────────────────────────────────────────────────

    def list_installed_apps(self) -> list[AppInfo]:
        entries = sorted(os.listdir(self._applications_dir))
        return [
            AppInfo(
                name=entry[: -len(APP_SUFFIX)],
                path=os.path.join(self._applications_dir, entry),
                is_running=False,
            )
            for entry in entries
            if entry.endswith(APP_SUFFIX)
        ]

    def list_running_apps(self) -> list[AppInfo]:
        apps: list[AppInfo] = []
        seen: set[str] = set()

        for proc in psutil.process_iter(["pid", "exe"]):
            try:
                exe = proc.info.get("exe")
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                continue
            if not exe or exe in seen:
                continue
            bundle_path = self._bundle_path(exe)
            if bundle_path is None:
                continue

            seen.add(exe)
            apps.append(AppInfo(
                name=os.path.basename(bundle_path)[: -len(APP_SUFFIX)],
                path=exe,
                is_running=True,
                pid=proc.info.get("pid"),
            ))

        return apps

    @staticmethod
    def _bundle_path(exe: str) -> Optional[str]:
        """'/Applications/Foo.app/Contents/MacOS/Foo' -> '/Applications/Foo.app'"""
        marker = APP_SUFFIX + "/"
        idx = exe.find(marker)
        if idx == -1:
            return None
        return exe[: idx + len(APP_SUFFIX)]

    # ── Platform Metadata ───────────────────────────────────────────────

    @property
    def platform_name(self) -> str:
        return "darwin"

    @property
    def architecture(self) -> str:
        return platform.machine() or "unknown"
