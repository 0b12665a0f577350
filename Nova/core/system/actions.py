"""
Actions Module — Structured Action & Result Types
===================================================
Defines the data structures used throughout the command pipeline:
  - ActionType:          Enum of supported action categories
  - Action:              One OS-directed operation produced by the model
  - ActionResult:        Per-action outcome, parallel to the action list
  - ApplicationIdentity: Outcome of resolving an app name
  - AppInfo / BrowserTab / SystemSnapshot: live system state
  - ShellResult:         Outcome of a single OS process invocation
  - CommandOutcome:      What process_command hands back to its caller
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Optional


# ─────────────────────── Action Types ───────────────────────────────────────

class ActionType(str, Enum):
    """Categories of OS interactions the model may request."""
    LAUNCH      = "launch"
    OPEN        = "open"
    CLOSE       = "close"
    ARRANGE     = "arrange"
    FOCUS       = "focus"
    SET_DND     = "set_dnd"
    BROWSER_TAB = "browser_tab"


# ─────────────────────── Action ─────────────────────────────────────────────

@dataclass(frozen=True)
class Action:
    """
    One discrete operation parsed from the model reply.

    `type` stays a plain string: unknown values are rejected by the
    executor at dispatch time, not by the parser. `params` and `delay`
    are carried exactly as the model produced them.
    """
    type: str
    target: str
    params: Any = field(default_factory=dict)
    delay: Any = None

    @classmethod
    def from_dict(cls, data: dict) -> "Action":
        params = data.get("params")
        return cls(
            type=data["type"],
            target=data["target"],
            params=params if params is not None else {},
            delay=data.get("delay"),
        )

    def to_dict(self) -> dict:
        out = {"type": self.type, "target": self.target}
        if self.params:
            out["params"] = self.params
        if self.delay is not None:
            out["delay"] = self.delay
        return out


@dataclass(frozen=True)
class ActionResult:
    """Outcome of one executed action."""
    action: Action
    success: bool

    def to_dict(self) -> dict:
        return {"action": self.action.to_dict(), "success": self.success}


# ─────────────────────── App Identity ───────────────────────────────────────

@dataclass(frozen=True)
class ApplicationIdentity:
    requested_name: str
    canonical_name: str
    bundle_id: Optional[str] = None
    fallback: bool = False          # True when no strategy verified the name


# ─────────────────────── System State ───────────────────────────────────────

@dataclass
class AppInfo:
    name: str
    path: Optional[str] = None
    is_running: bool = False
    pid: Optional[int] = None
    bundle_id: Optional[str] = None


@dataclass
class BrowserTab:
    url: str
    title: Optional[str] = None
    active: bool = False
    pinned: bool = False


@dataclass
class SystemSnapshot:
    """Point-in-time view of the host. Rebuilt on every request."""
    platform: str
    architecture: str
    available_apps: list[AppInfo] = field(default_factory=list)
    running_apps: list[AppInfo] = field(default_factory=list)
    browser_tabs: list[BrowserTab] = field(default_factory=list)

    def app_names(self) -> list[str]:
        return [a.name for a in self.available_apps]

    def running_names(self) -> list[str]:
        return [a.name for a in self.running_apps]

    def to_context(self) -> str:
        """Render the CONTEXT block embedded in the model prompt."""
        lines = [
            f"Platform: {self.platform}",
            f"Architecture: {self.architecture}",
            f"Running Apps: {', '.join(self.running_names())}",
            f"Available Apps: {', '.join(self.app_names())}",
        ]
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return asdict(self)


# ─────────────────────── Process Results ────────────────────────────────────

@dataclass
class ShellResult:
    """
    Result of one OS process invocation (open, osascript, ...).
    Every SystemBackend primitive returns one of these.
    """
    success: bool
    command: str = ""              # The argv that was executed, joined
    stdout: str = ""
    stderr: str = ""
    return_code: int = -1
    timed_out: bool = False
    error: str = ""

    def __str__(self) -> str:
        if self.success:
            return self.stdout
        return self.error or self.stderr or f"exit code {self.return_code}"


# ─────────────────────── Command Outcome ────────────────────────────────────

@dataclass
class CommandOutcome:
    success: bool
    actions: list[Action] = field(default_factory=list)
    results: list[ActionResult] = field(default_factory=list)
    error: str = ""

    def to_dict(self) -> dict:
        if not self.success:
            return {"success": False, "error": self.error}
        return {
            "success": True,
            "actions": [a.to_dict() for a in self.actions],
            "results": [r.to_dict() for r in self.results],
        }
