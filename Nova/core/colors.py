"""
Terminal Colors — ANSI color utilities for Nova console output.
=================================================================
Color scheme:
  - Cyan        → User command
  - Green       → Succeeded actions
  - Yellow      → Actions being reported / warnings
  - Red         → Failed actions / errors
  - Blue        → System info / status
  - Dark gray   → Debug / timing info

Set NO_COLOR to disable styling.
"""

import os


# ─────────────────────────── ANSI Codes ─────────────────────────────────────

class _Colors:
    """ANSI escape codes for terminal coloring."""
    RESET     = "\033[0m"
    BOLD      = "\033[1m"

    YELLOW    = "\033[33m"
    GRAY      = "\033[90m"

    BRIGHT_RED     = "\033[91m"
    BRIGHT_GREEN   = "\033[92m"
    BRIGHT_BLUE    = "\033[94m"
    BRIGHT_CYAN    = "\033[96m"
    BRIGHT_WHITE   = "\033[97m"


C = _Colors()

_USE_COLOR = not os.getenv("NO_COLOR")


def _wrap(color: str, text: str) -> str:
    if not _USE_COLOR:
        return text
    return f"{color}{text}{C.RESET}"


# ─────────────────────────── Public API ─────────────────────────────────────

def error(text: str) -> str:
    return _wrap(C.BRIGHT_RED, text)


def warning(text: str) -> str:
    return _wrap(C.YELLOW, text)


def info(text: str) -> str:
    return _wrap(C.BRIGHT_BLUE, text)


def debug(text: str) -> str:
    return _wrap(C.GRAY, text)


def success(text: str) -> str:
    return _wrap(f"{C.BOLD}{C.BRIGHT_GREEN}", text)


def header(text: str) -> str:
    return _wrap(f"{C.BOLD}{C.BRIGHT_WHITE}", text)


def label(tag: str, text: str, color: str = C.BRIGHT_BLUE) -> str:
    """Format a labeled message: [TAG] text."""
    tag_str = _wrap(f"{C.BOLD}{color}", f"[{tag}]")
    return f"{tag_str} {text}"


# ─────────────────── Convenience Print Functions ────────────────────────────

def print_user(text: str) -> None:
    print(label("YOU", _wrap(f"{C.BOLD}{C.BRIGHT_CYAN}", text), C.BRIGHT_CYAN))


def print_result(action_text: str, ok: bool) -> None:
    """One line per executed action: [ OK ] / [FAIL]."""
    if ok:
        print(label(" OK ", success(action_text), C.BRIGHT_GREEN))
    else:
        print(label("FAIL", error(action_text), C.BRIGHT_RED))


def print_error(text: str) -> None:
    print(label("ERROR", error(text), C.BRIGHT_RED))


def print_warning(text: str) -> None:
    print(label("WARN", warning(text), C.YELLOW))


def print_info(text: str) -> None:
    print(label("INFO", info(text), C.BRIGHT_BLUE))


def print_debug(text: str) -> None:
    print(debug(text))
