#!/usr/bin/env python3
# lineeditor/ui/utils/ansi.py
from __future__ import annotations

import ctypes
import os
import re
from typing import Optional

# Names double as PROMPT_COLOR values; prompt_style() maps them for prompt_toolkit.
_COLORS = ("black", "red", "green", "yellow", "blue", "magenta", "cyan", "white")

ANSI: dict[str, str] = {
    "reset": "\x1b[0m",
    "bold": "\x1b[1m",
    "dim": "\x1b[2m",
    **{name: f"\x1b[{30 + i}m" for i, name in enumerate(_COLORS)},
    **{f"bright_{name}": f"\x1b[{90 + i}m" for i, name in enumerate(_COLORS)},
}

ANSI_REGEX = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")

_STYLE_NAMES = {
    "reset": "",
    "bold": "bold",
    "dim": "ansibrightblack",
    "white": "ansigray",
    "bright_white": "ansiwhite",
}

_vt_enabled: Optional[bool] = None


def strip_ansi(text: str) -> str:
    return ANSI_REGEX.sub("", text)


def prompt_style(name: str) -> str:
    """prompt_toolkit style string for an ANSI table key ('bright_green' -> 'ansibrightgreen')."""
    return _STYLE_NAMES.get(name, "ansi" + name.replace("_", ""))


def enable_windows_vt() -> bool:
    """
    True when escape sequences reach the terminal intact. On Windows this
    switches the console into VT mode once; elsewhere it is always True.
    """
    global _vt_enabled
    if _vt_enabled is None:
        _vt_enabled = os.name != "nt" or bool(os.environ.get("WT_SESSION")) or _set_vt_mode()
    return _vt_enabled


def _set_vt_mode() -> bool:
    try:
        kernel32 = ctypes.windll.kernel32  # type: ignore[attr-defined]
        handle = kernel32.GetStdHandle(-11)  # STD_OUTPUT_HANDLE
        mode = ctypes.c_uint()
        if handle in (0, -1) or not kernel32.GetConsoleMode(handle, ctypes.byref(mode)):
            return False
        return bool(kernel32.SetConsoleMode(handle, mode.value | 0x0004))
    except (AttributeError, OSError):
        return False


def colorize(text: str, *styles: str) -> str:
    """Wrap text in the named SGR styles; unknown names are ignored."""
    seq = "".join(ANSI[s] for s in styles if s in ANSI)
    return f"{seq}{text}{ANSI['reset']}" if seq else text
