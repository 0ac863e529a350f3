#!/usr/bin/env python3
# lineeditor/__init__.py
from __future__ import annotations
"""
lineeditor: prompt, read a line, complete, remember.

Re-exports the public API of lineeditor.interface and lineeditor.config.
"""

from lineeditor.config import ConfigError, EditorConfig, load_config
from lineeditor.interface import (
    Completion,
    CompletionAction,
    Completer,
    FunctionCompleter,
    Insert,
    LineEditor,
    ListCompleter,
    ShowCompletions,
    WordListCompleter,
)

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "EditorConfig",
    "load_config",
    "Completion",
    "CompletionAction",
    "Completer",
    "FunctionCompleter",
    "Insert",
    "LineEditor",
    "ListCompleter",
    "ShowCompletions",
    "WordListCompleter",
]
