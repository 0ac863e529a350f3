#!/usr/bin/env python3
# lineeditor/interface/__init__.py
from __future__ import annotations

"""
Package for interactive line input.

Provides:
- Completion values, actions and the common-prefix list completer.
- Bounded, duplicate-free history with file persistence.
- Rule-based highlighting.
- Backends (prompt_toolkit keystroke / callback strategies, plain streams).
- The LineEditor façade tying them together.
"""


# Completion FIRST (backends depend on it)
from .completion import (
    Completion,
    CompletionAction,
    Completer,
    FunctionCompleter,
    Insert,
    ListCompleter,
    ShowCompletions,
    WordListCompleter,
    common_prefix,
    current_word,
)

from .history import History
from .highlight import Color, DEFAULT_RULES, HighlightRule, char_length, highlight, render_highlighted

# Backends (after completion is available)
from .keystroke import PendingMenu, RefreshCode, TabCompletionHandler
from .cli import Backend, CallbackBackend, KeyBindingBackend, StreamBackend, make_backend

from .editor import EditorState, LineEditor, default_history_path

__all__ = [
    # completion
    "Completion",
    "CompletionAction",
    "Completer",
    "FunctionCompleter",
    "Insert",
    "ListCompleter",
    "ShowCompletions",
    "WordListCompleter",
    "common_prefix",
    "current_word",
    # history
    "History",
    # highlight
    "Color",
    "DEFAULT_RULES",
    "HighlightRule",
    "char_length",
    "highlight",
    "render_highlighted",
    # backends
    "PendingMenu",
    "RefreshCode",
    "TabCompletionHandler",
    "Backend",
    "CallbackBackend",
    "KeyBindingBackend",
    "StreamBackend",
    "make_backend",
    # editor
    "EditorState",
    "LineEditor",
    "default_history_path",
]
