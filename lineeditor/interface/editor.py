#!/usr/bin/env python3
# lineeditor/interface/editor.py
from __future__ import annotations

"""
LineEditor: prompt, read one line, complete, remember.

The editor owns the prompt, the history path and exactly one backend.
Backends call back into get_completion_action(); the editor forwards to
whatever completer is registered. History is loaded at construction and
flushed, best effort, on close().
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence, Union

from lineeditor.config import EditorConfig
from lineeditor.interface.cli import Backend, make_backend
from lineeditor.interface.completion import (
    CompletionAction,
    Completer,
    CompletionSource,
    ShowCompletions,
    as_completer,
)
from lineeditor.interface.highlight import HighlightRule
from lineeditor.interface.history import History

logger = logging.getLogger(__name__)


class EditorState(Enum):
    IDLE = "idle"
    AWAITING_INPUT = "awaiting_input"
    RESOLVING_COMPLETION = "resolving_completion"


def default_history_path(program_name: str) -> Optional[Path]:
    """~/.<program_name>-history, or None when there is no home directory."""
    try:
        home = Path.home()
    except (RuntimeError, KeyError):
        return None
    return home / f".{program_name}-history"


class LineEditor:
    """
    Interactive line input for a REPL.

    Usage:
        with LineEditor("calc", completer=my_completer) as editor:
            while (line := editor.read_line()) is not None:
                ...
    """

    def __init__(
        self,
        program_name: str,
        history_path: Union[str, Path, None] = None,
        stdin=None,
        stdout=None,
        stderr=None,
        *,
        completer: Union[Completer, CompletionSource, None] = None,
        backend: Union[str, type[Backend], None] = None,
        config: Optional[EditorConfig] = None,
        highlight_rules: Optional[Sequence[HighlightRule]] = None,
    ) -> None:
        self.program_name = program_name
        self.config = config or EditorConfig()
        self._prompt = f"{program_name}> "
        self.history_path: Optional[Path] = (
            Path(history_path) if history_path else default_history_path(program_name)
        )
        self._completer = as_completer(completer)
        self._state = EditorState.IDLE
        self._closed = False

        backend_cls = make_backend(backend or self.config.backend, stdin)
        self._backend = backend_cls(
            self,
            stdin=stdin,
            stdout=stdout,
            stderr=stderr,
            config=self.config,
            highlight_rules=highlight_rules,
        )
        self._backend.setup()
        logger.debug("%s: using %s backend, history at %s",
                     program_name, self._backend.name, self.history_path)
        self._load_history()

    # ---------- prompt ----------

    def get_prompt(self) -> str:
        return self._prompt

    def set_prompt(self, text: str) -> None:
        self._prompt = text

    prompt = property(get_prompt, set_prompt)

    # ---------- completion ----------

    @property
    def completer(self) -> Optional[Completer]:
        return self._completer

    def set_completer(self, completer: Union[Completer, CompletionSource, None]) -> None:
        """Register a Completer, a `(buffer, cursor) -> iterable` function, or None."""
        self._completer = as_completer(completer)

    def get_completion_action(self, buffer: str, cursor: int) -> CompletionAction:
        """Resolve a completion request; with no completer the menu is always empty."""
        if not 0 <= cursor <= len(buffer):
            raise ValueError(f"cursor {cursor} outside buffer of length {len(buffer)}")
        if self._completer is None:
            return ShowCompletions()

        previous, self._state = self._state, EditorState.RESOLVING_COMPLETION
        try:
            action = self._completer.complete(buffer, cursor)
        finally:
            self._state = previous
        logger.debug("completion at %d of %r -> %r", cursor, buffer, action)
        return action

    # ---------- input ----------

    @property
    def state(self) -> EditorState:
        return self._state

    @property
    def backend(self) -> Backend:
        return self._backend

    @property
    def history(self) -> History:
        return self._backend.history

    def read_line(self) -> Optional[str]:
        """
        Block until a line is accepted or input ends.

        Returns the line without trailing CR/LF characters, or None at end
        of input. Lines with visible content are added to history.
        """
        if self._closed:
            raise RuntimeError("read_line() on a closed LineEditor")
        if self._state is not EditorState.IDLE:
            raise RuntimeError("read_line() is not re-entrant")

        self._state = EditorState.AWAITING_INPUT
        try:
            while True:
                try:
                    raw = self._backend.get_line(self._prompt)
                except (BlockingIOError, InterruptedError):
                    logger.debug("input not ready; retrying read")
                    continue
                break
        finally:
            self._state = EditorState.IDLE

        if raw is None:
            return None

        line = raw.rstrip("\r\n")
        if line.strip():
            self._backend.history.add(line)
        return line

    # ---------- history ----------

    def _load_history(self) -> None:
        if self.history_path is None:
            return
        if not self.history_path.exists():
            logger.debug("no history file at %s yet", self.history_path)
            return
        try:
            self._backend.history.load(self.history_path)
        except (OSError, ValueError) as exc:
            logger.warning("could not load history from %s: %s", self.history_path, exc)

    def _save_history(self) -> None:
        if self.history_path is None:
            return
        try:
            self._backend.history.save(self.history_path)
        except (OSError, ValueError) as exc:
            logger.warning("could not save history to %s: %s", self.history_path, exc)

    # ---------- lifecycle ----------

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Flush history (best effort) and release the backend. Idempotent."""
        if self._closed:
            return
        self._closed = True
        try:
            self._save_history()
        finally:
            self._backend.teardown()

    def __enter__(self) -> "LineEditor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
