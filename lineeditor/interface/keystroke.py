#!/usr/bin/env python3
# lineeditor/interface/keystroke.py
from __future__ import annotations

"""
Tab completion for keystroke-driven line editors.

The handler runs once per Tab press and talks to the editing engine only
through KeystrokeSession. Showing a menu takes two Tab cycles: the first
pushes "end of line" + Tab back into the input and records the menu as
pending; the second (pushed) Tab prints it below the line, reprints the
prompt and buffer, then pushes one "move left" per character between the
end of the buffer and the original cursor.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

from prompt_toolkit.key_binding.key_processor import KeyPress, KeyPressEvent
from prompt_toolkit.keys import Keys

from lineeditor.interface.completion import Insert

logger = logging.getLogger(__name__)

# Control characters understood by emacs-style bindings.
MOVE_LEFT = "\x02"     # Ctrl-B
MOVE_TO_END = "\x05"   # Ctrl-E
TRIGGER = "\t"


class RefreshCode(Enum):
    REFRESH = "refresh"
    REFRESH_BEEP = "refresh_beep"
    ERROR = "error"


class EditorView(Protocol):
    """The slice of LineEditor that backends are allowed to see."""

    def get_completion_action(self, buffer: str, cursor: int): ...  # pragma: no cover

    def get_prompt(self) -> str: ...  # pragma: no cover


class KeystrokeSession(Protocol):
    """Primitives a keystroke engine offers to a completion handler."""

    def line(self) -> tuple[str, int]: ...  # pragma: no cover - (buffer, cursor)

    def insert(self, text: str) -> None: ...  # pragma: no cover

    def push(self, keys: str) -> None: ...  # pragma: no cover - replayed before pending input

    def write(self, text: str) -> None: ...  # pragma: no cover - raw terminal output

    def bell(self) -> None: ...  # pragma: no cover


@dataclass(frozen=True)
class PendingMenu:
    content: str
    cursor_restore_count: int


class TabCompletionHandler:
    """
    Two-state Tab handler: no pending menu, or PendingMenu(content, count).
    """

    def __init__(self, editor: EditorView) -> None:
        self._editor = editor
        self.pending: Optional[PendingMenu] = None

    def __call__(self, session: KeystrokeSession) -> RefreshCode:
        pending = self.pending
        if pending is not None:
            self.pending = None
            return self._flush_pending(session, pending)

        buffer, cursor = session.line()
        action = self._editor.get_completion_action(buffer, cursor)

        if isinstance(action, Insert):
            if action.text:
                session.insert(action.text)
            return RefreshCode.REFRESH

        if not action.items:
            return RefreshCode.REFRESH_BEEP

        # The engine cannot move the cursor and keep going inside this call,
        # so ask it to jump to the end of the line and call us again.
        session.push(MOVE_TO_END + TRIGGER)

        parts = ["\n"]
        parts.extend(f"{item}\n" for item in action.items)
        parts.append(self._editor.get_prompt())
        parts.append(buffer)
        self.pending = PendingMenu("".join(parts), len(buffer) - cursor)
        logger.debug("menu of %d items deferred to next trigger", len(action.items))
        return RefreshCode.REFRESH

    def _flush_pending(self, session: KeystrokeSession, pending: PendingMenu) -> RefreshCode:
        session.write(pending.content)
        if pending.cursor_restore_count:
            session.push(MOVE_LEFT * pending.cursor_restore_count)
        return RefreshCode.REFRESH


# ---------- prompt_toolkit binding ----------

_KEYS = {
    MOVE_LEFT: Keys.ControlB,
    MOVE_TO_END: Keys.ControlE,
    TRIGGER: Keys.Tab,
}


class PromptToolkitKeystrokes:
    """KeystrokeSession over a prompt_toolkit key press event."""

    def __init__(self, event: KeyPressEvent) -> None:
        self._event = event

    def line(self) -> tuple[str, int]:
        buff = self._event.current_buffer
        return buff.text, buff.cursor_position

    def insert(self, text: str) -> None:
        self._event.current_buffer.insert_text(text)

    def push(self, keys: str) -> None:
        # first=True prepends, so feed in reverse to keep the order.
        processor = self._event.app.key_processor
        for ch in reversed(keys):
            processor.feed(KeyPress(_KEYS[ch], ch), first=True)

    def write(self, text: str) -> None:
        app = self._event.app
        # End on column 0 and forget the last frame: the next render paints
        # the live line over the reprinted one.
        app.output.write_raw(text + "\r")
        app.output.flush()
        app.renderer.reset(leave_alternate_screen=False)

    def bell(self) -> None:
        self._event.app.output.bell()


def run_tab_handler(handler: TabCompletionHandler, event: KeyPressEvent) -> RefreshCode:
    """Invoke `handler` for a prompt_toolkit Tab event and apply its refresh code."""
    session = PromptToolkitKeystrokes(event)
    code = handler(session)
    if code is not RefreshCode.REFRESH:
        session.bell()
    event.app.invalidate()
    return code
