#!/usr/bin/env python3
# lineeditor/interface/callbacks.py
from __future__ import annotations

"""
Completion and hint callbacks for editors that ask on every keystroke.

Both callbacks resolve the action against the text left of the cursor:
- Insert contributes the suffix that completes the word at the cursor.
- ShowCompletions contributes the whole candidate list as the menu.
A comma right before the cursor means "nothing to complete here".
"""

import logging
from typing import Iterable, Optional

from prompt_toolkit.application.current import get_app
from prompt_toolkit.auto_suggest import AutoSuggest, Suggestion
from prompt_toolkit.buffer import Buffer
from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.key_binding.key_processor import KeyPressEvent
from prompt_toolkit.styles import Style

from lineeditor.interface.completion import CompletionAction, Insert, current_word
from lineeditor.interface.keystroke import EditorView

logger = logging.getLogger(__name__)

# Hint rows sit in the bottom toolbar, which prompt_toolkit draws reversed.
HINT_STYLE = Style.from_dict({
    "bottom-toolbar": "noreverse",
    "hint": "ansibrightblack",
})


def completion_suppressed(context: str) -> bool:
    return context.endswith(",")


def resolve(editor: EditorView, context: str) -> Optional[CompletionAction]:
    """Action for the text left of the cursor, or None when suppressed."""
    if completion_suppressed(context):
        return None
    return editor.get_completion_action(context, len(context))


def completion_candidates(action: CompletionAction, word: str) -> list[str]:
    """Replacement strings for the word at the cursor."""
    if isinstance(action, Insert):
        return [word + action.text]
    return list(action.items)


def hint_for(action: CompletionAction, word: str) -> Optional[str]:
    """Inline hint text shown after the cursor, if any."""
    if isinstance(action, Insert):
        return action.text or None
    if len(action.items) == 1 and action.items[0].startswith(word):
        return action.items[0][len(word):] or None
    return None


def hint_rows(action: CompletionAction, word: str, limit: int) -> list[str]:
    """Menu items that extend `word`, at most `limit` of them."""
    if isinstance(action, Insert):
        return []
    return [item for item in action.items if item.startswith(word)][:max(limit, 0)]


class ActionCompleter(Completer):
    """prompt_toolkit completer that fills the menu from completion actions."""

    def __init__(self, editor: EditorView) -> None:
        self._editor = editor

    def get_completions(self, document: Document, complete_event: CompleteEvent) -> Iterable[Completion]:
        context = document.text_before_cursor
        action = resolve(self._editor, context)
        if action is None:
            return
        word = current_word(context)
        for text in completion_candidates(action, word):
            yield Completion(text, start_position=-len(word))


class ActionAutoSuggest(AutoSuggest):
    """Grey inline hint derived from the same completion action."""

    def __init__(self, editor: EditorView) -> None:
        self._editor = editor

    def get_suggestion(self, buffer: Buffer, document: Document) -> Optional[Suggestion]:
        context = document.text_before_cursor
        action = resolve(self._editor, context)
        if action is None:
            return None
        text = hint_for(action, current_word(context))
        return Suggestion(text) if text else None


class HintToolbar:
    """
    Bottom toolbar listing the candidates that extend the word at the
    cursor, one per row. A single candidate is left to the inline hint.
    """

    def __init__(self, editor: EditorView, *, max_rows: int) -> None:
        self._editor = editor
        self.max_rows = max_rows

    def rows_for(self, document: Document) -> list[str]:
        context = document.text_before_cursor
        action = resolve(self._editor, context)
        if action is None:
            return []
        rows = hint_rows(action, current_word(context), self.max_rows)
        return rows if len(rows) > 1 else []

    def __call__(self) -> list[tuple[str, str]]:
        rows = self.rows_for(get_app().current_buffer.document)
        return [("class:hint", "\n".join(rows))] if rows else []


def tab_bindings(editor: EditorView, *, max_line_size: int) -> KeyBindings:
    """
    Tab: insert directly when the action says so, ring the bell on an
    empty menu, otherwise open (or cycle) the completion menu.
    """
    kb = KeyBindings()

    @kb.add("tab")
    def _(event: KeyPressEvent) -> None:
        buff = event.current_buffer
        if buff.complete_state:
            buff.complete_next()
            return

        action = resolve(editor, buff.document.text_before_cursor)
        if action is None:
            event.app.output.bell()
            return

        if isinstance(action, Insert):
            if len(buff.text) + len(action.text) > max_line_size:
                logger.debug("insert rejected: line would exceed %d chars", max_line_size)
                event.app.output.bell()
            elif action.text:
                buff.insert_text(action.text)
            return

        if not action.items:
            event.app.output.bell()
            return
        buff.start_completion(select_first=False)

    return kb
