#!/usr/bin/env python3
# lineeditor/interface/cli.py
from __future__ import annotations

"""
Line-input backends.

Each backend owns the keystroke loop and the history store for one
LineEditor. Strategies:
    keys       prompt_toolkit, one Tab callback per keystroke (deferred menu)
    callbacks  prompt_toolkit, completer + inline hints + highlighting
    stream     plain streams, for input that is not a terminal
"""

import logging
import sys
from typing import AsyncGenerator, Iterable, Optional, Sequence, TextIO, Union

from prompt_toolkit import PromptSession
from prompt_toolkit.enums import EditingMode
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.history import History as PromptHistory
from prompt_toolkit.input import Input, create_input
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.key_binding.key_processor import KeyPressEvent
from prompt_toolkit.output import Output, create_output

from lineeditor.config import EditorConfig
from lineeditor.interface.callbacks import (
    HINT_STYLE,
    ActionAutoSuggest,
    ActionCompleter,
    HintToolbar,
    tab_bindings,
)
from lineeditor.interface.highlight import DEFAULT_RULES, HighlightRule, RuleLexer
from lineeditor.interface.history import History
from lineeditor.interface.keystroke import EditorView, TabCompletionHandler, run_tab_handler
from lineeditor.ui.utils import prompt_style

logger = logging.getLogger(__name__)


class Backend:
    """
    Base interface for line-input backends.

    Subclasses implement:
        - setup()
        - get_line(prompt) -> raw line, or None at end of input
        - teardown()

    get_line may raise BlockingIOError/InterruptedError for a transient
    "try again"; the editor retries. Context manager support guarantees
    teardown.
    """

    name = "base"
    DEFAULT_HISTORY_SIZE = 800

    def __init__(
        self,
        editor: EditorView,
        *,
        stdin=None,
        stdout=None,
        stderr=None,
        config: Optional[EditorConfig] = None,
        highlight_rules: Optional[Sequence[HighlightRule]] = None,
    ) -> None:
        self.editor = editor
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.stderr = stderr if stderr is not None else sys.stderr
        self.config = config or EditorConfig()
        self.highlight_rules = tuple(DEFAULT_RULES if highlight_rules is None else highlight_rules)
        self.history = History(self.config.history_size or self.DEFAULT_HISTORY_SIZE)

    def setup(self) -> None:  # pragma: no cover - interface
        ...

    def get_line(self, prompt: str) -> Optional[str]:  # pragma: no cover - interface
        raise NotImplementedError

    def teardown(self) -> None:  # pragma: no cover - interface
        ...

    # Context manager helpers
    def __enter__(self) -> "Backend":
        self.setup()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.teardown()


# ===== Plain streams =====
class StreamBackend(Backend):
    """Prompt on stdout, read a line from stdin. No completion UI."""

    name = "stream"

    def get_line(self, prompt: str) -> Optional[str]:
        self.stdout.write(prompt)
        self.stdout.flush()
        line = self.stdin.readline()
        if line is None:
            # Non-blocking stream with nothing buffered yet.
            raise BlockingIOError("input not ready")
        return line or None


# ===== prompt_toolkit =====
class _SessionHistory(PromptHistory):
    """
    Read-through view of a History for prompt_toolkit's up/down navigation.
    The editor decides what gets recorded, so appends from the session are
    ignored.
    """

    def __init__(self, store: History) -> None:
        super().__init__()
        self._store = store

    def load_history_strings(self) -> Iterable[str]:
        return list(reversed(self._store.entries))

    async def load(self) -> AsyncGenerator[str, None]:
        for item in reversed(self._store.entries):
            yield item

    def get_strings(self) -> list[str]:
        return self._store.entries

    def append_string(self, string: str) -> None:
        pass

    def store_string(self, string: str) -> None:
        pass


class _PromptToolkitBackend(Backend):
    """Shared PromptSession plumbing for both prompt_toolkit strategies."""

    def setup(self) -> None:
        self._input = self.stdin if isinstance(self.stdin, Input) else create_input(self.stdin)
        self._output = self._pick_output()
        self._session = PromptSession(
            input=self._input,
            output=self._output,
            history=_SessionHistory(self.history),
            editing_mode=EditingMode.EMACS,
            **self.session_options(),
        )

    def _pick_output(self) -> Output:
        if isinstance(self.stdout, Output):
            return self.stdout
        stream = self.stdout
        # Redirected stdout: keep the editing UI on the terminal.
        if not _is_interactive(stream) and _is_interactive(self.stderr):
            stream = self.stderr
        return create_output(stream)

    def session_options(self) -> dict:  # pragma: no cover - interface
        return {}

    def _message(self, prompt: str) -> Union[str, FormattedText]:
        color = self.config.prompt_color
        return FormattedText([(prompt_style(color), prompt)]) if color else prompt

    def get_line(self, prompt: str) -> Optional[str]:
        try:
            return self._session.prompt(self._message(prompt))
        except EOFError:
            return None


class KeyBindingBackend(_PromptToolkitBackend):
    """Single Tab callback per keystroke; menus printed below the line."""

    name = "keys"
    DEFAULT_HISTORY_SIZE = 800

    def session_options(self) -> dict:
        self.tab_handler = TabCompletionHandler(self.editor)
        kb = KeyBindings()

        @kb.add("tab")
        def _(event: KeyPressEvent) -> None:
            run_tab_handler(self.tab_handler, event)

        return {"key_bindings": kb}


class CallbackBackend(_PromptToolkitBackend):
    """Completer, inline hint and highlighter callbacks, re-run per keystroke."""

    name = "callbacks"
    DEFAULT_HISTORY_SIZE = 120

    def session_options(self) -> dict:
        options: dict = {
            "completer": ActionCompleter(self.editor),
            "complete_while_typing": False,
            "key_bindings": tab_bindings(self.editor, max_line_size=self.config.max_line_size),
        }
        if self.config.enable_hints:
            options["auto_suggest"] = ActionAutoSuggest(self.editor)
            options["bottom_toolbar"] = HintToolbar(self.editor, max_rows=self.config.max_hint_rows)
            options["style"] = HINT_STYLE
        if self.config.enable_highlight and self.highlight_rules:
            options["lexer"] = RuleLexer(self.highlight_rules)
        return options


BACKENDS: dict[str, type[Backend]] = {
    StreamBackend.name: StreamBackend,
    KeyBindingBackend.name: KeyBindingBackend,
    CallbackBackend.name: CallbackBackend,
}


def _is_interactive(stream: TextIO) -> bool:
    if isinstance(stream, Input):
        return True
    try:
        return bool(stream.isatty())
    except (AttributeError, ValueError):
        return False


def make_backend(kind: Union[str, type[Backend]], stdin=None) -> type[Backend]:
    """
    Pick the backend class once, at startup.

    'auto' uses the callback strategy on a terminal and plain streams
    otherwise; a Backend subclass is returned as-is.
    """
    if isinstance(kind, type) and issubclass(kind, Backend):
        return kind
    key = str(kind).strip().lower()
    if key == "auto":
        return CallbackBackend if _is_interactive(stdin if stdin is not None else sys.stdin) else StreamBackend
    try:
        return BACKENDS[key]
    except KeyError:
        raise ValueError(
            f"unknown backend {kind!r}; expected one of {['auto', *BACKENDS]}") from None
