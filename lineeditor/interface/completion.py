#!/usr/bin/env python3
# lineeditor/interface/completion.py
from __future__ import annotations

"""
Completion values, actions and completers.

A completer turns (buffer, cursor) into exactly one CompletionAction:
- Insert: text to splice at the cursor (may be empty: re-render only).
- ShowCompletions: menu of display strings (empty: reject, buffer untouched).

ListCompleter implements the common-prefix strategy shared by every
list-based completer: insert the longest prefix all candidates agree on,
otherwise show every candidate in the order it was supplied.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Protocol, Sequence, Union, runtime_checkable

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Completion:
    """
    A single completion candidate.

    Attributes:
        typed_text: What gets inserted into the buffer. Never empty.
        display_text: What a menu shows (may carry annotations).
    """
    typed_text: str
    display_text: str = ""

    def __post_init__(self) -> None:
        if not self.display_text:
            object.__setattr__(self, "display_text", self.typed_text)


@dataclass(frozen=True, slots=True)
class Insert:
    """Splice `text` at the cursor."""
    text: str = ""


@dataclass(frozen=True, slots=True)
class ShowCompletions:
    """Show `items` as a menu; an empty menu is a rejection."""
    items: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))


CompletionAction = Union[Insert, ShowCompletions]


@runtime_checkable
class Completer(Protocol):
    """Anything that can resolve a completion request."""

    def complete(self, buffer: str, cursor: int) -> CompletionAction:  # pragma: no cover - signature only
        ...


def common_prefix(candidates: Sequence[Completion], *, case_sensitive: bool = True) -> str:
    """
    Return the longest string that prefixes every candidate's typed_text.

    Comparison is character by character from the left. With
    case_sensitive=False characters are compared casefolded and the
    spelling of the first candidate is kept.

    Raises ValueError on an empty candidate sequence; completers must
    short-circuit before calling this.
    """
    if not candidates:
        raise ValueError("common_prefix() needs at least one candidate")

    prefix = candidates[0].typed_text
    for candidate in candidates[1:]:
        text = candidate.typed_text
        limit = min(len(prefix), len(text))
        common = 0
        while common < limit and _same_char(prefix[common], text[common], case_sensitive):
            common += 1
        prefix = prefix[:common]
        if not prefix:
            break
    return prefix


def _same_char(a: str, b: str, case_sensitive: bool) -> bool:
    if case_sensitive:
        return a == b
    return a.casefold() == b.casefold()


class ListCompleter:
    """
    Base for completers that enumerate candidates.

    Subclasses implement get_completions(); complete() runs the
    common-prefix resolution over whatever they return.
    """

    def __init__(self, *, case_sensitive: bool = True) -> None:
        self.case_sensitive = case_sensitive

    def get_completions(self, buffer: str, cursor: int) -> list[Completion]:  # pragma: no cover - interface
        raise NotImplementedError

    def complete(self, buffer: str, cursor: int) -> CompletionAction:
        candidates = [c for c in self.get_completions(buffer, cursor) if c.typed_text]
        if not candidates:
            return ShowCompletions()

        prefix = common_prefix(candidates, case_sensitive=self.case_sensitive)

        # A non-empty prefix is inserted directly; for a single candidate that
        # is the whole word. When it is empty, the next Tab shows the menu.
        if not prefix:
            return ShowCompletions(tuple(c.display_text for c in candidates))
        return Insert(prefix)


CompletionSource = Callable[[str, int], Iterable[Union[Completion, str]]]


class FunctionCompleter(ListCompleter):
    """Adapt a plain `(buffer, cursor) -> iterable` function to a completer."""

    def __init__(self, source: CompletionSource, *, case_sensitive: bool = True) -> None:
        super().__init__(case_sensitive=case_sensitive)
        self.source = source

    def get_completions(self, buffer: str, cursor: int) -> list[Completion]:
        return [
            item if isinstance(item, Completion) else Completion(str(item))
            for item in self.source(buffer, cursor)
        ]


class WordListCompleter(ListCompleter):
    """
    Complete the word left of the cursor against a fixed vocabulary.

    Candidates carry only the missing suffix as typed_text, so the
    resulting Insert splices at the cursor, while display_text is the
    full word.
    """

    def __init__(self, words: Iterable[str], *, case_sensitive: bool = True) -> None:
        super().__init__(case_sensitive=case_sensitive)
        self.words = list(words)

    def get_completions(self, buffer: str, cursor: int) -> list[Completion]:
        word = current_word(buffer[:cursor])
        out: list[Completion] = []
        for candidate in self.words:
            head = candidate[:len(word)]
            matches = head == word if self.case_sensitive else head.casefold() == word.casefold()
            if matches and len(candidate) > len(word):
                out.append(Completion(candidate[len(word):], candidate))
        return out


# Characters that end a word, shared by completers and the callback backend.
WORD_BREAK_CHARACTERS = " \t\n\r\v\f`~!@#$%^&*()-=+[{]}\\|;:'\",<.>/?"


def current_word(text_before_cursor: str) -> str:
    """Return the trailing run of non-break characters."""
    start = len(text_before_cursor)
    while start > 0 and text_before_cursor[start - 1] not in WORD_BREAK_CHARACTERS:
        start -= 1
    return text_before_cursor[start:]


def as_completer(obj: Union[Completer, CompletionSource, None]) -> Completer | None:
    """Normalize what a caller registers into a Completer (or None)."""
    if obj is None:
        return None
    if isinstance(obj, Completer):
        return obj
    if callable(obj):
        return FunctionCompleter(obj)
    raise TypeError(
        f"completer must implement complete() or be callable, got {type(obj).__name__}")
