#!/usr/bin/env python3
# lineeditor/interface/highlight.py
from __future__ import annotations

"""
Rule-based syntax highlighting for the input buffer.

Rules are (pattern, color) pairs applied in declaration order. Each rule
scans the buffer tail after its previous match, so '^' anchors to the
start of every remaining tail. Later rules overwrite earlier ones on
overlap. Positions are code points, never storage bytes.

The color map is rebuilt from scratch on every redraw.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Sequence, Union

from prompt_toolkit.document import Document
from prompt_toolkit.lexers import Lexer

from lineeditor.ui.utils import ANSI, prompt_style

# Later keys win, so "bright_black" rather than "dim" backs ansibrightblack.
_SGR_BY_STYLE = {prompt_style(key): seq for key, seq in ANSI.items()}


class Color(Enum):
    """Highlight colors; value is the prompt_toolkit style name."""
    DEFAULT = ""
    BLACK = "ansiblack"
    RED = "ansired"
    GREEN = "ansigreen"
    YELLOW = "ansiyellow"
    BLUE = "ansiblue"
    MAGENTA = "ansimagenta"
    CYAN = "ansicyan"
    WHITE = "ansigray"
    GRAY = "ansibrightblack"
    BRIGHTRED = "ansibrightred"
    BRIGHTGREEN = "ansibrightgreen"
    BRIGHTYELLOW = "ansibrightyellow"
    BRIGHTBLUE = "ansibrightblue"
    BRIGHTMAGENTA = "ansibrightmagenta"
    BRIGHTCYAN = "ansibrightcyan"
    BRIGHTWHITE = "ansiwhite"

    @property
    def sgr(self) -> str:
        """ANSI SGR sequence for plain-terminal rendering."""
        return "" if self is Color.DEFAULT else _SGR_BY_STYLE[self.value]


@dataclass(frozen=True)
class HighlightRule:
    pattern: re.Pattern[str]
    color: Color

    @classmethod
    def of(cls, pattern: Union[str, re.Pattern[str]], color: Color) -> "HighlightRule":
        return cls(re.compile(pattern) if isinstance(pattern, str) else pattern, color)


def _commands(*names: str) -> list[HighlightRule]:
    return [HighlightRule.of(rf"^\s*{name}\b", Color.BRIGHTMAGENTA) for name in names]


DEFAULT_RULES: tuple[HighlightRule, ...] = (
    *_commands("help", "quit", "set", "enable", "disable", "match", "let", "m", "l", "q"),
    HighlightRule.of(r"true", Color.YELLOW),
    HighlightRule.of(r"false", Color.YELLOW),
    HighlightRule.of(r"[0-9]+", Color.BLUE),
    HighlightRule.of(r'".*?"', Color.YELLOW),
    HighlightRule.of(r"'.*?'", Color.YELLOW),
)


def char_length(data: Union[str, bytes]) -> int:
    """Number of code points in `data`; bytes are decoded as UTF-8 first."""
    if isinstance(data, bytes):
        data = data.decode("utf-8", errors="replace")
    return len(data)


def highlight(buffer: Union[str, bytes], rules: Sequence[HighlightRule] = DEFAULT_RULES) -> list[Color]:
    """Return one Color per code point of `buffer`."""
    text = buffer.decode("utf-8", errors="replace") if isinstance(buffer, bytes) else buffer
    colors = [Color.DEFAULT] * char_length(buffer)

    for rule in rules:
        pos = 0
        while pos <= len(text):
            match = rule.pattern.search(text[pos:])
            if match is None:
                break
            start, end = pos + match.start(), pos + match.end()
            for i in range(start, end):
                colors[i] = rule.color
            # An empty match would spin forever on the same tail.
            pos = end if end > start else end + 1
    return colors


def to_fragments(text: str, colors: Sequence[Color]) -> list[tuple[str, str]]:
    """Group equal neighbouring colors into prompt_toolkit (style, text) fragments."""
    fragments: list[tuple[str, str]] = []
    for ch, color in zip(text, colors):
        if fragments and fragments[-1][0] == color.value:
            fragments[-1] = (color.value, fragments[-1][1] + ch)
        else:
            fragments.append((color.value, ch))
    return fragments


def render_highlighted(text: str, rules: Sequence[HighlightRule] = DEFAULT_RULES) -> str:
    """Render `text` with ANSI escapes, for terminals without prompt_toolkit."""
    out: list[str] = []
    for style, chunk in to_fragments(text, highlight(text, rules)):
        color = Color(style)
        out.append(f"{color.sgr}{chunk}{ANSI['reset']}" if color.sgr else chunk)
    return "".join(out)


class RuleLexer(Lexer):
    """prompt_toolkit lexer that applies highlight rules line by line."""

    def __init__(self, rules: Iterable[HighlightRule] = DEFAULT_RULES) -> None:
        self.rules = tuple(rules)

    def lex_document(self, document: Document):
        lines = document.lines

        def get_line(lineno: int) -> list[tuple[str, str]]:
            try:
                line = lines[lineno]
            except IndexError:
                return []
            return to_fragments(line, highlight(line, self.rules))

        return get_line
