"""tests for the highlight rule engine."""

from prompt_toolkit.document import Document
from prompt_toolkit.styles import Style

from lineeditor.interface.highlight import (
    Color,
    DEFAULT_RULES,
    HighlightRule,
    RuleLexer,
    char_length,
    highlight,
    render_highlighted,
    to_fragments,
)
from lineeditor.ui.utils import ANSI, prompt_style


D = Color.DEFAULT


class TestHighlight:

    def test_no_rules(self):
        assert highlight("abc", []) == [D, D, D]

    def test_every_match_is_colored(self):
        rules = [HighlightRule.of(r"[0-9]+", Color.BLUE)]
        assert highlight("1 a 22", rules) == [Color.BLUE, D, D, D, Color.BLUE, Color.BLUE]

    def test_later_rule_wins(self):
        rules = [
            HighlightRule.of(r"abc", Color.RED),
            HighlightRule.of(r"b", Color.GREEN),
        ]
        assert highlight("abc", rules) == [Color.RED, Color.GREEN, Color.RED]

    def test_caret_anchors_each_tail(self):
        rules = [HighlightRule.of(r"^\s*q\b", Color.MAGENTA)]
        colors = highlight("q q", rules)
        assert colors == [Color.MAGENTA, Color.MAGENTA, Color.MAGENTA]

    def test_empty_matches_terminate(self):
        rules = [HighlightRule.of(r"x*", Color.RED)]
        assert highlight("axa", rules) == [D, Color.RED, D]

    def test_multibyte_before_token_str(self):
        rules = [HighlightRule.of(r"42", Color.BLUE)]
        colors = highlight("€ 42", rules)
        assert colors == [D, D, Color.BLUE, Color.BLUE]

    def test_multibyte_before_token_bytes(self):
        # '€' is three bytes in UTF-8; positions must count it once.
        data = "€ 42".encode("utf-8")
        assert len(data) == 6
        colors = highlight(data, [HighlightRule.of(r"42", Color.BLUE)])
        assert len(colors) == 4
        assert colors.index(Color.BLUE) == 2

    def test_char_length(self):
        assert char_length("€".encode("utf-8")) == 1
        assert char_length("a€b".encode("utf-8")) == 3
        assert char_length("𝄞") == 1


class TestDefaultRules:

    def test_command_at_line_start(self):
        colors = highlight("  help me", DEFAULT_RULES)
        assert colors[2:6] == [Color.BRIGHTMAGENTA] * 4
        assert colors[7:] == [D, D]

    def test_command_not_mid_line(self):
        assert Color.BRIGHTMAGENTA not in highlight("x help", DEFAULT_RULES)

    def test_literals(self):
        colors = highlight("set x true 12 'a'", DEFAULT_RULES)
        assert colors[:3] == [Color.BRIGHTMAGENTA] * 3
        assert colors[6:10] == [Color.YELLOW] * 4
        assert colors[11:13] == [Color.BLUE] * 2
        assert colors[14:17] == [Color.YELLOW] * 3

    def test_string_overrides_number(self):
        colors = highlight('"a1"', DEFAULT_RULES)
        assert colors == [Color.YELLOW] * 4


class TestRendering:

    def test_fragments_group_runs(self):
        frags = to_fragments("ab1", [D, D, Color.BLUE])
        assert frags == [("", "ab"), ("ansiblue", "1")]

    def test_render_highlighted(self):
        out = render_highlighted("q 1", [HighlightRule.of(r"1", Color.BLUE)])
        assert out == "q " + ANSI["blue"] + "1" + ANSI["reset"]

    def test_sgr_names(self):
        assert Color.BRIGHTMAGENTA.sgr == ANSI["bright_magenta"]
        assert Color.GRAY.sgr == ANSI["bright_black"]
        assert Color.DEFAULT.sgr == ""

    def test_lexer(self):
        lexer = RuleLexer([HighlightRule.of(r"[0-9]+", Color.BLUE)])
        get_line = lexer.lex_document(Document("x 12"))
        assert get_line(0) == [("", "x "), ("ansiblue", "12")]
        assert get_line(5) == []

    def test_white_names(self):
        assert Color.WHITE.sgr == ANSI["white"]
        assert Color.BRIGHTWHITE.sgr == ANSI["bright_white"]

    def test_every_color_is_a_valid_style(self):
        Style([(f"c{i}", color.value) for i, color in enumerate(Color)])


class TestPromptStyle:

    def test_names(self):
        assert prompt_style("green") == "ansigreen"
        assert prompt_style("bright_magenta") == "ansibrightmagenta"
        assert prompt_style("white") == "ansigray"
        assert prompt_style("bright_white") == "ansiwhite"
        assert prompt_style("bold") == "bold"
