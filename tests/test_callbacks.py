"""tests for the completer / hint callbacks and the callback Tab binding."""

from unittest.mock import MagicMock

from prompt_toolkit.completion import CompleteEvent
from prompt_toolkit.document import Document

from lineeditor.interface.callbacks import (
    ActionAutoSuggest,
    ActionCompleter,
    HintToolbar,
    completion_candidates,
    completion_suppressed,
    hint_for,
    hint_rows,
    tab_bindings,
)
from lineeditor.interface.completion import Insert, ShowCompletions


class FakeEditor:
    def __init__(self, action):
        self.action = action
        self.calls = []

    def get_completion_action(self, buffer, cursor):
        self.calls.append((buffer, cursor))
        return self.action

    def get_prompt(self):
        return "> "


def completions(editor, text, cursor=None):
    doc = Document(text, len(text) if cursor is None else cursor)
    return list(ActionCompleter(editor).get_completions(doc, CompleteEvent(completion_requested=True)))


class TestHelpers:

    def test_comma_suppresses(self):
        assert completion_suppressed("f(a,")
        assert not completion_suppressed("f(a, ")

    def test_candidates_for_insert(self):
        assert completion_candidates(Insert("nt"), "pri") == ["print"]

    def test_candidates_for_menu(self):
        assert completion_candidates(ShowCompletions(("add", "sub")), "") == ["add", "sub"]

    def test_hint_for_insert(self):
        assert hint_for(Insert("nt"), "pri") == "nt"
        assert hint_for(Insert(""), "pri") is None

    def test_hint_for_single_item(self):
        assert hint_for(ShowCompletions(("printf",)), "pr") == "intf"

    def test_no_hint_for_many_items(self):
        assert hint_for(ShowCompletions(("add", "sub")), "") is None


class TestActionCompleter:

    def test_context_is_text_left_of_cursor(self):
        editor = FakeEditor(Insert(""))
        completions(editor, "pri xyz", cursor=3)
        assert editor.calls == [("pri", 3)]

    def test_insert_replaces_word(self):
        result = completions(FakeEditor(Insert("nt")), "x pri")
        assert [(c.text, c.start_position) for c in result] == [("print", -3)]

    def test_menu_items_in_order(self):
        result = completions(FakeEditor(ShowCompletions(("sub", "add"))), "s")
        assert [c.text for c in result] == ["sub", "add"]
        assert all(c.start_position == -1 for c in result)

    def test_empty_menu(self):
        assert completions(FakeEditor(ShowCompletions()), "zz") == []

    def test_trailing_comma(self):
        editor = FakeEditor(Insert("x"))
        assert completions(editor, "f(a,") == []
        assert editor.calls == []


class TestActionAutoSuggest:

    def suggest(self, editor, text):
        doc = Document(text, len(text))
        return ActionAutoSuggest(editor).get_suggestion(MagicMock(), doc)

    def test_insert_hint(self):
        assert self.suggest(FakeEditor(Insert("lp")), "he").text == "lp"

    def test_no_hint_for_menu(self):
        assert self.suggest(FakeEditor(ShowCompletions(("a", "b"))), "") is None

    def test_trailing_comma(self):
        editor = FakeEditor(Insert("x"))
        assert self.suggest(editor, "a,") is None
        assert editor.calls == []


class TestTabBinding:

    def press_tab(self, editor, text, *, complete_state=None, max_line_size=9999):
        kb = tab_bindings(editor, max_line_size=max_line_size)
        (binding,) = kb.bindings
        event = MagicMock()
        buff = event.current_buffer
        buff.complete_state = complete_state
        buff.text = text
        buff.document = Document(text, len(text))
        binding.handler(event)
        return event, buff

    def test_insert(self):
        event, buff = self.press_tab(FakeEditor(Insert("lp")), "he")
        buff.insert_text.assert_called_once_with("lp")
        event.app.output.bell.assert_not_called()
        buff.start_completion.assert_not_called()

    def test_empty_insert_is_noop(self):
        event, buff = self.press_tab(FakeEditor(Insert("")), "he")
        buff.insert_text.assert_not_called()
        event.app.output.bell.assert_not_called()

    def test_empty_menu_rings_bell(self):
        event, buff = self.press_tab(FakeEditor(ShowCompletions()), "zz")
        event.app.output.bell.assert_called_once_with()
        buff.insert_text.assert_not_called()

    def test_menu_opens(self):
        event, buff = self.press_tab(FakeEditor(ShowCompletions(("a", "b"))), "")
        buff.start_completion.assert_called_once_with(select_first=False)

    def test_open_menu_cycles(self):
        editor = FakeEditor(ShowCompletions(("a", "b")))
        event, buff = self.press_tab(editor, "", complete_state=object())
        buff.complete_next.assert_called_once_with()
        assert editor.calls == []

    def test_trailing_comma_rings_bell(self):
        editor = FakeEditor(Insert("x"))
        event, buff = self.press_tab(editor, "a,")
        event.app.output.bell.assert_called_once_with()
        assert editor.calls == []

    def test_line_size_limit(self):
        event, buff = self.press_tab(FakeEditor(Insert("lp")), "he", max_line_size=3)
        buff.insert_text.assert_not_called()
        event.app.output.bell.assert_called_once_with()


class TestHintRows:

    def test_items_extending_word(self):
        action = ShowCompletions(("print", "printf", "sub"))
        assert hint_rows(action, "pr", 8) == ["print", "printf"]

    def test_limit(self):
        action = ShowCompletions(tuple(f"w{i}" for i in range(12)))
        assert len(hint_rows(action, "w", 8)) == 8

    def test_insert_has_no_rows(self):
        assert hint_rows(Insert("nt"), "pri", 8) == []

    def test_toolbar_lists_several(self):
        toolbar = HintToolbar(FakeEditor(ShowCompletions(("add", "sub"))), max_rows=8)
        assert toolbar.rows_for(Document("")) == ["add", "sub"]

    def test_toolbar_leaves_single_to_inline_hint(self):
        toolbar = HintToolbar(FakeEditor(ShowCompletions(("printf",))), max_rows=8)
        assert toolbar.rows_for(Document("pr")) == []

    def test_toolbar_respects_max_rows(self):
        toolbar = HintToolbar(FakeEditor(ShowCompletions(("a1", "a2", "a3"))), max_rows=2)
        assert toolbar.rows_for(Document("a")) == ["a1", "a2"]

    def test_toolbar_suppressed_after_comma(self):
        editor = FakeEditor(ShowCompletions(("a", "b")))
        assert HintToolbar(editor, max_rows=8).rows_for(Document("x,")) == []
        assert editor.calls == []

    def test_toolbar_fragments(self, monkeypatch):
        app = MagicMock()
        app.current_buffer.document = Document("s")
        monkeypatch.setattr("lineeditor.interface.callbacks.get_app", lambda: app)
        toolbar = HintToolbar(FakeEditor(ShowCompletions(("sub", "set"))), max_rows=8)
        assert toolbar() == [("class:hint", "sub\nset")]

    def test_toolbar_empty(self, monkeypatch):
        app = MagicMock()
        app.current_buffer.document = Document("zz")
        monkeypatch.setattr("lineeditor.interface.callbacks.get_app", lambda: app)
        assert HintToolbar(FakeEditor(ShowCompletions()), max_rows=8)() == []
