"""Tests for pi.lineedit.line_editor.LineEditor -- raw input to callbacks."""

from __future__ import annotations

from pi.lineedit.line_editor import LineEditor
from pi.lineedit.settings import LineEditorSettings

# Raw escape codes for key sequences
KEY_UP = "\x1b[A"
KEY_DOWN = "\x1b[B"
KEY_LEFT = "\x1b[D"
KEY_RIGHT = "\x1b[C"
KEY_HOME = "\x1b[H"
KEY_END = "\x1b[F"
KEY_ENTER = "\r"
KEY_SHIFT_ENTER = "\x1b[13;2u"
KEY_BACKSPACE = "\x7f"
KEY_DELETE = "\x1b[3~"
KEY_CTRL_DELETE = "\x1b[3;5~"
KEY_CTRL_BACKSPACE = "\x17"


class Collector:
    """Collects on_change/on_submit calls for assertions."""

    def __init__(self) -> None:
        self.changes: list[str] = []
        self.submits: list[str] = []

    def on_change(self, text: str) -> None:
        self.changes.append(text)

    def on_submit(self, text: str) -> None:
        self.submits.append(text)


def make_editor(**kwargs: object) -> tuple[LineEditor, Collector]:
    editor = LineEditor(**kwargs)  # type: ignore[arg-type]
    col = Collector()
    editor.on_change = col.on_change
    editor.on_submit = col.on_submit
    return editor, col


class TestTyping:
    def test_each_keystroke_reports_change(self) -> None:
        editor, col = make_editor()
        for ch in "hi":
            editor.handle_input(ch)
        assert editor.get_text() == "hi"
        assert col.changes == ["h", "hi"]

    def test_paste_in_one_chunk_is_one_line(self) -> None:
        editor, col = make_editor()
        editor.handle_input("first\r\nsecond")
        assert editor.get_text() == "first second"
        assert col.submits == []

    def test_pasted_blank_lines_do_not_submit(self) -> None:
        editor, col = make_editor()
        editor.handle_input("draft")
        editor.handle_input("\r\n\r\n")
        assert col.submits == []
        assert editor.get_text() == "draft "

    def test_bytes_input(self) -> None:
        editor, _ = make_editor()
        editor.handle_input("naïve".encode())
        assert editor.get_text() == "naïve"

    def test_shift_enter_then_enter(self) -> None:
        editor, col = make_editor()
        editor.handle_input("a")
        editor.handle_input(KEY_SHIFT_ENTER)
        editor.handle_input("b")
        editor.handle_input(KEY_ENTER)
        assert col.submits == ["a\nb"]


class TestSubmit:
    def test_submit_clears_by_default(self) -> None:
        editor, col = make_editor()
        editor.handle_input("hello")
        editor.handle_input(KEY_ENTER)
        assert col.submits == ["hello"]
        assert col.changes[-1] == ""
        assert editor.get_text() == ""
        assert editor.get_cursor() == 0

    def test_submit_keeps_text_when_clear_disabled(self) -> None:
        editor, col = make_editor(settings=LineEditorSettings(clear_on_submit=False))
        editor.handle_input("hello")
        editor.handle_input(KEY_ENTER)
        assert col.submits == ["hello"]
        assert editor.get_text() == "hello"

    def test_submit_exactly_once_per_return(self) -> None:
        editor, col = make_editor()
        editor.handle_input(KEY_ENTER)
        editor.handle_input(KEY_ENTER)
        assert col.submits == ["", ""]

    def test_command_completion_on_enter(self) -> None:
        editor, col = make_editor(commands=["help", "history", "hello"])
        editor.handle_input("/he")
        assert editor.is_showing_suggestions()
        assert editor.get_suggestions() == ["help", "hello"]
        editor.handle_input(KEY_DOWN)
        assert editor.get_selected_suggestion() == "hello"
        editor.handle_input(KEY_ENTER)
        assert col.submits == ["/hello"]

    def test_commands_read_from_callable_each_time(self) -> None:
        commands = ["alpha"]
        editor, col = make_editor(commands=lambda: commands)
        editor.handle_input("/a")
        commands.append("beta")
        assert editor.get_suggestions() == ["alpha", "beta"]


class TestHistory:
    def test_browse_and_return_to_draft(self) -> None:
        history = ["hello", "world"]
        editor, col = make_editor(history=history)
        editor.handle_input("dr")
        editor.handle_input(KEY_HOME)
        editor.handle_input(KEY_UP)
        assert editor.get_text() == "world"
        editor.handle_input(KEY_UP)
        assert editor.get_text() == "hello"
        editor.handle_input(KEY_DOWN)
        editor.handle_input(KEY_DOWN)
        assert editor.get_text() == "dr"
        assert editor.get_state().history_index == -1
        editor.handle_input(KEY_DOWN)
        assert editor.get_text() == "dr"

    def test_history_updates_seen_on_next_event(self) -> None:
        history: list[str] = []
        editor, _ = make_editor(history=lambda: history)
        editor.handle_input(KEY_UP)
        assert editor.get_text() == ""
        history.append("sent")
        editor.handle_input(KEY_UP)
        assert editor.get_text() == "sent"


class TestEditing:
    def test_word_deletion_keys(self) -> None:
        editor, _ = make_editor()
        editor.set_text("This is a sample text for testing")
        editor.set_cursor(10)
        editor.handle_input(KEY_CTRL_DELETE)
        assert editor.get_text() == "This is a text for testing"
        editor.handle_input(KEY_CTRL_BACKSPACE)
        assert editor.get_text() == "This is text for testing"

    def test_split_escape_sequence(self) -> None:
        editor, col = make_editor()
        editor.set_text("one two")
        editor.set_cursor(7)
        col.changes.clear()
        editor.handle_input("\x1b[1;5")
        assert editor.get_state().escape_buffer == "\x1b[1;5"
        assert editor.get_cursor() == 7
        editor.handle_input("D")
        assert editor.get_state().escape_buffer == ""
        assert editor.get_cursor() == 4
        assert col.changes == []

    def test_unknown_sequence_never_reaches_buffer(self) -> None:
        editor, col = make_editor()
        editor.handle_input("\x1b[24~")
        editor.handle_input("\x1bOP")
        assert editor.get_text() == ""
        assert col.changes == []

    def test_flush_drops_lone_escape(self) -> None:
        editor, _ = make_editor()
        editor.handle_input("\x1b")
        editor.flush()
        editor.handle_input("x")
        assert editor.get_text() == "x"

    def test_cursor_position_reports(self) -> None:
        editor, _ = make_editor()
        editor.set_text("ab\n世界")
        editor.set_cursor(5)
        assert editor.get_cursor_position() == (1, 2)
        assert editor.get_display_cursor() == (1, 4)


class TestSetText:
    def test_set_text_clamps_cursor(self) -> None:
        editor, _ = make_editor()
        editor.handle_input("hello world")
        editor.handle_input(KEY_LEFT)
        editor.set_text("hey")
        assert editor.get_cursor() == 3

    def test_set_empty_text_resets_history(self) -> None:
        editor, _ = make_editor(history=["old"])
        editor.handle_input(KEY_UP)
        assert editor.get_state().history_index == 0
        editor.set_text("")
        state = editor.get_state()
        assert (state.text, state.cursor, state.draft, state.history_index) == ("", 0, "", -1)

    def test_set_text_reports_change_only_when_different(self) -> None:
        editor, col = make_editor()
        editor.set_text("a")
        editor.set_text("a")
        assert col.changes == ["a"]
