"""Line editor component: raw terminal input in, ``on_change``/``on_submit`` out."""

from __future__ import annotations

from typing import Callable, Sequence, Union

from pi.lineedit.controller import LineEditorController
from pi.lineedit.decoder import InputDecoder
from pi.lineedit.events import Change, LogicalKeyEvent, Submit
from pi.lineedit.settings import LineEditorSettings
from pi.lineedit.state import EditorState

# A fixed sequence, or a callable returning the current one.
StringSource = Union[Sequence[str], Callable[[], Sequence[str]]]


def _snapshot(source: StringSource) -> tuple[str, ...]:
    return tuple(source() if callable(source) else source)


class LineEditor:
    """Multi-line prompt editor with history browsing and command suggestions.

    ``commands`` and ``history`` are owned by the host. They are read again
    (and copied) for every event, so the host may replace them at any time.
    """

    def __init__(
        self,
        *,
        commands: StringSource = (),
        history: StringSource = (),
        settings: LineEditorSettings | None = None,
    ) -> None:
        if settings is None:
            settings = LineEditorSettings()
        self.settings = settings

        self._decoder = InputDecoder(
            max_escape_length=settings.max_escape_length,
            collapse_pasted_newlines=settings.collapse_pasted_newlines,
        )
        self._controller = LineEditorController(command_prefix=settings.command_prefix)
        self._state = EditorState()
        self._commands = commands
        self._history = history

        # Public callbacks
        self.on_change: Callable[[str], None] | None = None
        self.on_submit: Callable[[str], None] | None = None

    # -- Sources -------------------------------------------------------------

    def set_commands(self, commands: StringSource) -> None:
        self._commands = commands

    def set_history(self, history: StringSource) -> None:
        self._history = history

    # -- Input ---------------------------------------------------------------

    def handle_input(self, data: str | bytes) -> None:
        """Feed one chunk of raw terminal input."""
        events = self._decoder.feed(data)
        self._state.escape_buffer = self._decoder.get_buffer()
        for event in events:
            self.handle_event(event)

    def handle_event(self, event: LogicalKeyEvent) -> None:
        _, effects = self._controller.handle(
            event,
            self._state,
            _snapshot(self._history),
            _snapshot(self._commands),
        )
        for effect in effects:
            if isinstance(effect, Change):
                if self.on_change:
                    self.on_change(effect.text)
            elif isinstance(effect, Submit):
                self._submit(effect.text)

    def flush(self) -> None:
        """Drop a pending escape prefix, e.g. a lone ESC the host timed out on."""
        self._decoder.flush()
        self._state.escape_buffer = ""

    def _submit(self, text: str) -> None:
        if self.settings.clear_on_submit:
            self._reset_after_submit()
        if self.on_submit:
            self.on_submit(text)

    def _reset_after_submit(self) -> None:
        had_text = bool(self._state.text)
        escape_buffer = self._state.escape_buffer
        self._state = EditorState(escape_buffer=escape_buffer)
        if had_text and self.on_change:
            self.on_change("")

    # -- Text access ---------------------------------------------------------

    def get_text(self) -> str:
        return self._state.text

    def set_text(self, text: str) -> None:
        """Replace the text from outside, as the host does after a submit.

        The cursor is kept where it was, clamped to the new text. Setting
        empty text also resets the cursor, the draft and history browsing.
        """
        changed = text != self._state.text
        if text:
            self._state.buffer.set_text(text, self._state.cursor)
        else:
            self._state.buffer.set_text("")
            self._state.draft = ""
            self._state.history_index = -1
        self._controller.overlay.refresh(self._state, _snapshot(self._commands))
        if changed and self.on_change:
            self.on_change(text)

    def get_cursor(self) -> int:
        return self._state.cursor

    def set_cursor(self, offset: int) -> None:
        self._state.buffer.set_cursor(offset)

    def get_cursor_position(self) -> tuple[int, int]:
        """Cursor ``(line, column)`` in characters."""
        return self._state.buffer.line_column_of()

    def get_display_cursor(self) -> tuple[int, int]:
        """Cursor ``(line, column)`` in terminal cells."""
        return self._state.buffer.display_position()

    def get_state(self) -> EditorState:
        return self._state

    # -- Suggestions ---------------------------------------------------------

    def is_showing_suggestions(self) -> bool:
        return self._controller.overlay.is_active(self._state.text)

    def get_suggestions(self) -> list[str]:
        return self._controller.overlay.filter(self._state.text, _snapshot(self._commands))

    def get_selected_suggestion(self) -> str | None:
        return self._controller.overlay.selected(self._state, _snapshot(self._commands))
