"""Dispatch logical key events against the editor state.

``LineEditorController.handle`` processes one event to completion, mutates
the given ``EditorState`` in place and returns it together with the effects
the caller should deliver (``Change`` and ``Submit``).

Dispatch order, first match wins:

1. shift+Return inserts a newline.
2. Return with the overlay active commits the selected command.
3. Return otherwise submits the text unchanged.
4. Up/Down with the overlay active move the selection.
5. Up/Down at a history boundary browse history.
6. Up/Down otherwise move between lines.
7. Left/Right move by character, or by word with ctrl.
8. Home/End go to the line boundaries.
9. Delete/Backspace remove a character, or a word with ctrl.
10. Kill removes the rest of the line.
11. Char inserts text.

Every text mutation outside history browsing resets the suggestion
selection and leaves history browsing. A history load always reports a
``Change``.
"""

from __future__ import annotations

from typing import Sequence

from pi.lineedit.events import (
    ArrowDown,
    ArrowLeft,
    ArrowRight,
    ArrowUp,
    Change,
    Char,
    DeleteBackward,
    DeleteForward,
    Effect,
    End,
    Home,
    KillToLineEnd,
    LogicalKeyEvent,
    Return,
    Submit,
)
from pi.lineedit.history import HistoryNavigator
from pi.lineedit.overlay import DEFAULT_COMMAND_PREFIX, OverlaySelector
from pi.lineedit.state import EditorState
from pi.lineedit.utils import next_grapheme_length, previous_grapheme_length


class LineEditorController:
    """Stateless dispatcher; all mutable state lives in ``EditorState``."""

    def __init__(self, *, command_prefix: str = DEFAULT_COMMAND_PREFIX) -> None:
        self.history = HistoryNavigator()
        self.overlay = OverlaySelector(command_prefix)

    def handle(
        self,
        event: LogicalKeyEvent,
        state: EditorState,
        history: Sequence[str] = (),
        commands: Sequence[str] = (),
    ) -> tuple[EditorState, list[Effect]]:
        effects: list[Effect] = []
        before = state.text
        loaded = False
        buf = state.buffer

        match event:
            case Return(shift=True):
                buf.insert(buf.cursor, "\n")
            case Return():
                if self.overlay.is_active(state.text):
                    effects.append(Submit(self.overlay.commit(state, commands)))
                else:
                    effects.append(Submit(state.text))
            case ArrowUp():
                loaded = self._vertical(state, history, commands, up=True)
            case ArrowDown():
                loaded = self._vertical(state, history, commands, up=False)
            case ArrowLeft(ctrl=True):
                buf.set_cursor(buf.word_backward())
            case ArrowLeft():
                buf.move_by(-previous_grapheme_length(buf.text, buf.cursor))
            case ArrowRight(ctrl=True):
                buf.set_cursor(buf.word_forward())
            case ArrowRight():
                buf.move_by(next_grapheme_length(buf.text, buf.cursor))
            case Home():
                buf.set_cursor(buf.line_start())
            case End():
                buf.set_cursor(buf.line_end())
            case DeleteForward(ctrl=True):
                buf.delete_range(buf.cursor, buf.word_delete_end())
            case DeleteForward():
                buf.delete_range(buf.cursor, buf.cursor + next_grapheme_length(buf.text, buf.cursor))
            case DeleteBackward(ctrl=True):
                buf.delete_range(buf.word_backward(), buf.cursor)
            case DeleteBackward():
                buf.delete_range(buf.cursor - previous_grapheme_length(buf.text, buf.cursor), buf.cursor)
            case KillToLineEnd():
                buf.kill_to_line_end()
            case Char(text=text):
                buf.insert(buf.cursor, text)

        if loaded:
            # reported even when the entry equals the text it replaced
            self.overlay.refresh(state, commands)
            effects.append(Change(state.text))
        elif state.text != before:
            state.selected_index = 0
            self.history.reset(state)
            effects.insert(0, Change(state.text))

        return state, effects

    def _vertical(
        self,
        state: EditorState,
        history: Sequence[str],
        commands: Sequence[str],
        *,
        up: bool,
    ) -> bool:
        """Apply Up/Down; returns ``True`` when a history entry or the draft was loaded."""
        if self.overlay.is_active(state.text):
            self.overlay.move(state, commands, -1 if up else 1)
        elif up and self.history.can_go_up(state, history):
            return self.history.up(state, history)
        elif not up and self.history.can_go_down(state):
            return self.history.down(state, history)
        elif up:
            state.buffer.line_up()
        else:
            state.buffer.line_down()
        return False
