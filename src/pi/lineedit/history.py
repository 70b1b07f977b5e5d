"""Up/down navigation over previously submitted messages.

The history list is owned by the caller, oldest entry first, and is only
read. Browsing walks it most-recent-first: index 0 is the last entry.
"""

from __future__ import annotations

from typing import Sequence

from pi.lineedit.state import EditorState


class HistoryNavigator:
    """Moves ``EditorState`` between the live draft and history entries."""

    @staticmethod
    def _entry(history: Sequence[str], index: int) -> str:
        return history[len(history) - 1 - index]

    def _load(self, state: EditorState, history: Sequence[str], index: int) -> None:
        state.history_index = index
        state.buffer.set_text(self._entry(history, index))

    def can_go_up(self, state: EditorState, history: Sequence[str]) -> bool:
        """Up enters history from offset 0, and keeps walking it from the first line."""
        if not history:
            return False
        if state.cursor == 0:
            return True
        return state.history_index >= 0 and "\n" not in state.text[: state.cursor]

    def can_go_down(self, state: EditorState) -> bool:
        return state.cursor == len(state.text) and state.history_index >= 0

    def up(self, state: EditorState, history: Sequence[str]) -> bool:
        """Load the next older entry. Returns ``False`` at the oldest one."""
        if not history:
            return False
        if state.history_index == -1:
            state.draft = state.text

        current = min(state.history_index, len(history) - 1)
        new_index = min(current + 1, len(history) - 1)
        if new_index == state.history_index:
            return False
        self._load(state, history, new_index)
        return True

    def down(self, state: EditorState, history: Sequence[str]) -> bool:
        """Load the next newer entry, or restore the draft past the newest."""
        if state.history_index < 0:
            return False

        new_index = min(state.history_index - 1, len(history) - 1)
        if new_index < 0:
            state.history_index = -1
            state.buffer.set_text(state.draft)
            return True
        self._load(state, history, new_index)
        return True

    def reset(self, state: EditorState) -> None:
        """Leave browsing mode; the current text becomes the live buffer."""
        state.history_index = -1
        state.draft = ""
