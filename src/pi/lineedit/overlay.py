"""Command suggestion overlay shown while the buffer starts with the command prefix."""

from __future__ import annotations

import logging
from typing import Sequence

from pi.lineedit.state import EditorState

logger = logging.getLogger(__name__)

DEFAULT_COMMAND_PREFIX = "/"


class OverlaySelector:
    """Filters command names by the typed text and tracks the selected one.

    Filtering is a case-insensitive substring match that keeps the order of
    the command list. The selection never wraps around.
    """

    def __init__(self, prefix: str = DEFAULT_COMMAND_PREFIX) -> None:
        self.prefix = prefix

    def is_active(self, text: str) -> bool:
        return text.startswith(self.prefix)

    def filter(self, text: str, commands: Sequence[str]) -> list[str]:
        if not self.is_active(text):
            return []
        search = text[len(self.prefix) :].lower()
        return [name for name in commands if search in name.lower()]

    def _clamp(self, state: EditorState, count: int) -> None:
        state.selected_index = max(0, min(state.selected_index, count - 1))

    def refresh(self, state: EditorState, commands: Sequence[str]) -> list[str]:
        """Recompute suggestions after a text change and clamp the selection."""
        filtered = self.filter(state.text, commands)
        self._clamp(state, len(filtered))
        return filtered

    def move(self, state: EditorState, commands: Sequence[str], delta: int) -> None:
        filtered = self.filter(state.text, commands)
        state.selected_index += delta
        self._clamp(state, len(filtered))

    def selected(self, state: EditorState, commands: Sequence[str]) -> str | None:
        filtered = self.filter(state.text, commands)
        if not filtered:
            return None
        if 0 <= state.selected_index < len(filtered):
            return filtered[state.selected_index]
        return filtered[0]

    def commit(self, state: EditorState, commands: Sequence[str]) -> str:
        """Text to submit: prefix plus the chosen command, or the raw text."""
        choice = self.selected(state, commands)
        if choice is None:
            logger.debug("No command matches %r, submitting it unchanged", state.text)
            return state.text
        return self.prefix + choice
