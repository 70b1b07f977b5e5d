"""Editor state owned by one line editor instance."""

from __future__ import annotations

from dataclasses import dataclass, field

from pi.lineedit.text_buffer import TextBuffer


@dataclass
class EditorState:
    """Mutable state of one input session.

    ``history_index`` is ``-1`` while not browsing history, otherwise an
    index counted from the most recent entry. ``draft`` holds the text that
    was in the buffer when browsing started. ``escape_buffer`` mirrors the
    decoder's pending escape prefix.
    """

    buffer: TextBuffer = field(default_factory=TextBuffer)
    draft: str = ""
    history_index: int = -1
    selected_index: int = 0
    escape_buffer: str = ""

    @property
    def text(self) -> str:
        return self.buffer.text

    @property
    def cursor(self) -> int:
        return self.buffer.cursor
