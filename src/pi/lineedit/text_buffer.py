"""Text buffer with a cursor offset and line/word boundary queries.

All offsets are code-point indices into ``text``. Out-of-range arguments
are clamped into ``[0, len(text)]`` rather than rejected.
"""

from __future__ import annotations

from dataclasses import dataclass

from pi.lineedit.utils import is_whitespace_char, visible_width


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


@dataclass
class TextBuffer:
    """Editable text plus cursor. Invariant: ``0 <= cursor <= len(text)``."""

    text: str = ""
    cursor: int = 0

    def __post_init__(self) -> None:
        self.cursor = _clamp(self.cursor, 0, len(self.text))

    # -- Whole-buffer access -------------------------------------------------

    @property
    def lines(self) -> list[str]:
        return self.text.split("\n")

    def set_text(self, text: str, cursor: int | None = None) -> None:
        """Replace the text; the cursor goes to *cursor* or the end."""
        self.text = text
        self.cursor = _clamp(len(text) if cursor is None else cursor, 0, len(text))

    def set_cursor(self, offset: int) -> None:
        self.cursor = _clamp(offset, 0, len(self.text))

    def _offset(self, at: int | None) -> int:
        return self.cursor if at is None else _clamp(at, 0, len(self.text))

    # -- Mutation ------------------------------------------------------------

    def insert(self, at: int, s: str) -> None:
        """Splice *s* into the text at *at*.

        A cursor at or after *at* advances by ``len(s)``.
        """
        at = _clamp(at, 0, len(self.text))
        self.text = self.text[:at] + s + self.text[at:]
        if self.cursor >= at:
            self.cursor += len(s)

    def delete_range(self, start: int, end: int) -> str:
        """Remove ``[start, end)`` and return the removed text."""
        start = _clamp(start, 0, len(self.text))
        end = _clamp(end, 0, len(self.text))
        if start > end:
            start, end = end, start
        removed = self.text[start:end]
        if not removed:
            return ""

        self.text = self.text[:start] + self.text[end:]
        if self.cursor >= end:
            self.cursor -= end - start
        elif self.cursor > start:
            self.cursor = start
        return removed

    def kill_to_line_end(self, at: int | None = None) -> str:
        """Delete from *at* to the end of its line (not the buffer)."""
        at = self._offset(at)
        end = self.line_end(at)
        if end <= at:
            return ""
        return self.delete_range(at, end)

    # -- Cursor movement -----------------------------------------------------

    def move_by(self, delta: int) -> None:
        self.cursor = _clamp(self.cursor + delta, 0, len(self.text))

    def line_up(self) -> None:
        """Move to the previous line at the same column, clamped to its length.

        On the first line the cursor goes to the start of the buffer.
        """
        line, column = self.line_column_of(self.cursor)
        if line == 0:
            self.cursor = 0
            return
        target_start = self.line_start(self.line_start(self.cursor) - 1)
        target_length = self.line_end(target_start) - target_start
        self.cursor = target_start + min(column, target_length)

    def line_down(self) -> None:
        """Move to the next line at the same column, clamped to its length.

        On the last line the cursor goes to the end of the buffer.
        """
        line, column = self.line_column_of(self.cursor)
        if line >= self.text.count("\n"):
            self.cursor = len(self.text)
            return
        target_start = self.line_end(self.cursor) + 1
        target_length = self.line_end(target_start) - target_start
        self.cursor = target_start + min(column, target_length)

    # -- Boundary queries ----------------------------------------------------

    def word_backward(self, at: int | None = None) -> int:
        """Skip whitespace leftward, then the word before it."""
        pos = self._offset(at)
        while pos > 0 and is_whitespace_char(self.text[pos - 1]):
            pos -= 1
        while pos > 0 and not is_whitespace_char(self.text[pos - 1]):
            pos -= 1
        return pos

    def word_forward(self, at: int | None = None) -> int:
        """Skip the rest of the current word, then the whitespace after it."""
        pos = self._offset(at)
        while pos < len(self.text) and not is_whitespace_char(self.text[pos]):
            pos += 1
        while pos < len(self.text) and is_whitespace_char(self.text[pos]):
            pos += 1
        return pos

    def word_delete_end(self, at: int | None = None) -> int:
        """End of a forward word deletion: leading whitespace, the word, trailing whitespace."""
        pos = self._offset(at)
        while pos < len(self.text) and is_whitespace_char(self.text[pos]):
            pos += 1
        return self.word_forward(pos)

    def line_start(self, at: int | None = None) -> int:
        at = self._offset(at)
        return self.text.rfind("\n", 0, at) + 1

    def line_end(self, at: int | None = None) -> int:
        at = self._offset(at)
        end = self.text.find("\n", at)
        return len(self.text) if end == -1 else end

    def line_column_of(self, at: int | None = None) -> tuple[int, int]:
        """Return ``(line_index, column)`` of offset *at*."""
        at = self._offset(at)
        return self.text.count("\n", 0, at), at - self.line_start(at)

    def display_position(self) -> tuple[int, int]:
        """Cursor ``(line_index, cell_column)`` measured in terminal cells."""
        line, _ = self.line_column_of(self.cursor)
        return line, visible_width(self.text[self.line_start(self.cursor) : self.cursor])
