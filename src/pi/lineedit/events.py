"""Logical key events produced by the decoder and effects emitted by the controller.

Each event is a small frozen dataclass; ``LogicalKeyEvent`` is the union of
all of them. Input that cannot be decoded never becomes an event, it is
dropped inside the decoder.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

# ---------------------------------------------------------------------------
# Key events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Char:
    """Literal text to insert at the cursor (one keystroke or a whole paste)."""

    text: str


@dataclass(frozen=True)
class Return:
    shift: bool = False


@dataclass(frozen=True)
class ArrowUp:
    pass


@dataclass(frozen=True)
class ArrowDown:
    pass


@dataclass(frozen=True)
class ArrowLeft:
    """Move left one character, or one word when ``ctrl`` is set."""

    ctrl: bool = False


@dataclass(frozen=True)
class ArrowRight:
    """Move right one character, or one word when ``ctrl`` is set."""

    ctrl: bool = False


@dataclass(frozen=True)
class Home:
    pass


@dataclass(frozen=True)
class End:
    pass


@dataclass(frozen=True)
class DeleteForward:
    ctrl: bool = False


@dataclass(frozen=True)
class DeleteBackward:
    ctrl: bool = False


@dataclass(frozen=True)
class KillToLineEnd:
    pass


LogicalKeyEvent = Union[
    Char,
    Return,
    ArrowUp,
    ArrowDown,
    ArrowLeft,
    ArrowRight,
    Home,
    End,
    DeleteForward,
    DeleteBackward,
    KillToLineEnd,
]

# ---------------------------------------------------------------------------
# Effects
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Change:
    """The buffer text changed to ``text``, or a history entry was loaded.

    A history load is reported even when the entry equals the previous text.
    """

    text: str


@dataclass(frozen=True)
class Submit:
    """The user accepted ``text`` with Return."""

    text: str


Effect = Union[Change, Submit]
