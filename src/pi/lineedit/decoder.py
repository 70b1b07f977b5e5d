"""Decode raw terminal input into logical key events.

Terminal reads arrive in arbitrary chunks, so an escape sequence can be
split across two reads. The decoder keeps the unfinished tail of such a
sequence as a pending buffer and re-evaluates it when the next chunk
arrives. The buffer is always either empty or a prefix of an escape
sequence that can still complete; anything that can no longer complete is
dropped without producing an event. A sequence that outgrows the length
limit before its final byte stays pending in truncated form, so the rest of
it is discarded too.

Plain text is never held back: characters before and after an escape
sequence are emitted as soon as they are seen.
"""

from __future__ import annotations

import codecs
import logging
import re

from pi.lineedit.events import (
    ArrowDown,
    ArrowLeft,
    ArrowRight,
    ArrowUp,
    Char,
    DeleteBackward,
    DeleteForward,
    End,
    Home,
    KillToLineEnd,
    LogicalKeyEvent,
    Return,
)
from pi.lineedit.utils import collapse_newlines

logger = logging.getLogger(__name__)

ESC = "\x1b"
BRACKETED_PASTE_START = "\x1b[200~"
BRACKETED_PASTE_END = "\x1b[201~"
DEFAULT_MAX_ESCAPE_LENGTH = 32

# xterm modifier parameter is 1 + bitmask
MODIFIERS: dict[str, int] = {
    "shift": 1,
    "alt": 2,
    "ctrl": 4,
}

ENTER_CODEPOINT = 13
BACKSPACE_CODEPOINT = 127

# ---------------------------------------------------------------------------
# Key tables
# ---------------------------------------------------------------------------

# Single control bytes outside escape sequences.
CONTROL_KEYS: dict[str, LogicalKeyEvent] = {
    "\x01": Home(),  # ctrl+a
    "\x02": ArrowLeft(),  # ctrl+b
    "\x05": End(),  # ctrl+e
    "\x06": ArrowRight(),  # ctrl+f
    "\x08": DeleteBackward(),
    "\x0b": KillToLineEnd(),  # ctrl+k
    "\x17": DeleteBackward(ctrl=True),  # ctrl+w / ctrl+backspace
    "\x7f": DeleteBackward(),
}

# ESC followed by one byte (alt/meta prefix).
META_KEYS: dict[str, LogicalKeyEvent] = {
    "f": ArrowRight(ctrl=True),
    "b": ArrowLeft(ctrl=True),
    "d": DeleteForward(ctrl=True),
    "\x7f": DeleteBackward(ctrl=True),
    "\x08": DeleteBackward(ctrl=True),
    "\r": Return(shift=True),
}

# ESC O <final>
SS3_KEYS: dict[str, LogicalKeyEvent] = {
    "A": ArrowUp(),
    "B": ArrowDown(),
    "C": ArrowRight(),
    "D": ArrowLeft(),
    "H": Home(),
    "F": End(),
}

# First parameter of ESC [ <n> ~
TILDE_HOME = frozenset({1, 7})
TILDE_END = frozenset({4, 8})
TILDE_DELETE = 3
TILDE_MODIFY_OTHER_KEYS = 27

_CSI_BODY_RE = re.compile(r"[0-9;]*")
# Text keeps TAB, CR and LF; every other C0 control (ESC included), DEL and
# the C1 controls (8-bit CSI among them) end the run.
_TEXT_RUN_RE = re.compile(r"[^\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]+")
_PASTE_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
_ENTER_RUNS = frozenset({"\r", "\r\n"})

_COMPLETE = "complete"
_INCOMPLETE = "incomplete"
_DISCARDING = "discarding"
_INVALID = "invalid"


def _modifier_flags(code: int) -> tuple[bool, bool, bool]:
    """Return ``(shift, alt, ctrl)`` for an xterm modifier parameter."""
    mod = max(code - 1, 0)
    return (
        bool(mod & MODIFIERS["shift"]),
        bool(mod & MODIFIERS["alt"]),
        bool(mod & MODIFIERS["ctrl"]),
    )


def _csi_event(body: str, final: str) -> LogicalKeyEvent | None:  # noqa: C901
    """Map a complete ``ESC [ body final`` sequence to an event, or ``None``."""
    if not _CSI_BODY_RE.fullmatch(body):
        return None
    params = [int(p) if p else 1 for p in body.split(";")] if body else []

    if final in "ABCDHF":
        # ESC[1;5C carries the modifier second; legacy ESC[5C carries it alone.
        if len(params) >= 2:
            code = params[1]
        elif params:
            code = params[0]
        else:
            code = 1
        _, alt, ctrl = _modifier_flags(code)
        word = ctrl or alt
        if final == "A":
            return ArrowUp()
        if final == "B":
            return ArrowDown()
        if final == "C":
            return ArrowRight(ctrl=word)
        if final == "D":
            return ArrowLeft(ctrl=word)
        if final == "H":
            return Home()
        return End()

    if final == "~":
        if not params:
            return None
        key = params[0]
        code = params[1] if len(params) >= 2 else 1
        shift, alt, ctrl = _modifier_flags(code)
        if key == TILDE_MODIFY_OTHER_KEYS:
            # CSI 27 ; modifier ; keycode ~
            if len(params) >= 3 and params[2] == ENTER_CODEPOINT:
                return Return(shift=shift)
            return None
        if key == TILDE_DELETE:
            return DeleteForward(ctrl=ctrl or alt)
        if key in TILDE_HOME:
            return Home()
        if key in TILDE_END:
            return End()
        return None

    if final == "u" and params:
        # kitty keyboard protocol: CSI codepoint ; modifier u
        code = params[1] if len(params) >= 2 else 1
        shift, alt, ctrl = _modifier_flags(code)
        if params[0] == ENTER_CODEPOINT:
            return Return(shift=shift)
        if params[0] == BACKSPACE_CODEPOINT:
            return DeleteBackward(ctrl=ctrl or alt)

    return None


def _clean_paste(content: str, collapse: bool) -> str:
    content = _PASTE_CONTROL_RE.sub("", content)
    if collapse:
        return collapse_newlines(content)
    return content.replace("\r\n", "\n").replace("\r", "\n")


def _text_event(run: str, collapse: bool) -> LogicalKeyEvent:
    if run == "\n":
        # LF on its own is ctrl+j, which terminals also send for shift+enter
        return Return(shift=True)
    if run in _ENTER_RUNS:
        return Return()
    # anything longer is pasted text, even if it is only blank lines
    if collapse:
        return Char(collapse_newlines(run))
    return Char(run.replace("\r\n", "\n").replace("\r", "\n"))


def _scan_escape(
    buf: str, pos: int, *, max_length: int, collapse: bool
) -> tuple[str, int, LogicalKeyEvent | None]:
    """Classify the escape sequence starting at ``buf[pos]``.

    Returns ``(status, consumed, event)``. ``incomplete`` means the rest of
    *buf* is a valid prefix that needs more input. ``discarding`` means it is
    an over-long sequence still waiting for its final byte. ``invalid`` means the
    first *consumed* characters can never complete and the character after
    them must be decoded on its own.
    """
    if len(buf) - pos == 1:
        return _INCOMPLETE, 0, None

    lead = buf[pos + 1]

    # CSI: ESC [ <parameter/intermediate bytes> <final byte>
    if lead == "[":
        i = pos + 2
        while i < len(buf) and "\x20" <= buf[i] <= "\x3f":
            i += 1
        if i - pos > max_length:
            if i >= len(buf):
                # no final byte yet; its tail must not come back as text
                return _DISCARDING, 0, None
            # swallow the whole over-long sequence, final byte included
            if "\x40" <= buf[i] <= "\x7e":
                i += 1
            return _INVALID, i - pos, None
        if i >= len(buf):
            return _INCOMPLETE, 0, None
        final = buf[i]
        if not "\x40" <= final <= "\x7e":
            return _INVALID, i - pos, None

        if buf[pos : i + 1] == BRACKETED_PASTE_START:
            end = buf.find(BRACKETED_PASTE_END, i + 1)
            if end == -1:
                return _INCOMPLETE, 0, None
            content = _clean_paste(buf[i + 1 : end], collapse)
            consumed = end + len(BRACKETED_PASTE_END) - pos
            return _COMPLETE, consumed, Char(content) if content else None

        return _COMPLETE, i + 1 - pos, _csi_event(buf[pos + 2 : i], final)

    # SS3: ESC O <final byte>
    if lead == "O":
        if len(buf) - pos == 2:
            return _INCOMPLETE, 0, None
        final = buf[pos + 2]
        if "\x40" <= final <= "\x7e":
            return _COMPLETE, 3, SS3_KEYS.get(final)
        return _INVALID, 2, None

    # ESC ESC: the first one can no longer start anything
    if lead == ESC:
        return _INVALID, 1, None

    return _COMPLETE, 2, META_KEYS.get(lead)


def decode(
    data: str,
    pending: str = "",
    *,
    max_escape_length: int = DEFAULT_MAX_ESCAPE_LENGTH,
    collapse_pasted_newlines: bool = True,
) -> tuple[list[LogicalKeyEvent], str]:
    """Decode *data* appended to a *pending* escape prefix.

    Returns ``(events, pending)`` where the new *pending* is the unfinished
    escape prefix at the end of the input, or ``""``.
    """
    buf = pending + data
    events: list[LogicalKeyEvent] = []
    pos = 0

    while pos < len(buf):
        ch = buf[pos]

        if ch == ESC:
            status, consumed, event = _scan_escape(
                buf,
                pos,
                max_length=max_escape_length,
                collapse=collapse_pasted_newlines,
            )
            if status == _INCOMPLETE:
                return events, buf[pos:]
            if status == _DISCARDING:
                # Keep a bounded stand-in: still over-long on the next call,
                # so the rest of the sequence is swallowed up to its final byte.
                logger.debug("Discarding over-long escape sequence %r", buf[pos:])
                return events, buf[pos : pos + max_escape_length + 1]
            if event is not None:
                events.append(event)
            else:
                logger.debug("Dropped %s escape sequence %r", status, buf[pos : pos + consumed])
            pos += consumed
            continue

        run = _TEXT_RUN_RE.match(buf, pos)
        if run:
            events.append(_text_event(run.group(), collapse_pasted_newlines))
            pos = run.end()
            continue

        event = CONTROL_KEYS.get(ch)
        if event is not None:
            events.append(event)
        else:
            logger.debug("Dropped control byte %r", ch)
        pos += 1

    return events, ""


class InputDecoder:
    """Stateful decoder that owns the pending escape prefix.

    The pending prefix is reset when a sequence completes, when it can no
    longer complete, and on ``flush()``/``reset()``. Hosts that see a lone
    ESC sit idle should call ``flush()`` since ESC alone is a valid prefix.
    """

    def __init__(
        self,
        *,
        max_escape_length: int = DEFAULT_MAX_ESCAPE_LENGTH,
        collapse_pasted_newlines: bool = True,
    ) -> None:
        self._buffer: str = ""
        self._max_escape_length = max_escape_length
        self._collapse_pasted_newlines = collapse_pasted_newlines
        self._utf8 = codecs.getincrementaldecoder("utf-8")(errors="replace")

    def feed(self, data: str | bytes) -> list[LogicalKeyEvent]:
        """Decode one chunk of input and return the events it completes."""
        if isinstance(data, (bytes, bytearray)):
            data = self._utf8.decode(bytes(data))
        events, self._buffer = decode(
            data,
            self._buffer,
            max_escape_length=self._max_escape_length,
            collapse_pasted_newlines=self._collapse_pasted_newlines,
        )
        return events

    def flush(self) -> str:
        """Discard the pending escape prefix and return what was discarded."""
        dropped = self._buffer
        self._buffer = ""
        if dropped:
            logger.debug("Flushed pending escape prefix %r", dropped)
        return dropped

    def reset(self) -> None:
        self._buffer = ""
        self._utf8.reset()

    def get_buffer(self) -> str:
        return self._buffer
