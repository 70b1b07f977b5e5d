"""pi-lineedit: terminal prompt editor with history and command suggestions."""

# Controller and state
from pi.lineedit.controller import LineEditorController

# Input decoding
from pi.lineedit.decoder import InputDecoder, decode

# Events and effects
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

# Component
from pi.lineedit.line_editor import LineEditor
from pi.lineedit.overlay import OverlaySelector

# Settings
from pi.lineedit.settings import LineEditorSettings, load_settings
from pi.lineedit.state import EditorState
from pi.lineedit.text_buffer import TextBuffer

__all__ = [
    # Controller and state
    "EditorState",
    "HistoryNavigator",
    "LineEditorController",
    "OverlaySelector",
    "TextBuffer",
    # Decoder
    "InputDecoder",
    "decode",
    # Events
    "ArrowDown",
    "ArrowLeft",
    "ArrowRight",
    "ArrowUp",
    "Char",
    "DeleteBackward",
    "DeleteForward",
    "End",
    "Home",
    "KillToLineEnd",
    "LogicalKeyEvent",
    "Return",
    # Effects
    "Change",
    "Effect",
    "Submit",
    # Component
    "LineEditor",
    # Settings
    "LineEditorSettings",
    "load_settings",
]
