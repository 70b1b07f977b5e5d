"""Text helpers: whitespace classes, grapheme stepping and display width."""

from __future__ import annotations

import re

import grapheme
import wcwidth as _wcwidth

_NEWLINE_RUN_RE = re.compile(r"[\r\n]+")


def is_whitespace_char(char: str) -> bool:
    """Return ``True`` if *char* is a whitespace character."""
    return char in (" ", "\t", "\n", "\r", "\f", "\v")


def collapse_newlines(text: str) -> str:
    """Replace every run of CR/LF characters with a single space."""
    return _NEWLINE_RUN_RE.sub(" ", text)


def previous_grapheme_length(text: str, offset: int) -> int:
    """Length in code points of the grapheme cluster ending at *offset*."""
    if offset <= 0:
        return 0
    clusters = list(grapheme.graphemes(text[:offset]))
    return len(clusters[-1]) if clusters else 1


def next_grapheme_length(text: str, offset: int) -> int:
    """Length in code points of the grapheme cluster starting at *offset*."""
    if offset >= len(text):
        return 0
    for cluster in grapheme.graphemes(text[offset:]):
        return len(cluster)
    return 1


def _cluster_width(cluster: str) -> int:
    # Control characters and combining marks occupy no cells.
    if len(cluster) == 1:
        cp = ord(cluster)
        if cp < 0x20 or 0x7F <= cp <= 0x9F:
            return 0
        return max(_wcwidth.wcwidth(cluster), 0)
    if "\u200d" in cluster or "\ufe0f" in cluster:
        return 2
    return max(_wcwidth.wcswidth(cluster), _wcwidth.wcwidth(cluster[0]), 0)


def visible_width(text: str) -> int:
    """Calculate the terminal cell width of *text*.

    Tabs count as 3 cells. ASCII takes a fast path; everything else is
    measured per grapheme cluster.
    """
    if not text:
        return 0

    text = text.replace("\t", "   ")
    if text.isascii() and text.isprintable():
        return len(text)

    return sum(_cluster_width(g) for g in grapheme.graphemes(text))
