"""Inline emphasis: split block text into plain and emphasized spans.

Only `**text**` and `__text__` are recognised. Matching is non-greedy and left
to right; delimiters without a partner stay in the plain text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

_EMPHASIS_RE = re.compile(r"\*\*(.*?)\*\*|__(.*?)__")


@dataclass(frozen=True)
class PlainText:
    text: str


@dataclass(frozen=True)
class Emphasized:
    text: str


Span = Union[PlainText, Emphasized]


def resolve_emphasis(text: str) -> list[Span]:
    spans: list[Span] = []
    last = 0
    for m in _EMPHASIS_RE.finditer(text):
        if m.start() > last:
            spans.append(PlainText(text[last : m.start()]))
        inner = m.group(1) if m.group(1) is not None else m.group(2)
        spans.append(Emphasized(inner or ""))
        last = m.end()
    if last < len(text):
        spans.append(PlainText(text[last:]))
    return spans


def strip_emphasis(text: str) -> str:
    """Text with matched emphasis delimiters removed."""
    return "".join(s.text for s in resolve_emphasis(text))
