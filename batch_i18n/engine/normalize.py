# -*- coding: utf-8 -*-
"""Comment stripping for Vue/TS/JS sources.

Two renditions of the same scan are offered:

- ``normalize(text)`` drops every comment but keeps the newlines it contained, so the line
  structure of the buffer survives.
- ``mask_comments(text)`` blanks comment characters with spaces (newlines kept). The result
  has the same length as ``text``, so an offset found in the masked buffer is valid in the
  real one. Scanners and classifiers work on the masked buffer; rewrites splice the real one.

Malformed delimiters (an unterminated ``/*`` or ``<!--``) are left alone.
"""
from __future__ import annotations

import re
from typing import Callable, List, Tuple

# Alternation so that the earliest comment opener wins: "/* a // b */" is one block comment.
# "//" right after ":" (URLs) or a backslash is not a comment.
_COMMENT_RE = re.compile(
    r"/\*[\s\S]*?\*/"
    r"|<!--[\s\S]*?-->"
    r"|(?<![:\\])//[^\n]*"
)
# Shell-style "# note" lines. "#default" (slot shorthand) and "#id" selectors are not comments.
_SHELL_COMMENT_RE = re.compile(r"^[ \t]*#(?:[ \t!#][^\n]*)?$", re.M)


def comment_spans(text: str) -> List[Tuple[int, int]]:
    """Return sorted, non-overlapping ``(start, end)`` ranges of the comments in ``text``."""
    spans = [m.span() for m in _COMMENT_RE.finditer(text)]
    for m in _SHELL_COMMENT_RE.finditer(text):
        start, end = m.span()
        if start == end:
            continue
        if any(s <= start < e for s, e in spans):
            continue
        spans.append((start, end))
    spans.sort()
    return spans


def _rewrite_comments(text: str, fill: Callable[[str], str]) -> str:
    spans = comment_spans(text)
    if not spans:
        return text
    out = []
    pos = 0
    for start, end in spans:
        out.append(text[pos:start])
        out.append(fill(text[start:end]))
        pos = end
    out.append(text[pos:])
    return "".join(out)


def normalize(text: str) -> str:
    """Remove all comments, keeping the newlines that were inside them."""
    return _rewrite_comments(text, lambda c: "\n" * c.count("\n"))


def mask_comments(text: str) -> str:
    """Blank out comments with spaces; the result is exactly as long as ``text``."""
    return _rewrite_comments(text, lambda c: re.sub(r"[^\n]", " ", c))


def in_comment(spans: List[Tuple[int, int]], index: int) -> bool:
    return any(s <= index < e for s, e in spans)
